"""Brute-force search for the best order of attack."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, cast

from .battle_state import BattleState
from .combat import resolve_sequence
from .outcome import state_is_better
from .permutations import attacker_orderings

logger = logging.getLogger("battle_calc.optimizer")


class NoAttackersError(ValueError):
    """Raised when there are no attackers to put in order."""


class TooManyAttackersError(ValueError):
    """Raised when the attacker count exceeds the configured search limit."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"{count} attackers exceeds the optimiser limit of {limit}")
        self.count = count
        self.limit = limit


def optimise_battle(
    state: BattleState,
    max_attackers: Optional[int] = None,
) -> Tuple[List[int], BattleState]:
    """Calculate the best order of attack.

    Every ordering of ``state.attackers`` is simulated on fresh copies of the
    units, so ``state`` itself is left untouched.  Returns the winning order
    (indices into ``state.attackers``) and the battle state it produced.  When
    two orders rank equally the one enumerated first is kept.
    """
    count = len(state.attackers)
    if count == 0:
        raise NoAttackersError("at least one attacker is required to optimise a battle")
    if max_attackers is not None and count > max_attackers:
        raise TooManyAttackersError(count, max_attackers)

    best_order: Optional[List[int]] = None
    best_state: Optional[BattleState] = None
    evaluated = 0
    for order in attacker_orderings(count):
        candidate = state.reordered(order)
        resolve_sequence(candidate)
        evaluated += 1
        if best_state is None or state_is_better(candidate, best_state):
            best_order = order
            best_state = candidate

    logger.debug("Evaluated %d orderings of %d attackers, best %s", evaluated, count, best_order)
    return cast(List[int], best_order), cast(BattleState, best_state)


__all__ = ["optimise_battle", "NoAttackersError", "TooManyAttackersError"]
