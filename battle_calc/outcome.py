"""Ranking of battle results.

The optimiser keeps whichever candidate state compares better.  The defender's
fate dominates: converting it is always best.  When neither state converted the
defender the unit comparison is inverted, so a weaker surviving defender ranks
higher.  Only when the defenders cannot be told apart do the attackers' losses
decide.
"""
from __future__ import annotations

from enum import Enum

from .battle_state import BattleState
from .units import Unit


class Preference(Enum):
    BETTER = "better"
    WORSE = "worse"
    INDETERMINATE = "indeterminate"

    @property
    def is_determinate(self) -> bool:
        return self is not Preference.INDETERMINATE

    def negate(self) -> "Preference":
        if self is Preference.BETTER:
            return Preference.WORSE
        if self is Preference.WORSE:
            return Preference.BETTER
        return self


def unit_is_better(unit: Unit, other: Unit) -> Preference:
    if unit.health > other.health:
        return Preference.BETTER
    if other.health > unit.health:
        return Preference.WORSE
    if not unit.frozen and other.frozen:
        return Preference.BETTER
    if unit.frozen and not other.frozen:
        return Preference.WORSE
    return Preference.INDETERMINATE


def defender_is_better(state: BattleState, other: BattleState) -> Preference:
    if state.defender.converted and not other.defender.converted:
        return Preference.BETTER
    if other.defender.converted and not state.defender.converted:
        return Preference.WORSE
    preference = unit_is_better(state.defender, other.defender)
    if state.defender.converted:
        return preference
    return preference.negate()


def attackers_are_better(state: BattleState, other: BattleState) -> bool:
    """Fewer dead attackers wins.

    Equal losses return False, so the state passed as ``other`` is kept.
    Remaining attacker health is not compared.
    """
    return state.count_dead() < other.count_dead()


def state_is_better(state: BattleState, other: BattleState) -> bool:
    preference = defender_is_better(state, other)
    if preference.is_determinate:
        return preference is Preference.BETTER
    return attackers_are_better(state, other)


__all__ = [
    "Preference",
    "unit_is_better",
    "defender_is_better",
    "attackers_are_better",
    "state_is_better",
]
