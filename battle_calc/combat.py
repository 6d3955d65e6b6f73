"""Combat resolution between units.

:func:`resolve_attack` computes a single exchange (damage plus optional
retaliation), :func:`resolve_encounter` adds converting and freezing on top of
it, and :func:`resolve_sequence` runs every attacker of a
:class:`~battle_calc.battle_state.BattleState` against its defender in order.
All functions mutate the units they are given.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .battle_state import BattleState
from .units import Unit

logger = logging.getLogger("battle_calc.combat")

FORCE_SCALE = 4.5


class DegenerateForceError(ArithmeticError):
    """Raised when attack and defence force are both zero."""

    def __init__(self, attack_force: float, defence_force: float) -> None:
        super().__init__(
            f"attack force {attack_force} and defence force {defence_force} sum to zero"
        )
        self.attack_force = attack_force
        self.defence_force = defence_force


@dataclass
class AttackOutcome:
    damage: float
    retaliation: Optional[float] = None
    degenerate: bool = False

    @property
    def retaliated(self) -> bool:
        return self.retaliation is not None


# =============================
# Formula helpers
# =============================


def round_half_away(value: float) -> float:
    """Round to the nearest whole number, halves away from zero."""

    return math.copysign(math.floor(abs(value) + 0.5), value)


def attack_force(attacker: Unit) -> float:
    return attacker.attack * (attacker.health / attacker.max_health)


def defence_force(defender: Unit) -> float:
    return defender.defence_with_bonus * (defender.health / defender.max_health)


def total_force(att_force: float, def_force: float) -> float:
    combined = att_force + def_force
    if combined == 0:
        raise DegenerateForceError(att_force, def_force)
    return FORCE_SCALE / combined


# =============================
# Single exchange
# =============================


def should_retaliate(attacker: Unit, defender: Unit) -> bool:
    """Check if an attacker will receive retaliation from a defender."""

    if defender.frozen or defender.converted:
        return False
    if defender.health <= 0:
        return False
    if not defender.can_retaliate:
        return False
    if attacker.forced_retaliation.is_set:
        return bool(attacker.forced_retaliation.as_bool())
    if defender.forced_retaliation.is_set:
        return bool(defender.forced_retaliation.as_bool())
    return (not attacker.ranged) or defender.ranged


def resolve_attack(attacker: Unit, defender: Unit, strict: bool = False) -> AttackOutcome:
    """Calculate the damage done to a defender, and retaliation to an attacker.

    When both forces are zero the formula is undefined; the exchange then deals
    no damage either way, unless ``strict`` is set, in which case
    :class:`DegenerateForceError` propagates.
    """

    att_force = attack_force(attacker)
    def_force = defence_force(defender)
    try:
        scale = total_force(att_force, def_force)
    except DegenerateForceError:
        if strict:
            raise
        logger.debug(
            "Degenerate exchange %s -> %s, no damage dealt",
            attacker.unit_id,
            defender.unit_id,
        )
        return AttackOutcome(damage=0.0, degenerate=True)

    damage = round_half_away(att_force * attacker.attack * scale)
    defender.health -= damage
    outcome = AttackOutcome(damage=damage)
    if should_retaliate(attacker, defender):
        retaliation = round_half_away(def_force * defender.defence * scale)
        attacker.health -= retaliation
        outcome.retaliation = retaliation
    return outcome


# =============================
# Battles
# =============================


def resolve_encounter(attacker: Unit, defender: Unit, strict: bool = False) -> Optional[AttackOutcome]:
    """Calculate a battle between two units.

    Includes converting and freezing as well as actually attacking.  Returns
    the attack outcome, or ``None`` when no attack took place.
    """

    if defender.converted:
        return None
    outcome = None
    if attacker.attack > 0:
        outcome = resolve_attack(attacker, defender, strict=strict)
    if attacker.health > 0:
        if attacker.can_convert:
            defender.converted = True
        elif attacker.can_freeze:
            defender.frozen = True
    return outcome


def resolve_sequence(state: BattleState, strict: bool = False) -> List[Optional[AttackOutcome]]:
    """Attack the defender with each attacker in turn."""

    return [
        resolve_encounter(attacker, state.defender, strict=strict)
        for attacker in state.attackers
    ]


__all__ = [
    "AttackOutcome",
    "DegenerateForceError",
    "should_retaliate",
    "resolve_attack",
    "resolve_encounter",
    "resolve_sequence",
    "round_half_away",
]
