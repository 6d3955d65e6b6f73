"""Unit templates and runtime unit instances.

A :class:`UnitType` is one catalog entry (for example a Catapult) and never
changes once loaded.  A :class:`Unit` is a single participant in a battle: it is
created from a template, adjusted by the request's flag byte and then mutated
by the combat resolver.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# =============================
# Flag byte layout
# =============================

FLAG_POISONED = 0
FLAG_BONUS = 1
FLAG_WALLED = 2
FLAG_BOOSTED = 3
FLAG_VETERAN = 4
FLAG_FORCE_RETALIATION = 5
FLAG_PREVENT_RETALIATION = 6
FLAG_FROZEN = 7

POISONED_MULTIPLIER = 0.8
BONUS_MULTIPLIER = 1.5
WALLED_MULTIPLIER = 4.0
BOOSTED_DEFENCE = 0.5
VETERAN_HEALTH = 5.0

ABILITY_CONVERT = "convert"
ABILITY_FREEZE = "freeze_area"


def read_flag(flags: int, flag_num: int) -> bool:
    return bool((1 << flag_num) & flags)


class RetaliationOverride(str, Enum):
    """Forced retaliation setting.

    For an attacker: whether it will receive retaliation.
    For a defender: whether it will retaliate.
    """

    FORCE_YES = "force_yes"
    FORCE_NO = "force_no"
    UNSET = "unset"

    @property
    def is_set(self) -> bool:
        return self is not RetaliationOverride.UNSET

    def as_bool(self) -> Optional[bool]:
        if self is RetaliationOverride.FORCE_YES:
            return True
        if self is RetaliationOverride.FORCE_NO:
            return False
        return None


@dataclass
class Unit:
    """An instance of one of the catalog's unit types, plus its battle state."""

    unit_id: str
    display_name: str
    max_health: float
    health: float
    attack: float
    defence: float
    defence_with_bonus: float
    forced_retaliation: RetaliationOverride = RetaliationOverride.UNSET
    can_retaliate: bool = False
    can_convert: bool = False
    can_freeze: bool = False
    ranged: bool = False
    veteran: bool = False
    frozen: bool = False
    converted: bool = False

    def alive(self) -> bool:
        return self.health >= 0

    def copy(self) -> "Unit":
        return replace(self)

    def apply_bit_flags(self, flags: int) -> None:
        """Read and apply the request flag byte.

        Defence modifiers compose in bit order: poisoned, bonus, walled, boosted.
        """
        if not 0 <= flags <= 0xFF:
            raise ValueError(f"flags must fit in one byte, got {flags}")
        if read_flag(flags, FLAG_POISONED):
            self.defence_with_bonus *= POISONED_MULTIPLIER
        if read_flag(flags, FLAG_BONUS):
            self.defence_with_bonus *= BONUS_MULTIPLIER
        if read_flag(flags, FLAG_WALLED):
            self.defence_with_bonus *= WALLED_MULTIPLIER
        if read_flag(flags, FLAG_BOOSTED):
            self.defence_with_bonus += BOOSTED_DEFENCE
        self.veteran = read_flag(flags, FLAG_VETERAN)
        if self.veteran:
            self.max_health += VETERAN_HEALTH
        if read_flag(flags, FLAG_FORCE_RETALIATION):
            self.forced_retaliation = RetaliationOverride.FORCE_YES
        elif read_flag(flags, FLAG_PREVENT_RETALIATION):
            self.forced_retaliation = RetaliationOverride.FORCE_NO
        else:
            self.forced_retaliation = RetaliationOverride.UNSET
        self.frozen = read_flag(flags, FLAG_FROZEN)


@dataclass(frozen=True)
class UnitType:
    """A single unit type, eg. Catapult, as stored in the catalog."""

    id: str
    display_name: str
    health: float
    attack: float
    defence: float
    range: int = 1
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    hidden: bool = False
    abilities: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnitType":
        health = float(data["health"])
        # Forces scale by health / max_health, so max health must be a positive number.
        if not (math.isfinite(health) and health > 0):
            raise ValueError(f"unit '{data['id']}' health must be positive, got {data['health']!r}")
        return cls(
            id=str(data["id"]),
            display_name=str(data.get("display_name", data["id"])),
            health=health,
            attack=float(data["attack"]),
            defence=float(data["defence"]),
            range=int(data.get("range", 1)),
            aliases=tuple(data.get("aliases", ())),
            hidden=bool(data.get("hidden", False)),
            abilities=tuple(data.get("abilities", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "aliases": list(self.aliases),
            "hidden": self.hidden,
            "health": self.health,
            "attack": self.attack,
            "defence": self.defence,
            "range": self.range,
            "abilities": list(self.abilities),
        }

    def create_unit(self) -> Unit:
        """Create an instance of this type with default flags and full health."""
        return Unit(
            unit_id=self.id,
            display_name=self.display_name,
            max_health=self.health,
            health=self.health,
            attack=self.attack,
            defence=self.defence,
            defence_with_bonus=self.defence,
            can_retaliate=(self.attack != 0) and (self.defence != 0),
            can_convert=ABILITY_CONVERT in self.abilities,
            can_freeze=ABILITY_FREEZE in self.abilities,
            ranged=self.range > 1,
        )


__all__ = [
    "RetaliationOverride",
    "Unit",
    "UnitType",
    "read_flag",
    "ABILITY_CONVERT",
    "ABILITY_FREEZE",
]
