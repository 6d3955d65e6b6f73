"""Build battle states from request payloads and render results."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .battle_state import BattleState
from .catalog import UnitCatalog
from .units import Unit, UnitType


class UnitInput(BaseModel):
    unit: str
    health: Optional[float] = Field(default=None, allow_inf_nan=False)
    flags: int = Field(default=0, ge=0, le=255)


class BattleInput(BaseModel):
    attackers: List[UnitInput]
    defender: UnitInput


def build_unit(unit_input: UnitInput, catalog: UnitCatalog) -> Unit:
    """Look the unit up and create an instance.  Raises ``UnknownUnitId``."""
    return catalog.create_instance(
        unit_input.unit,
        health=unit_input.health,
        flags=unit_input.flags,
    )


def build_state(battle_input: BattleInput, catalog: UnitCatalog) -> BattleState:
    attackers = [build_unit(a, catalog) for a in battle_input.attackers]
    defender = build_unit(battle_input.defender, catalog)
    return BattleState(attackers=attackers, defender=defender)


def state_to_dict(state: BattleState) -> Dict[str, Any]:
    return state.to_dict()


def optimisation_to_dict(order: List[int], state: BattleState) -> Dict[str, Any]:
    return {"order": list(order), "state": state_to_dict(state)}


def unit_type_to_dict(unit_type: UnitType) -> Dict[str, Any]:
    return unit_type.to_dict()


__all__ = [
    "UnitInput",
    "BattleInput",
    "build_unit",
    "build_state",
    "state_to_dict",
    "optimisation_to_dict",
    "unit_type_to_dict",
]
