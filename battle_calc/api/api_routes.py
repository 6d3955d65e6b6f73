"""API routes for the battle calculator."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request

from battle_calc.battle_state import BattleState
from battle_calc.catalog import UnitCatalog, UnknownUnitId
from battle_calc.combat import resolve_sequence
from battle_calc.optimizer import NoAttackersError, TooManyAttackersError, optimise_battle
from battle_calc.state_assembler import (
    BattleInput,
    build_state,
    optimisation_to_dict,
    state_to_dict,
    unit_type_to_dict,
)

logger = logging.getLogger("battle_calc.api")

router = APIRouter()


def _catalog(request: Request) -> UnitCatalog:
    return request.app.state.catalog


def _state_for(request: Request, body: BattleInput) -> BattleState:
    try:
        return build_state(body, _catalog(request))
    except UnknownUnitId as exc:
        logger.info("Rejected request for unknown unit '%s'", exc.unit_id)
        raise HTTPException(
            status_code=404,
            detail={"error": "unit_not_found", "unit": exc.unit_id},
        )

# ============================================================================
# Reference Data
# ============================================================================

@router.get("/units")
def list_units(request: Request) -> List[Dict[str, Any]]:
    """List every unit type in the catalog."""
    return [unit_type_to_dict(t) for t in _catalog(request)]

# ============================================================================
# Battles
# ============================================================================

@router.post("/battle")
def calc_battle(request: Request, body: BattleInput) -> Dict[str, Any]:
    """Attack the defender with the attackers in the order given."""
    state = _state_for(request, body)
    resolve_sequence(state)
    logger.info("Resolved battle: %d attackers vs %s", len(state.attackers), state.defender.unit_id)
    return state_to_dict(state)


@router.post("/optim")
def optimise(request: Request, body: BattleInput) -> Dict[str, Any]:
    """Find the attack order with the best outcome for the attackers."""
    state = _state_for(request, body)
    limit = request.app.state.settings.get("optimiser", {}).get("max_attackers")
    try:
        order, best = optimise_battle(state, max_attackers=limit)
    except (NoAttackersError, TooManyAttackersError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    logger.info("Optimised battle: %d attackers vs %s, order %s", len(order), best.defender.unit_id, order)
    return optimisation_to_dict(order, best)
