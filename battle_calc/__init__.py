"""Battle calculator: resolve combat between units and find the best attack order."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "Unit",
    "UnitType",
    "RetaliationOverride",
    "BattleState",
    "UnitCatalog",
    "UnknownUnitId",
    "CatalogLoadFailure",
    "load_catalog",
    "load_default_catalog",
    "should_retaliate",
    "resolve_attack",
    "resolve_encounter",
    "resolve_sequence",
    "DegenerateForceError",
    "Preference",
    "state_is_better",
    "attacker_orderings",
    "optimise_battle",
    "__version__",
]

_EXPORTS = {
    "Unit": ("units", "Unit"),
    "UnitType": ("units", "UnitType"),
    "RetaliationOverride": ("units", "RetaliationOverride"),
    "BattleState": ("battle_state", "BattleState"),
    "UnitCatalog": ("catalog", "UnitCatalog"),
    "UnknownUnitId": ("catalog", "UnknownUnitId"),
    "CatalogLoadFailure": ("catalog", "CatalogLoadFailure"),
    "load_catalog": ("catalog", "load_catalog"),
    "load_default_catalog": ("catalog", "load_default_catalog"),
    "should_retaliate": ("combat", "should_retaliate"),
    "resolve_attack": ("combat", "resolve_attack"),
    "resolve_encounter": ("combat", "resolve_encounter"),
    "resolve_sequence": ("combat", "resolve_sequence"),
    "DegenerateForceError": ("combat", "DegenerateForceError"),
    "Preference": ("outcome", "Preference"),
    "state_is_better": ("outcome", "state_is_better"),
    "attacker_orderings": ("permutations", "attacker_orderings"),
    "optimise_battle": ("optimizer", "optimise_battle"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
