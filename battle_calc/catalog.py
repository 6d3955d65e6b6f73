"""Unit catalog: loads unit types from JSON and builds unit instances."""
from __future__ import annotations

import json
import logging
import os
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .units import Unit, UnitType

logger = logging.getLogger("battle_calc.catalog")

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), "data", "units.json")


class UnknownUnitId(KeyError):
    """Raised when a request names a unit type that is not in the catalog."""

    def __init__(self, unit_id: str) -> None:
        super().__init__(unit_id)
        self.unit_id = unit_id

    def __str__(self) -> str:
        return f"Unknown unit '{self.unit_id}'"


class CatalogLoadFailure(RuntimeError):
    """Raised when the catalog source is missing or badly formatted."""


class UnitCatalog:
    """Read-only collection of unit types keyed by id.

    Build one explicitly (``from_file``/``from_records``) and hand it to
    whatever needs to create units; nothing here is global.
    """

    def __init__(self, unit_types: Iterable[UnitType], source: Optional[str] = None) -> None:
        data: Dict[str, UnitType] = {}
        for unit_type in unit_types:
            if unit_type.id in data:
                raise CatalogLoadFailure(f"Duplicate unit id '{unit_type.id}' in {source or 'catalog'}")
            data[unit_type.id] = unit_type
        self._data: Mapping[str, UnitType] = MappingProxyType(data)
        self.source = source

    @classmethod
    def from_records(cls, records: Any, source: Optional[str] = None) -> "UnitCatalog":
        if not isinstance(records, list):
            raise CatalogLoadFailure(f"Unit catalog must be a JSON list ({source or 'records'})")
        unit_types: List[UnitType] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise CatalogLoadFailure(f"Unit entry #{index} is not an object")
            try:
                unit_types.append(UnitType.from_dict(record))
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogLoadFailure(f"Unit entry #{index} is badly formatted: {exc!r}") from exc
        return cls(unit_types, source=source)

    @classmethod
    def from_file(cls, path: str) -> "UnitCatalog":
        try:
            with open(path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except OSError as exc:
            raise CatalogLoadFailure(f"Unit file missing: {path}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogLoadFailure(f"Unit file badly formatted: {path}: {exc}") from exc
        catalog = cls.from_records(payload, source=path)
        logger.info("Loaded %d unit types from %s", len(catalog), path)
        return catalog

    # ----- Lookup -----

    def get(self, unit_id: str) -> UnitType:
        try:
            return self._data[unit_id]
        except KeyError:
            raise UnknownUnitId(unit_id) from None

    def create_instance(
        self,
        unit: Union[str, UnitType],
        health: Optional[float] = None,
        flags: int = 0,
    ) -> Unit:
        """Create a unit from a type (or type id), apply flags and set health.

        ``health`` defaults to the unit's maximum health after the veteran
        bonus has been applied.
        """
        unit_type = self.get(unit) if isinstance(unit, str) else unit
        instance = unit_type.create_unit()
        instance.apply_bit_flags(flags)
        instance.health = instance.max_health if health is None else float(health)
        return instance

    def unit_types(self) -> List[UnitType]:
        return list(self._data.values())

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._data

    def __iter__(self) -> Iterator[UnitType]:
        return iter(self._data.values())

    def __len__(self) -> int:
        return len(self._data)


def load_catalog(path: Optional[str] = None) -> UnitCatalog:
    return UnitCatalog.from_file(path or DEFAULT_CATALOG_PATH)


def load_default_catalog() -> UnitCatalog:
    return load_catalog(DEFAULT_CATALOG_PATH)


__all__ = [
    "UnitCatalog",
    "UnknownUnitId",
    "CatalogLoadFailure",
    "load_catalog",
    "load_default_catalog",
    "DEFAULT_CATALOG_PATH",
]
