from __future__ import annotations

from dataclasses import dataclass, field
from importlib import import_module, metadata
from typing import Any, cast

from envpreset.errors import UnknownCapabilityError
from envpreset.preset.interfaces import (
    POLYFILL_REQUIRE_UNIT_ID,
    NamedUnit,
    TransformUnit,
    UnitBundle,
)
from envpreset.tables import CapabilityTables, load_tables

ENTRY_POINT_GROUP = "envpreset.units"


def builtin_unit_bundle(tables: CapabilityTables | None = None) -> UnitBundle:
    resolved = tables or load_tables()
    names = [*resolved.plugins, *resolved.module_transformations.values()]
    units: list[TransformUnit] = [NamedUnit(name) for name in dict.fromkeys(names)]
    units.append(NamedUnit(POLYFILL_REQUIRE_UNIT_ID))
    return UnitBundle(units=tuple(units))


@dataclass(slots=True)
class UnitRegistry:
    _units: dict[str, TransformUnit] = field(default_factory=dict)

    @classmethod
    def from_discovery(
        cls,
        *,
        module_specs: list[str] | None = None,
        tables: CapabilityTables | None = None,
    ) -> UnitRegistry:
        registry = cls()
        registry.register_bundle(builtin_unit_bundle(tables))
        registry.load_entry_points()
        for spec in module_specs or []:
            registry.load_module_bundle(spec)
        return registry

    def register_bundle(self, bundle: UnitBundle) -> None:
        for unit in bundle.units:
            self.register(unit)

    def register(self, unit: TransformUnit) -> None:
        unit_id = unit.unit_id
        if unit_id in self._units:
            raise ValueError(f"duplicate unit id: {unit_id}")
        self._units[unit_id] = unit

    def replace(self, unit: TransformUnit) -> None:
        self._units[unit.unit_id] = unit

    def load_entry_points(self) -> None:
        for ep in _iter_entry_points(ENTRY_POINT_GROUP):
            loaded = ep.load()
            unit = loaded() if callable(loaded) else loaded
            self.replace(cast(TransformUnit, unit))

    def load_module_bundle(self, module_spec: str) -> None:
        module_name, attr_name = _parse_module_spec(module_spec)
        module = import_module(module_name)
        if not hasattr(module, attr_name):
            raise ValueError(f"module '{module_name}' has no attribute '{attr_name}'")
        value: Any = getattr(module, attr_name)
        bundle = value() if callable(value) else value
        if not isinstance(bundle, UnitBundle):
            raise ValueError(
                f"'{module_spec}' must resolve to a UnitBundle or callable returning one"
            )
        for unit in bundle.units:
            self.replace(unit)

    def unit(self, unit_id: str) -> TransformUnit | None:
        return self._units.get(unit_id)

    def require(self, unit_id: str) -> TransformUnit:
        unit = self.unit(unit_id)
        if unit is None:
            raise UnknownCapabilityError(unit_id)
        return unit

    def list_units(self) -> list[TransformUnit]:
        return [self._units[k] for k in sorted(self._units)]


def _iter_entry_points(group: str) -> list[metadata.EntryPoint]:
    return list(metadata.entry_points().select(group=group))


def _parse_module_spec(module_spec: str) -> tuple[str, str]:
    module_name, sep, attr_name = module_spec.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(
            "unit spec must use 'module:attribute', for example 'my_units:unit_bundle'"
        )
    return module_name, attr_name
