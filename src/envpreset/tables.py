from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import cast

CapabilityEntry = Mapping[str, float]
CapabilityTable = Mapping[str, CapabilityEntry]

_DATA_PACKAGE = "envpreset.data"


@dataclass(frozen=True, slots=True)
class CapabilityTables:
    plugins: CapabilityTable
    built_ins: CapabilityTable
    electron_to_chromium: Mapping[str, float]
    module_transformations: Mapping[str, str]
    default_include: tuple[str, ...] = field(default_factory=tuple)

    def known_names(self) -> set[str]:
        return {*self.plugins, *self.built_ins, *self.default_include}


def _read_json(name: str) -> object:
    return json.loads(resources.files(_DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8"))


def _as_capability_table(payload: object, *, name: str) -> CapabilityTable:
    if not isinstance(payload, Mapping):
        raise ValueError(f"capability table `{name}` must be a JSON object")
    table: dict[str, CapabilityEntry] = {}
    for capability, entry in payload.items():
        if not isinstance(entry, Mapping):
            raise ValueError(f"capability `{capability}` in `{name}` must map to an object")
        table[str(capability)] = MappingProxyType(
            {str(env): float(version) for env, version in entry.items()}
        )
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def load_tables() -> CapabilityTables:
    electron = cast(Mapping[str, object], _read_json("electron-to-chromium.json"))
    modules = cast(Mapping[str, object], _read_json("module-transformations.json"))
    default_include = cast(list[object], _read_json("default-includes.json"))
    return CapabilityTables(
        plugins=_as_capability_table(_read_json("plugins.json"), name="plugins"),
        built_ins=_as_capability_table(_read_json("built-ins.json"), name="built-ins"),
        electron_to_chromium=MappingProxyType(
            {str(k): float(cast(float, v)) for k, v in electron.items()}
        ),
        module_transformations=MappingProxyType({str(k): str(v) for k, v in modules.items()}),
        default_include=tuple(str(name) for name in default_include),
    )
