from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from rich.console import Console

from envpreset.tables import CapabilityTable
from envpreset.targeting.types import CanonicalTargets


def _filtered_entry(
    name: str, targets: CanonicalTargets, table: CapabilityTable
) -> dict[str, float | None]:
    entry: Mapping[str, float] = table.get(name, {})
    return {environment: entry.get(environment) for environment in targets}


def _print(console: Console, line: str = "") -> None:
    console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_debug_report(
    console: Console,
    *,
    targets: CanonicalTargets,
    module_type: str | None,
    transformations: Sequence[str],
    polyfills: Sequence[str] | None,
    plugin_table: CapabilityTable,
    built_in_table: CapabilityTable,
) -> None:
    _print(console, "envpreset: `debug` option")
    _print(console, "\nUsing targets:")
    _print(console, json.dumps(targets, indent=2))
    _print(console, f"\nModules transform: {module_type if module_type is not None else 'false'}")

    _print(console, "\nUsing plugins:")
    for name in transformations:
        _print(console, f"  {name} {json.dumps(_filtered_entry(name, targets, plugin_table))}")

    _print(console, "\nUsing polyfills:")
    for name in polyfills or ():
        _print(console, f"  {name} {json.dumps(_filtered_entry(name, targets, built_in_table))}")
