from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from envpreset.tables import CapabilityTable
from envpreset.targeting.normalize import TargetNormalizer
from envpreset.targeting.requirements import is_required
from envpreset.targeting.types import TargetSpec

LOGGER = logging.getLogger(__name__)

_BUILT_IN_RE = re.compile(r"^(es\d+|web)\.")


@dataclass(frozen=True, slots=True)
class OverrideSet:
    all: tuple[str, ...] = ()
    plugins: tuple[str, ...] = ()
    built_ins: tuple[str, ...] = ()


def is_built_in_name(name: str) -> bool:
    return _BUILT_IN_RE.match(name) is not None


def partition_overrides(names: Iterable[str]) -> OverrideSet:
    ordered = tuple(names)
    return OverrideSet(
        all=ordered,
        plugins=tuple(name for name in ordered if not is_built_in_name(name)),
        built_ins=tuple(name for name in ordered if is_built_in_name(name)),
    )


def select_required(
    targets: Mapping[str, object] | TargetSpec,
    table: CapabilityTable,
    *,
    normalizer: TargetNormalizer | None = None,
) -> list[str]:
    return [
        name
        for name, capability in table.items()
        if is_required(targets, capability, normalizer=normalizer)
    ]


def _unique(names: Iterable[str]) -> list[str]:
    merged: list[str] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        merged.append(name)
        seen.add(name)
    return merged


def _exclude_then_include(
    names: Iterable[str], *, include: Sequence[str], exclude: Sequence[str]
) -> list[str]:
    excluded = set(exclude)
    kept = [name for name in names if name not in excluded]
    return _unique((*kept, *include))


def compose_transformations(
    required: Sequence[str], *, include: OverrideSet, exclude: OverrideSet
) -> list[str]:
    composed = _exclude_then_include(required, include=include.plugins, exclude=exclude.plugins)
    LOGGER.debug("Composed %d transformation(s) from %d required", len(composed), len(required))
    return composed


def compose_polyfills(
    required: Sequence[str],
    default_include: Sequence[str],
    *,
    include: OverrideSet,
    exclude: OverrideSet,
) -> list[str]:
    """Add the always-on polyfills, drop exclusions, then append inclusions.

    Inclusions are applied last, so a name both included and excluded stays.
    A name already present is not appended a second time.
    """
    composed = _exclude_then_include(
        (*required, *default_include), include=include.built_ins, exclude=exclude.built_ins
    )
    LOGGER.debug("Composed %d polyfill(s) from %d required", len(composed), len(required))
    return composed
