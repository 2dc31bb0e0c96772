from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

POLYFILL_REQUIRE_UNIT_ID = "transform-polyfill-require"
REGENERATOR_UNIT_ID = "transform-regenerator"


class TransformUnit(Protocol):
    @property
    def unit_id(self) -> str: ...

    @property
    def package(self) -> str: ...


@dataclass(frozen=True, slots=True)
class NamedUnit:
    """Handle for a transformation implemented by a host package."""

    unit_id: str
    package: str = ""

    def __post_init__(self) -> None:
        if not self.package:
            object.__setattr__(self, "package", f"babel-plugin-{self.unit_id}")


@dataclass(slots=True)
class UnitBundle:
    units: Sequence[TransformUnit] = field(default_factory=tuple)
