from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence, Union

CanonicalTargets = dict[str, float]

ReleaseResolver = Callable[[Sequence[str]], list[str]]
VersionProvider = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CurrentRuntime:
    """Resolve to the version of the runtime installed on this machine."""


@dataclass(frozen=True, slots=True)
class ExplicitVersion:
    version: float


@dataclass(frozen=True, slots=True)
class ElectronVersion:
    raw: str


@dataclass(frozen=True, slots=True)
class BrowserQuery:
    queries: tuple[str, ...]


EnvironmentConstraint = Union[CurrentRuntime, ExplicitVersion]


@dataclass(frozen=True, slots=True)
class TargetSpec:
    environments: dict[str, EnvironmentConstraint] = field(default_factory=dict)
    electron: ElectronVersion | None = None
    browsers: BrowserQuery | None = None

    @property
    def is_empty(self) -> bool:
        return not self.environments and self.electron is None and self.browsers is None
