from __future__ import annotations

import threading
from dataclasses import dataclass, field

from rich.console import Console

from envpreset.preset.registry import UnitRegistry
from envpreset.tables import CapabilityTables, load_tables
from envpreset.targeting.normalize import TargetNormalizer
from envpreset.targeting.releases import current_node_version, explicit_release_resolver
from envpreset.targeting.types import ReleaseResolver, VersionProvider


@dataclass(slots=True)
class PresetSession:
    """State shared by consecutive builds; the caller owns its lifetime."""

    tables: CapabilityTables = field(default_factory=load_tables)
    release_resolver: ReleaseResolver = explicit_release_resolver
    node_version: VersionProvider = current_node_version
    console: Console = field(default_factory=Console)
    registry: UnitRegistry | None = None
    debug_printed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def normalizer(self) -> TargetNormalizer:
        return TargetNormalizer(
            electron_to_chromium=self.tables.electron_to_chromium,
            release_resolver=self.release_resolver,
            node_version=self.node_version,
        )

    def units(self) -> UnitRegistry:
        if self.registry is None:
            self.registry = UnitRegistry.from_discovery(tables=self.tables)
        return self.registry

    def claim_debug_output(self) -> bool:
        with self._lock:
            if self.debug_printed:
                return False
            self.debug_printed = True
            return True


_DEFAULT_SESSION: PresetSession | None = None


def default_session() -> PresetSession:
    global _DEFAULT_SESSION
    if _DEFAULT_SESSION is None:
        _DEFAULT_SESSION = PresetSession()
    return _DEFAULT_SESSION
