from __future__ import annotations

from collections.abc import Mapping

from envpreset.errors import ConfigError
from envpreset.tables import CapabilityEntry
from envpreset.targeting.normalize import CURRENT_MARKER, TargetNormalizer
from envpreset.targeting.types import TargetSpec

_SHORTHAND_KEYS = frozenset({"browsers", "electron"})


def _needs_normalization(targets: Mapping[str, object] | TargetSpec) -> bool:
    if isinstance(targets, TargetSpec):
        return True
    if any(key in targets for key in _SHORTHAND_KEYS):
        return True
    node = targets.get("node")
    return node is True or node == CURRENT_MARKER


def is_required(
    targets: Mapping[str, object] | TargetSpec,
    capability: CapabilityEntry,
    *,
    normalizer: TargetNormalizer | None = None,
) -> bool:
    """Return whether a transformation is needed for every targeted environment.

    ``capability`` maps an environment to the lowest version implementing the
    feature. With no targets at all nothing proves the transformation
    unnecessary, so it is required.
    """
    supported: Mapping[str, object]
    if _needs_normalization(targets):
        supported = (normalizer or TargetNormalizer()).normalize(targets)
    else:
        supported = targets  # type: ignore[assignment]

    if not supported:
        return True

    for environment, lowest_targeted in supported.items():
        if isinstance(lowest_targeted, bool) or not isinstance(lowest_targeted, (int, float)):
            raise ConfigError(
                f"target version must be a number, `{lowest_targeted!r}` was given for "
                f"`{environment}`"
            )

    for environment, lowest_targeted in supported.items():
        lowest_implemented = capability.get(environment)
        # Not implemented in that environment at all.
        if lowest_implemented is None:
            return True
        if lowest_targeted < lowest_implemented:  # type: ignore[operator]
            return True

    return False
