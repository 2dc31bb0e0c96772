from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from envpreset.errors import ConfigError, MalformedVersionError, UnsupportedVersionError
from envpreset.tables import load_tables
from envpreset.targeting.releases import (
    current_node_version,
    explicit_release_resolver,
    lowest_versions,
)
from envpreset.targeting.types import (
    BrowserQuery,
    CanonicalTargets,
    CurrentRuntime,
    ElectronVersion,
    EnvironmentConstraint,
    ExplicitVersion,
    ReleaseResolver,
    TargetSpec,
    VersionProvider,
)

LOGGER = logging.getLogger(__name__)

CURRENT_MARKER = "current"

_ELECTRON_RE = re.compile(r"^(\d+\.\d+)")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _version_type_error(environment: str, value: object) -> ConfigError:
    return ConfigError(
        f"target version must be a number, `{value!r}` was given for `{environment}`"
    )


def _parse_browsers(value: object) -> BrowserQuery | None:
    if isinstance(value, str):
        return BrowserQuery((value,))
    if isinstance(value, Sequence) and all(isinstance(item, str) for item in value):
        return BrowserQuery(tuple(value))
    LOGGER.warning("Ignoring `browsers` target of unsupported shape: %r", value)
    return None


def _parse_electron(value: object) -> ElectronVersion | None:
    if value is None or value is False:
        return None
    if isinstance(value, str) or _is_number(value):
        return ElectronVersion(str(value))
    raise MalformedVersionError(f"electron version must be a version string, got `{value!r}`")


def _parse_environment(environment: str, value: object) -> EnvironmentConstraint:
    if environment == "node" and (value is True or value == CURRENT_MARKER):
        return CurrentRuntime()
    if not _is_number(value):
        raise _version_type_error(environment, value)
    return ExplicitVersion(float(value))  # type: ignore[arg-type]


def parse_target_spec(raw: Mapping[str, object] | TargetSpec | None) -> TargetSpec:
    """Validate a raw ``targets`` mapping into a :class:`TargetSpec`.

    The caller's mapping is never mutated.
    """
    if raw is None:
        return TargetSpec()
    if isinstance(raw, TargetSpec):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigError("`targets` must be a table/object of environment constraints")

    environments: dict[str, EnvironmentConstraint] = {}
    electron: ElectronVersion | None = None
    browsers: BrowserQuery | None = None
    for key, value in raw.items():
        environment = str(key)
        if environment == "browsers":
            browsers = _parse_browsers(value)
        elif environment == "electron":
            electron = _parse_electron(value)
        else:
            environments[environment] = _parse_environment(environment, value)

    return TargetSpec(environments=environments, electron=electron, browsers=browsers)


def electron_version_to_chrome_version(
    version: object, table: Mapping[str, float] | None = None
) -> float:
    mapping = load_tables().electron_to_chromium if table is None else table
    raw = str(version)
    if raw == "1":
        raw = "1.0"

    match = _ELECTRON_RE.match(raw)
    if match is None:
        raise MalformedVersionError("electron version must be a semver version")

    major_minor = match.group(1)
    chrome = mapping.get(major_minor)
    if chrome is None:
        raise UnsupportedVersionError(
            f"electron version {major_minor} is either too old or too new"
        )
    return chrome


@dataclass(slots=True)
class TargetNormalizer:
    electron_to_chromium: Mapping[str, float] = field(
        default_factory=lambda: load_tables().electron_to_chromium
    )
    release_resolver: ReleaseResolver = explicit_release_resolver
    node_version: VersionProvider = current_node_version

    def normalize(self, raw: Mapping[str, object] | TargetSpec | None) -> CanonicalTargets:
        spec = parse_target_spec(raw)

        targets: CanonicalTargets = {}
        for environment, constraint in spec.environments.items():
            if isinstance(constraint, CurrentRuntime):
                targets[environment] = self.node_version()
            else:
                targets[environment] = constraint.version

        if spec.electron is not None:
            targets["chrome"] = electron_version_to_chrome_version(
                spec.electron.raw, self.electron_to_chromium
            )
            LOGGER.debug("Electron %s maps to chrome %s", spec.electron.raw, targets["chrome"])

        if spec.browsers is None:
            return targets

        releases = self.release_resolver(list(spec.browsers.queries))
        merged: CanonicalTargets = dict(lowest_versions(releases))
        merged.update(targets)
        LOGGER.debug("Browser query %s resolved to %s", spec.browsers.queries, merged)
        return merged


def get_targets(
    raw: Mapping[str, object] | TargetSpec | None = None,
    *,
    normalizer: TargetNormalizer | None = None,
) -> CanonicalTargets:
    return (normalizer or TargetNormalizer()).normalize(raw)
