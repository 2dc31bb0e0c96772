from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Iterable, Mapping, Sequence

from envpreset.errors import ConfigError

LOGGER = logging.getLogger(__name__)

BROWSER_NAME_MAP: Mapping[str, str] = {
    "chrome": "chrome",
    "edge": "edge",
    "firefox": "firefox",
    "ie": "ie",
    "ios_saf": "ios",
    "safari": "safari",
}

_RELEASE_RE = re.compile(r"^[a-z_]+ \d[\w.\-]*$")
_FLOAT_PREFIX_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def explicit_release_resolver(queries: Sequence[str]) -> list[str]:
    """Resolve queries that already name concrete releases, e.g. ``"chrome 50"``.

    Anything needing a release database (``"last 2 versions"``, ``"> 1%"``)
    is rejected; hosts with such a database pass their own resolver.
    """
    releases: list[str] = []
    for query in queries:
        for fragment in query.split(","):
            release = " ".join(fragment.split()).lower()
            if not release:
                continue
            if not _RELEASE_RE.match(release):
                raise ConfigError(
                    f"browser query `{fragment.strip()}` is not a literal `<name> <version>` "
                    "release; configure a release resolver that understands it"
                )
            releases.append(release)
    return releases


def parse_float_prefix(raw: str) -> float | None:
    match = _FLOAT_PREFIX_RE.match(raw)
    if match is None:
        return None
    return float(match.group(0))


def parse_int_prefix(raw: str) -> int | None:
    match = _INT_PREFIX_RE.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def lowest_versions(releases: Iterable[str]) -> dict[str, float]:
    lowest: dict[str, float] = {}
    for release in releases:
        name, _, version = release.partition(" ")
        normalized = BROWSER_NAME_MAP.get(name)
        parsed = parse_int_prefix(version)
        if normalized is None or parsed is None:
            LOGGER.debug("Dropping browser release %r", release)
            continue
        lowest[normalized] = min(lowest.get(normalized, float("inf")), parsed)
    return lowest


def current_node_version() -> float:
    executable = shutil.which("node")
    if executable is None:
        raise ConfigError("`node: current` requires a `node` executable on PATH")
    try:
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except subprocess.SubprocessError as exc:
        raise ConfigError(f"could not read the running node version: {exc}") from exc
    reported = completed.stdout.strip().lstrip("v")
    version = parse_float_prefix(reported)
    if version is None:
        raise ConfigError(f"could not parse node version from `{completed.stdout.strip()}`")
    LOGGER.debug("Detected node %s", reported)
    return version
