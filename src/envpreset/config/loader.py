from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import cast

CONFIG_FILENAME = "envpreset.toml"
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TABLE = ("tool", "envpreset")


def _read_toml(path: Path) -> Mapping[str, object]:
    with path.open("rb") as f:
        payload = tomllib.load(f)
    if not isinstance(payload, Mapping):
        raise ValueError("config payload must be a TOML table/object")
    return cast(Mapping[str, object], payload)


def _pyproject_table(payload: Mapping[str, object]) -> Mapping[str, object] | None:
    current: object = payload
    for key in PYPROJECT_TABLE:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    if not isinstance(current, Mapping):
        raise ValueError("`[tool.envpreset]` must be a TOML table")
    return cast(Mapping[str, object], current)


def discover_config_path(
    *, start_dir: Path, explicit_config: Path | None
) -> tuple[Path | None, str | None]:
    if explicit_config is not None:
        if not explicit_config.is_file():
            return None, f"config file was not found: {explicit_config}"
        return explicit_config, None

    candidate = start_dir / CONFIG_FILENAME
    if candidate.is_file():
        return candidate, None

    pyproject = start_dir / PYPROJECT_FILENAME
    if pyproject.is_file():
        try:
            table = _pyproject_table(_read_toml(pyproject))
        except (OSError, tomllib.TOMLDecodeError, ValueError) as exc:
            return None, f"failed to read {pyproject}: {exc}"
        if table is not None:
            return pyproject, None

    return None, None


def load_options_file(path: str | Path) -> dict[str, object]:
    config_path = Path(path)
    payload = _read_toml(config_path)
    if config_path.name == PYPROJECT_FILENAME:
        table = _pyproject_table(payload)
        if table is None:
            raise ValueError(f"{config_path} has no `[tool.envpreset]` table")
        payload = table
    return {str(k): v for k, v in payload.items()}


def merge_options(
    base: Mapping[str, object], overrides: Mapping[str, object]
) -> dict[str, object]:
    """Overlay ``overrides`` on ``base``; ``targets`` tables merge per environment."""
    merged = dict(base)
    for key, value in overrides.items():
        existing = merged.get(key)
        if key == "targets" and isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = {**existing, **value}
        else:
            merged[key] = value
    return merged
