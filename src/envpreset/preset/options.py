from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from envpreset.errors import ConfigError
from envpreset.targeting.normalize import parse_target_spec
from envpreset.targeting.types import TargetSpec


class ModuleType(str, Enum):
    amd = "amd"
    commonjs = "commonjs"
    systemjs = "systemjs"
    umd = "umd"


OPTION_KEYS = frozenset(
    {"targets", "include", "exclude", "use_built_ins", "module_type", "loose", "debug"}
)


@dataclass(frozen=True, slots=True)
class PresetOptions:
    targets: TargetSpec = field(default_factory=TargetSpec)
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    use_built_ins: bool = False
    module_type: ModuleType | None = ModuleType.commonjs
    loose: bool = False
    debug: bool = False


def _bool_option(raw: Mapping[str, object], key: str) -> bool:
    value = raw.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"invalid option: `{key}` must be a boolean")
    return value


def _module_type_option(raw: Mapping[str, object]) -> ModuleType | None:
    value = raw.get("module_type", ModuleType.commonjs)
    if value is False:
        return None
    if isinstance(value, ModuleType):
        return value
    if isinstance(value, str):
        try:
            return ModuleType(value)
        except ValueError:
            pass
    allowed = ", ".join(f"`{m.value}`" for m in ModuleType)
    raise ConfigError(f"invalid option: `module_type` must be false or one of {allowed}")


def _names_option(
    raw: Mapping[str, object], key: str, known_names: Collection[str] | None
) -> tuple[str, ...]:
    value = raw.get(key, ())
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigError(f"invalid option: `{key}` must be an array of capability names")
    names: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"invalid option: `{key}[{idx}]` must be a non-empty string")
        names.append(item)

    if known_names is not None:
        unknown = [name for name in names if name not in known_names]
        if unknown:
            joined = ", ".join(f"`{name}`" for name in unknown)
            raise ConfigError(
                f"invalid option: the plugins/built-ins {joined} passed to `{key}` are not valid"
            )
    return tuple(names)


def normalize_options(
    raw: Mapping[str, object] | PresetOptions | None = None,
    *,
    known_names: Collection[str] | None = None,
) -> PresetOptions:
    """Validate a plain options mapping from the host into :class:`PresetOptions`.

    ``known_names`` restricts ``include``/``exclude`` to recognised capabilities.
    """
    if isinstance(raw, PresetOptions):
        return raw
    payload: Mapping[str, object] = raw or {}
    if not isinstance(payload, Mapping):
        raise ConfigError("preset options must be a table/object")

    unknown_keys = sorted(str(key) for key in payload if key not in OPTION_KEYS)
    if unknown_keys:
        raise ConfigError(f"invalid option: unknown key(s) {', '.join(unknown_keys)}")

    targets_raw = payload.get("targets")
    if targets_raw is not None and not isinstance(targets_raw, (Mapping, TargetSpec)):
        raise ConfigError("invalid option: `targets` must be a table/object")

    return PresetOptions(
        targets=parse_target_spec(targets_raw),  # type: ignore[arg-type]
        include=_names_option(payload, "include", known_names),
        exclude=_names_option(payload, "exclude", known_names),
        use_built_ins=_bool_option(payload, "use_built_ins"),
        module_type=_module_type_option(payload),
        loose=_bool_option(payload, "loose"),
        debug=_bool_option(payload, "debug"),
    )
