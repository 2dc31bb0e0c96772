from envpreset.errors import (
    ConfigError,
    MalformedVersionError,
    PresetError,
    UnknownCapabilityError,
    UnsupportedVersionError,
)
from envpreset.preset import (
    BuiltPreset,
    ModuleType,
    PresetOptions,
    PresetSession,
    build_preset,
    normalize_options,
)
from envpreset.targeting import TargetNormalizer, get_targets, is_required

__all__ = [
    "BuiltPreset",
    "ConfigError",
    "MalformedVersionError",
    "ModuleType",
    "PresetError",
    "PresetOptions",
    "PresetSession",
    "TargetNormalizer",
    "UnknownCapabilityError",
    "UnsupportedVersionError",
    "build_preset",
    "get_targets",
    "is_required",
    "normalize_options",
]
