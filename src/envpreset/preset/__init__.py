from envpreset.preset.builder import BuiltPreset, ConfiguredUnit, build_preset
from envpreset.preset.interfaces import NamedUnit, TransformUnit, UnitBundle
from envpreset.preset.options import ModuleType, PresetOptions, normalize_options
from envpreset.preset.registry import UnitRegistry
from envpreset.preset.session import PresetSession, default_session

__all__ = [
    "BuiltPreset",
    "ConfiguredUnit",
    "ModuleType",
    "NamedUnit",
    "PresetOptions",
    "PresetSession",
    "TransformUnit",
    "UnitBundle",
    "UnitRegistry",
    "build_preset",
    "default_session",
    "normalize_options",
]
