from __future__ import annotations


class PresetError(Exception):
    """Base class for every failure raised while resolving a preset."""


class ConfigError(PresetError, ValueError):
    pass


class UnsupportedVersionError(ConfigError):
    pass


class MalformedVersionError(ConfigError):
    pass


class UnknownCapabilityError(PresetError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"no unit is registered for capability `{self.name}`"
