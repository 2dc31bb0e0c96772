from __future__ import annotations

import pytest

from envpreset.errors import ConfigError
from envpreset.preset.options import ModuleType, PresetOptions, normalize_options
from envpreset.targeting.types import BrowserQuery, CurrentRuntime, TargetSpec

KNOWN = {"transform-regenerator", "es6.map", "web.timers"}


def test_defaults() -> None:
    options = normalize_options()

    assert options == PresetOptions()
    assert options.module_type is ModuleType.commonjs
    assert options.targets == TargetSpec()


def test_parses_all_keys() -> None:
    options = normalize_options(
        {
            "targets": {"node": "current", "browsers": "chrome 50"},
            "include": ["es6.map"],
            "exclude": ["transform-regenerator"],
            "use_built_ins": True,
            "module_type": "umd",
            "loose": True,
            "debug": True,
        },
        known_names=KNOWN,
    )

    assert options.targets.environments == {"node": CurrentRuntime()}
    assert options.targets.browsers == BrowserQuery(("chrome 50",))
    assert options.include == ("es6.map",)
    assert options.exclude == ("transform-regenerator",)
    assert options.use_built_ins is True
    assert options.module_type is ModuleType.umd
    assert options.loose is True
    assert options.debug is True


def test_module_type_false_disables_module_transform() -> None:
    assert normalize_options({"module_type": False}).module_type is None


def test_rejects_unknown_module_type() -> None:
    with pytest.raises(ConfigError, match="module_type"):
        normalize_options({"module_type": "esm"})


@pytest.mark.parametrize("key", ["loose", "debug", "use_built_ins"])
def test_rejects_non_boolean_flags(key: str) -> None:
    with pytest.raises(ConfigError, match=key):
        normalize_options({key: "yes"})


def test_rejects_unknown_option_keys() -> None:
    with pytest.raises(ConfigError, match="unknown key"):
        normalize_options({"modules": "amd"})


def test_rejects_unknown_capability_names() -> None:
    with pytest.raises(ConfigError, match="`transform-nope`"):
        normalize_options({"include": ["transform-nope"]}, known_names=KNOWN)


def test_rejects_string_include() -> None:
    with pytest.raises(ConfigError, match="array"):
        normalize_options({"exclude": "es6.map"})


def test_rejects_string_target_version() -> None:
    with pytest.raises(ConfigError, match="must be a number"):
        normalize_options({"targets": {"ie": "8"}})


def test_rejects_non_mapping_targets() -> None:
    with pytest.raises(ConfigError, match="targets"):
        normalize_options({"targets": ["chrome 50"]})


def test_passes_through_validated_options() -> None:
    options = PresetOptions(loose=True)

    assert normalize_options(options) is options
