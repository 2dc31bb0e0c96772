from __future__ import annotations

from pathlib import Path

import pytest

from envpreset.config.loader import discover_config_path, load_options_file, merge_options


def _write_text(path: Path, text: str) -> None:
    path.write_text(text.strip() + "\n", encoding="utf-8")


def test_load_options_file_reads_top_level_table(tmp_path: Path) -> None:
    config_path = tmp_path / "envpreset.toml"
    _write_text(
        config_path,
        """
        use_built_ins = true
        module_type = false
        include = ["es6.map"]

        [targets]
        chrome = 50
        browsers = ["ie 9", "safari 10"]
        """,
    )

    options = load_options_file(config_path)
    assert options == {
        "use_built_ins": True,
        "module_type": False,
        "include": ["es6.map"],
        "targets": {"chrome": 50, "browsers": ["ie 9", "safari 10"]},
    }


def test_load_options_file_reads_pyproject_tool_table(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    _write_text(
        pyproject,
        """
        [project]
        name = "demo"

        [tool.envpreset]
        loose = true

        [tool.envpreset.targets]
        node = "current"
        """,
    )

    assert load_options_file(pyproject) == {"loose": True, "targets": {"node": "current"}}


def test_load_options_file_requires_tool_table(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    _write_text(pyproject, '[project]\nname = "demo"')

    with pytest.raises(ValueError, match=r"\[tool.envpreset\]"):
        load_options_file(pyproject)


def test_discover_config_path_prefers_explicit(tmp_path: Path) -> None:
    explicit = tmp_path / "custom.toml"
    _write_text(explicit, "debug = true")
    _write_text(tmp_path / "envpreset.toml", "debug = false")

    resolved, err = discover_config_path(start_dir=tmp_path, explicit_config=explicit)
    assert err is None
    assert resolved == explicit


def test_discover_config_path_reports_missing_explicit(tmp_path: Path) -> None:
    resolved, err = discover_config_path(
        start_dir=tmp_path, explicit_config=tmp_path / "missing.toml"
    )
    assert resolved is None
    assert err is not None
    assert "was not found" in err


def test_discover_config_path_finds_envpreset_toml(tmp_path: Path) -> None:
    config_path = tmp_path / "envpreset.toml"
    _write_text(config_path, "debug = true")

    resolved, err = discover_config_path(start_dir=tmp_path, explicit_config=None)
    assert err is None
    assert resolved == config_path


def test_discover_config_path_uses_pyproject_with_tool_table(tmp_path: Path) -> None:
    pyproject = tmp_path / "pyproject.toml"
    _write_text(pyproject, "[tool.envpreset]\nloose = true")

    resolved, err = discover_config_path(start_dir=tmp_path, explicit_config=None)
    assert err is None
    assert resolved == pyproject


def test_discover_config_path_skips_pyproject_without_tool_table(tmp_path: Path) -> None:
    _write_text(tmp_path / "pyproject.toml", '[project]\nname = "demo"')

    assert discover_config_path(start_dir=tmp_path, explicit_config=None) == (None, None)


def test_merge_options_overrides_and_merges_targets() -> None:
    merged = merge_options(
        {"loose": False, "targets": {"chrome": 50, "ie": 9}},
        {"loose": True, "targets": {"ie": 11}},
    )

    assert merged == {"loose": True, "targets": {"chrome": 50, "ie": 11}}
