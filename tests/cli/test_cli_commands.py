from __future__ import annotations

import json
import re
from pathlib import Path

from typer.testing import CliRunner

from envpreset.cli import app

runner = CliRunner(env={"COLUMNS": "200"})


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def test_resolve_json_output(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app,
        ["resolve", "-t", "chrome=55", "--use-built-ins", "--loose", "--json", "-n"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["targets"] == {"chrome": 55}
    assert [row["unit"] for row in payload["plugins"]] == [
        "transform-es2015-modules-commonjs",
        "syntax-trailing-function-commas",
        "transform-polyfill-require",
    ]
    assert payload["plugins"][0]["options"] == {"loose": True}
    assert payload["plugins"][2]["options"]["regenerator"] is False


def test_resolve_reads_config_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "envpreset.toml").write_text(
        'module_type = "umd"\nexclude = ["syntax-trailing-function-commas"]\n'
        "[targets]\nchrome = 55\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["resolve", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [row["unit"] for row in payload["plugins"]] == ["transform-es2015-modules-umd"]


def test_resolve_flags_override_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "envpreset.toml").write_text(
        'module_type = "umd"\n[targets]\nchrome = 40\n', encoding="utf-8"
    )

    result = runner.invoke(app, ["resolve", "-t", "chrome=60", "-m", "false", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["targets"] == {"chrome": 60}
    assert payload["plugins"] == []


def test_resolve_table_output(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["resolve", "-t", "chrome=60", "-n"])

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert "Units" in output
    assert "transform-es2015-modules-commonjs" in output


def test_resolve_reports_bad_target(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["resolve", "-t", "electron=99.9", "-n"])

    assert result.exit_code == 1
    assert "too old or too new" in _strip_ansi(result.output)


def test_resolve_reports_malformed_target_flag(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["resolve", "-t", "chrome", "-n"])

    assert result.exit_code == 1
    assert "key=value" in _strip_ansi(result.output)


def test_targets_json(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app,
        ["targets", "-t", "browsers=chrome 50", "-t", "browsers=ie 8", "-t", "node=10", "-j"],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"chrome": 50, "ie": 8, "node": 10}


def test_targets_empty_message(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["tg", "-n"])

    assert result.exit_code == 0, result.output
    assert "every transformation is required" in _strip_ansi(result.output)


def test_list_shows_units_and_built_ins() -> None:
    result = runner.invoke(app, ["ls", "-n"])

    assert result.exit_code == 0, result.output
    output = _strip_ansi(result.output)
    assert "transform-regenerator" in output
    assert "web.timers" in output


def test_resolve_reports_missing_plugin_module(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["resolve", "-p", "no_such_units_module:bundle", "-n"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "no_such_units_module" in _strip_ansi(result.output)
