from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from envpreset.config import discover_config_path, load_options_file, merge_options
from envpreset.errors import PresetError
from envpreset.preset import (
    BuiltPreset,
    PresetSession,
    UnitRegistry,
    build_preset,
    normalize_options,
)
from envpreset.tables import load_tables

app = typer.Typer(
    help="Resolve target environments into an ordered transformation preset",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

LOGGER = logging.getLogger(__name__)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


def _configure_logging(level: LogLevel) -> None:
    resolved_level = getattr(logging, level.value.upper())

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(resolved_level)
    handler = logging.StreamHandler()
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    root.addHandler(handler)


def _fail(console: Console, message: str) -> NoReturn:
    console.print(f"[bold red]error[/bold red]: {escape(message)}")
    raise typer.Exit(code=1)


def _print_json(console: Console, payload: object) -> None:
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
    )


def _parse_target_value(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _parse_targets(target_args: list[str]) -> dict[str, object]:
    targets: dict[str, object] = {}
    browsers: list[str] = []
    for item in target_args:
        key, sep, raw_value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError("targets must use `key=value` format; example: --target chrome=50")
        if key == "browsers":
            browsers.append(raw_value)
            continue
        targets[key] = _parse_target_value(raw_value)
    if browsers:
        targets["browsers"] = browsers[0] if len(browsers) == 1 else browsers
    return targets


def _parse_module_type(raw: str | None) -> object:
    if raw is None:
        return None
    return False if raw.lower() in {"false", "none", "off"} else raw


def _collect_options(
    *,
    config: Path | None,
    targets: list[str],
    include: list[str],
    exclude: list[str],
    use_built_ins: bool | None,
    module_type: str | None,
    loose: bool | None,
    debug: bool | None,
) -> dict[str, object]:
    config_path, err = discover_config_path(start_dir=Path.cwd(), explicit_config=config)
    if err is not None:
        raise ValueError(err)

    base: dict[str, object] = {}
    if config_path is not None:
        LOGGER.info("Using config file: %s", config_path)
        base = load_options_file(config_path)

    overrides: dict[str, object] = {}
    if targets:
        overrides["targets"] = _parse_targets(targets)
    if include:
        overrides["include"] = list(include)
    if exclude:
        overrides["exclude"] = list(exclude)
    for key, value in (
        ("use_built_ins", use_built_ins),
        ("module_type", _parse_module_type(module_type)),
        ("loose", loose),
        ("debug", debug),
    ):
        if value is not None:
            overrides[key] = value
    return merge_options(base, overrides)


def _preset_payload(preset: BuiltPreset) -> dict[str, object]:
    return {
        "targets": dict(preset.targets),
        "module_type": preset.module_type,
        "plugins": [
            {"unit": unit.unit_id, "package": unit.package, "options": options}
            for unit, options in preset.plugins
        ],
    }


ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to envpreset.toml or pyproject.toml. Defaults to one found in the working directory.",
)
TargetOption = typer.Option(
    [],
    "--target",
    "-t",
    help="Target constraint as key=value, e.g. chrome=50, node=current (repeatable).",
)
NoColorOption = typer.Option(False, "--no-color", "-n", help="Disable ANSI color output.")
LogLevelOption = typer.Option(
    LogLevel.warning,
    "--log-level",
    "-l",
    help="Set CLI log verbosity.",
)


@app.command("resolve", help="Resolve targets and print the ordered unit list.")
def resolve_cmd(
    config: Path | None = ConfigOption,
    target: list[str] = TargetOption,
    include: list[str] = typer.Option([], "--include", "-i", help="Always include a capability."),
    exclude: list[str] = typer.Option([], "--exclude", "-x", help="Never include a capability."),
    use_built_ins: bool | None = typer.Option(
        None, "--use-built-ins/--no-use-built-ins", help="Select polyfills as well."
    ),
    module_type: str | None = typer.Option(
        None, "--module-type", "-m", help="amd, commonjs, systemjs, umd, or false."
    ),
    loose: bool | None = typer.Option(None, "--loose/--no-loose", help="Loose mode for units."),
    debug: bool | None = typer.Option(None, "--debug/--no-debug", help="Print the debug report."),
    plugin: list[str] = typer.Option(
        [],
        "--plugin",
        "-p",
        help="Load an extra unit bundle from module:attribute.",
    ),
    json_out: bool = typer.Option(False, "--json", "-j", help="Print the preset as JSON."),
    no_color: bool = NoColorOption,
    log_level: LogLevel = LogLevelOption,
) -> None:
    console = Console(no_color=no_color)
    _configure_logging(log_level)

    try:
        options = _collect_options(
            config=config,
            targets=target,
            include=include,
            exclude=exclude,
            use_built_ins=use_built_ins,
            module_type=module_type,
            loose=loose,
            debug=debug,
        )
        session = PresetSession(
            console=console, registry=UnitRegistry.from_discovery(module_specs=plugin)
        )
        preset = build_preset(options, session=session)
    except (PresetError, ValueError, OSError, ImportError) as exc:
        _fail(console, str(exc))

    if json_out:
        _print_json(console, _preset_payload(preset))
        return

    table = Table(title="Units")
    table.add_column("#", justify="right")
    table.add_column("Unit")
    table.add_column("Package")
    table.add_column("Options")
    for idx, (unit, unit_options) in enumerate(preset.plugins, start=1):
        table.add_row(
            str(idx),
            unit.unit_id,
            unit.package,
            escape(json.dumps(unit_options, sort_keys=True)),
        )
    console.print(table)


@app.command("targets", help="Print the canonical target versions.")
def targets_cmd(
    config: Path | None = ConfigOption,
    target: list[str] = TargetOption,
    json_out: bool = typer.Option(False, "--json", "-j", help="Print targets as JSON."),
    no_color: bool = NoColorOption,
    log_level: LogLevel = LogLevelOption,
) -> None:
    console = Console(no_color=no_color)
    _configure_logging(log_level)

    try:
        options = _collect_options(
            config=config,
            targets=target,
            include=[],
            exclude=[],
            use_built_ins=None,
            module_type=None,
            loose=None,
            debug=None,
        )
        validated = normalize_options(options, known_names=load_tables().known_names())
        targets = PresetSession(console=console).normalizer().normalize(validated.targets)
    except (PresetError, ValueError, OSError) as exc:
        _fail(console, str(exc))

    if json_out:
        _print_json(console, targets)
        return

    if not targets:
        console.print("[dim]No targets: every transformation is required.[/dim]")
        return

    table = Table(title="Targets")
    table.add_column("Environment")
    table.add_column("Minimum Version", justify="right")
    for environment in sorted(targets):
        table.add_row(environment, f"{targets[environment]:g}")
    console.print(table)


@app.command("list", help="List registered units and built-in capabilities.")
def list_cmd(
    plugin: list[str] = typer.Option(
        [],
        "--plugin",
        "-p",
        help="Load an extra unit bundle from module:attribute.",
    ),
    no_color: bool = NoColorOption,
) -> None:
    console = Console(no_color=no_color)
    try:
        registry = UnitRegistry.from_discovery(module_specs=plugin)
    except (PresetError, ValueError, ImportError) as exc:
        _fail(console, f"failed to load units: {exc}")

    units_table = Table(title="Units")
    units_table.add_column("ID")
    units_table.add_column("Package")
    for unit in registry.list_units():
        units_table.add_row(unit.unit_id, unit.package)
    console.print(units_table)

    tables = load_tables()
    built_ins_table = Table(title="Built-ins")
    built_ins_table.add_column("Name")
    built_ins_table.add_column("Default")
    for name in sorted({*tables.built_ins, *tables.default_include}):
        built_ins_table.add_row(name, "yes" if name in tables.default_include else "")
    console.print(built_ins_table)


# Command aliases
app.command("r", help="Alias for `resolve`.")(resolve_cmd)
app.command("tg", help="Alias for `targets`.")(targets_cmd)
app.command("ls", help="Alias for `list`.")(list_cmd)


if __name__ == "__main__":
    app()
