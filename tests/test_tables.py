from __future__ import annotations

from envpreset.selection import is_built_in_name
from envpreset.tables import load_tables


def test_tables_load_package_data() -> None:
    tables = load_tables()

    assert "transform-regenerator" in tables.plugins
    assert tables.electron_to_chromium["1.0"] == 49
    assert tables.module_transformations["commonjs"] == "transform-es2015-modules-commonjs"
    assert tables.default_include == ("web.timers", "web.immediate", "web.dom.iterable")


def test_table_names_partition_cleanly() -> None:
    tables = load_tables()

    assert not any(is_built_in_name(name) for name in tables.plugins)
    assert all(is_built_in_name(name) for name in tables.built_ins)
    assert all(is_built_in_name(name) for name in tables.default_include)


def test_known_names_cover_every_table() -> None:
    tables = load_tables()
    known = tables.known_names()

    assert set(tables.plugins) <= known
    assert set(tables.built_ins) <= known
    assert "web.dom.iterable" in known
