from __future__ import annotations

import pytest

from recorddiff import (
    StructureNode, TableNode, TableRow, ValueNode, cell_text, collect,
    normalize_value, parse_json, stringify_value, structural_equal,
)
from recorddiff.normalization import canonicalize, is_null_cell


def test_plain_objects_become_structures():
    node = normalize_value({"a": 1, "b": {"c": [1, 2]}})

    assert isinstance(node, StructureNode)
    assert node.fields["a"] == ValueNode(1)
    assert node.fields["b"] == StructureNode(fields={"c": ValueNode([1, 2])})


def test_explicit_structure_marker():
    node = normalize_value({"type": "structure", "fields": {"x": "y"}})

    assert node == StructureNode(fields={"x": ValueNode("y")})


def test_table_rows_with_explicit_and_positional_ids():
    node = normalize_value({
        "type": "table",
        "title": "Goods",
        "columns": ["name", 3, "qty"],
        "rows": [
            {"id": 10, "name": "a", "qty": 1},
            {"$id": "x", "cells": {"name": "b", "qty": 2}},
            {"key": "k", "values": ["c", 3]},
            {"name": "d"},
            "garbage",
        ],
    })

    assert isinstance(node, TableNode)
    assert node.columns == ["name", "qty"]
    assert node.name == "Goods"
    assert node.has_explicit_ids
    assert [r.display_id for r in node.rows] == ["10", "x", "k", "4", "5"]
    assert [r.has_explicit_id for r in node.rows] == [True, True, True, False, False]
    assert node.rows[2].cells == {"name": ValueNode("c"), "qty": ValueNode(3)}
    assert node.rows[4].cells == {}


def test_table_columns_are_inferred_from_cells():
    node = normalize_value({"type": "table", "name": "T",
                            "rows": [{"a": 1}, {"b": 2, "a": 3}]})

    assert node.columns == ["a", "b"]
    assert not node.has_explicit_ids


def test_stringify_value():
    assert stringify_value(None) == ""
    assert stringify_value(ValueNode(None)) == ""
    assert stringify_value(ValueNode("text")) == "text"
    assert stringify_value(ValueNode(False)) == "false"
    assert stringify_value(ValueNode(1.5)) == "1.5"
    table = TableNode(columns=["a", "b"], rows=[TableRow(id="1", display_id="1")])
    assert stringify_value(table) == "[table 1x2]"
    structure = StructureNode(fields={"k": ValueNode("v"), "n": ValueNode([1])})
    assert stringify_value(structure) == '{"k":"v","n":[1]}'


def test_stringify_value_rejects_foreign_objects():
    with pytest.raises(TypeError):
        stringify_value(object())


def test_cell_text_is_cached_and_null_is_explicit():
    row = TableRow(id="1", display_id="1", cells={"a": ValueNode(None), "b": ValueNode(7)})

    assert cell_text(row, "a") == ""
    assert cell_text(row, "b") == "7"
    assert cell_text(row, "missing") == ""
    assert row.cell_cache == {"a": "", "b": "7", "missing": ""}
    assert is_null_cell(row, "a")
    assert not is_null_cell(row, "b")
    assert not is_null_cell(row, "missing")
    assert cell_text(None, "a") == ""


def test_collect_flattens_paths_and_tables():
    root = normalize_value({
        "head": {"n": 1, "inner": {"x": None}},
        "list": [1, 2],
        "items": {"type": "table", "rows": []},
    })
    fields, tables = {}, {}

    collect(root, "", fields, tables)

    assert fields == {"head.n": 1, "head.inner.x": None, "list": [1, 2]}
    assert list(tables) == ["items"]


def test_collect_root_table_and_root_value():
    fields, tables = {}, {}
    collect(normalize_value({"type": "table", "rows": []}), "", fields, tables)
    collect(normalize_value(42), "", fields, tables)

    assert list(tables) == ["ROOT"]
    assert fields == {"ROOT": 42}


def test_parse_json():
    assert parse_json("   ") is None
    ok = parse_json('{"a": 1}')
    assert ok.error is None
    assert ok.node == StructureNode(fields={"a": ValueNode(1)})
    bad = parse_json("{")
    assert bad.node is None
    assert bad.error


def test_canonicalize_sorts_keys_and_tags_types():
    assert canonicalize({"b": 1, "a": 2}) == canonicalize({"a": 2, "b": 1})
    assert canonicalize([True]) != canonicalize([1])
    assert canonicalize("1") != canonicalize(1)


def test_canonicalize_marks_cycles_only():
    shared = [1]
    assert canonicalize({"a": shared, "b": shared}) == canonicalize({"a": [1], "b": [1]})
    loop = []
    loop.append(loop)
    assert canonicalize(loop) == ("array", (("circular", "[Circular]"),))


def test_structural_equal_reports_errors():
    result = structural_equal({1: "a", "b": 2}, {"b": 2, 1: "a"})
    assert result.equal is None
    assert result.error.startswith("TypeError")
    assert structural_equal([1, {"a": None}], [1, {"a": None}]) == (True, None)
