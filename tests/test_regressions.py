from __future__ import annotations

import doctest

import recorddiff
from recorddiff import (
    TableNode, TableRow, ValueNode, build_diff, build_table_diffs,
    count_statuses, get_diff_options, reset_diff_options, set_diff_options,
)
from recorddiff import normalization, similarity, text_differ, utils


def value_node(value) -> ValueNode:
    return ValueNode(value)


def row(row_id: str, cells: dict) -> TableRow:
    return TableRow(
        id=row_id,
        display_id=row_id,
        cells={k: value_node(v) for k, v in cells.items()},
        has_explicit_id=True,
    )


def table(name: str, columns: list[str], rows: list[TableRow]) -> TableNode:
    return TableNode(columns=columns, rows=rows, name=name, has_explicit_ids=True)


def diff_root(left: TableNode, right: TableNode):
    return build_table_diffs({"ROOT": left}, {"ROOT": right})


def test_doctests_recorddiff_modules():
    # Keep parity with legacy `python test.py` runner.
    for module in (recorddiff, normalization, similarity, text_differ, utils):
        res = doctest.testmod(module, verbose=False)
        assert res.failed == 0, module.__name__


def test_aligns_rows_and_marks_each_status():
    columns = ["name", "value"]
    left = table("Test", columns, [
        row("1", {"name": "alpha", "value": 1}),
        row("2", {"name": "beta", "value": 1}),
        row("3", {"name": "left-only", "value": "x"}),
    ])
    right = table("Test", columns, [
        row("1", {"name": "alpha", "value": 1}),
        row("2", {"name": "beta", "value": 2}),
        row("4", {"name": "right-only", "value": "y"}),
    ])

    diffs = diff_root(left, right)

    assert len(diffs) == 1
    counts = count_statuses(diffs[0].rows)
    assert counts == {"changed": 1, "added": 1, "removed": 1, "moved": 0, "unchanged": 1}
    statuses = [r.status for r in diffs[0].rows]
    assert statuses[:2] == ["unchanged", "changed"]


def test_rejected_match_is_split_into_adjacent_pair():
    columns = ["name", "value"]
    left = table("T", columns, [row("3", {"name": "left-only", "value": "x"})])
    right = table("T", columns, [row("4", {"name": "right-only", "value": "y"})])

    rows = diff_root(left, right)[0].rows

    assert [r.status for r in rows] == ["added", "removed"]
    added, removed = rows
    assert removed.group_id == added.group_id == "pair-1-1"
    assert removed.pair is added.right
    assert added.pair is removed.left
    assert removed.cell_diffs["name"].right_text == "right-only"
    assert added.cell_diffs["name"].left_text == "left-only"


def test_large_table_falls_back_to_id_alignment():
    columns = ["name"]
    left_rows = [row(str(i), {"name": f"row-{i}"}) for i in range(1, 231)]
    right_rows = [row(str(i), {"name": f"row-{i}"}) for i in range(1, 231)]
    right_rows[5] = row("6", {"name": "changed"})

    diffs = diff_root(table("Big", columns, left_rows), table("Big", columns, right_rows))

    assert len(diffs[0].rows) == 230
    counts = count_statuses(diffs[0].rows)
    assert counts["unchanged"] == 229
    assert counts["changed"] == 1
    assert counts["moved"] == 0
    changed = [r for r in diffs[0].rows if r.status == "changed"][0]
    assert changed.id == "6"
    assert changed.cell_diffs["name"].right_text == "changed"


def test_fallback_threshold_is_tunable_via_options():
    previous = get_diff_options()
    set_diff_options(max_align_cells=1)
    try:
        columns = ["name"]
        left_rows = [row("1", {"name": "alpha"}), row("2", {"name": "beta"})]
        right_rows = [row("1", {"name": "alpha"}), row("2", {"name": "beta"})]

        diffs = diff_root(table("Small", columns, left_rows), table("Small", columns, right_rows))

        assert diffs[0].rows[0].group_id == "fallback-0"
    finally:
        reset_diff_options()
    assert get_diff_options() == previous


def test_fallback_classifies_by_content():
    columns = ["name"]
    left = table("T", columns, [row("1", {"name": "alpha"}), row("2", {"name": "beta"}),
                                row("3", {"name": "gone"})])
    right = table("T", columns, [row("1", {"name": "alpha"}), row("2", {"name": "BETA"}),
                                 row("9", {"name": "new"})])
    set_diff_options(max_align_cells=0)
    try:
        rows = diff_root(left, right)[0].rows
    finally:
        reset_diff_options()
    assert [(r.id, r.status) for r in rows] == [
        ("1", "unchanged"), ("2", "changed"), ("3", "removed"), ("9", "added"),
    ]


def test_detects_moved_rows():
    columns = ["name"]
    left = table("Move", columns, [
        row("1", {"name": "alpha"}),
        row("2", {"name": "beta"}),
        row("3", {"name": "gamma"}),
    ])
    right = table("Move", columns, [
        row("2", {"name": "beta"}),
        row("1", {"name": "alpha"}),
        row("3", {"name": "gamma"}),
    ])

    rows = diff_root(left, right)[0].rows

    counts = count_statuses(rows)
    assert counts["moved"] == 1
    assert counts["added"] == 0
    assert counts["removed"] == 0
    moved = rows[0]
    assert moved.status == "moved"
    assert moved.id == "2"
    assert (moved.move_from_index, moved.move_to_index) == (1, 0)
    assert moved.move_id == "move-1-0"
    assert set(moved.cell_diffs) == {"name"}


def test_identical_tables_have_no_differences():
    columns = ["name", "qty"]
    rows = [row(str(i), {"name": f"item {i % 3}", "qty": i % 2}) for i in range(1, 9)]
    t = table("Same", columns, rows)

    diff = diff_root(t, t)[0]

    assert all(r.status == "unchanged" for r in diff.rows)
    assert len(diff.rows) == 8


def test_swapping_sides_swaps_added_and_removed():
    columns = ["name", "value"]
    a = table("T", columns, [
        row("1", {"name": "alpha", "value": 1}),
        row("2", {"name": "beta", "value": 1}),
        row("3", {"name": "gamma", "value": 3}),
        row("4", {"name": "delta", "value": 4}),
    ])
    b = table("T", columns, [
        row("2", {"name": "beta", "value": 1}),
        row("1", {"name": "alpha", "value": 1}),
        row("3", {"name": "gamma", "value": 30}),
        row("4", {"name": "delta", "value": 4}),
        row("5", {"name": "zeta", "value": 9}),
    ])

    forward = count_statuses(diff_root(a, b)[0].rows)
    backward = count_statuses(diff_root(b, a)[0].rows)

    assert forward == {"changed": 1, "added": 1, "removed": 0, "moved": 1, "unchanged": 2}
    assert forward["added"] == backward["removed"]
    assert forward["removed"] == backward["added"]
    assert forward["changed"] == backward["changed"]
    assert forward["moved"] == backward["moved"]


def test_output_length_bounds():
    columns = ["name"]
    left = table("T", columns, [row(str(i), {"name": n}) for i, n in enumerate(["a", "b", "c", "d"])])
    right = table("T", columns, [row(str(i), {"name": n}) for i, n in enumerate(["x", "b", "y"])])

    rows = diff_root(left, right)[0].rows

    assert max(4, 3) <= len(rows) <= 4 + 3
    assert sum(count_statuses(rows).values()) == len(rows)


def test_pipeline_reports_invalid_json():
    result = build_diff("{", '{ "ok": true }')

    assert len(result.errors) == 1
    assert result.errors[0].startswith("Left version")
    assert len(result.fields) == 1


def test_pipeline_diffs_json_strings():
    result = build_diff('{"a": 1, "b": 2}', '{"a": 1, "b": 3, "c": 4}')

    by_key = {r.key: r.status for r in result.fields}
    assert by_key == {"a": "unchanged", "b": "changed", "c": "added"}
    assert result.errors == []


def test_pipeline_accepts_parsed_objects():
    left = {"a": 1, "table": {"type": "table", "columns": ["x"], "rows": [{"id": 1, "x": 10}]}}
    right = {"a": 2, "table": {"type": "table", "columns": ["x"],
                               "rows": [{"id": 1, "x": 10}, {"id": 2, "x": 20}]}}

    result = build_diff(left, right)

    assert result.errors == []
    assert {r.key: r.status for r in result.fields}["a"] == "changed"
    assert len(result.tables) == 1
    t = result.tables[0]
    assert t.path == "table"
    assert [r.status for r in t.rows] == ["unchanged", "added"]


def test_pipeline_idempotent_on_nested_record():
    record = {
        "header": {"number": "A-17", "date": "2024-01-02", "meta": {"tags": ["x", "y"]}},
        "goods": {"type": "table", "name": "Goods", "columns": ["name", "qty"],
                  "rows": [{"name": "Стол", "qty": 1}, {"name": "Стул", "qty": 4}]},
    }

    result = build_diff(record, record)

    assert all(r.status == "unchanged" for r in result.fields)
    assert [r.key for r in result.fields] == ["header.date", "header.meta.tags", "header.number"]
    assert all(r.status == "unchanged" for r in result.tables[0].rows)
    assert result.tables[0].title == "Goods"


def test_empty_inputs_produce_empty_result():
    result = build_diff(None, "   ")

    assert result.fields == []
    assert result.tables == []
    assert result.errors == []
