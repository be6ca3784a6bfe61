# -*- coding: utf-8 -*-
"""
    recorddiff
    ~~~~~~~~~~

    Diffs two versions of a semi-structured record: nested fields plus
    tables.  Fields are classified as added, removed, changed or
    unchanged; table rows are aligned, split or reported as moved; and
    changed values carry character spans for inline highlighting.
    Examples:

    >>> from recorddiff import build_diff, count_statuses

    >>> result = build_diff('{"a": 1, "b": "cat"}', '{"a": 1, "b": "cart"}')
    >>> [(row.key, row.status) for row in result.fields]
    [('a', 'unchanged'), ('b', 'changed')]

    >>> print(render_spans(result.fields[1].spans))
    ca<ins>r</ins>t

    >>> left = {'items': {'type': 'table', 'columns': ['name'],
    ...                   'rows': [{'name': 'alpha'}, {'name': 'beta'}, {'name': 'gamma'}]}}
    >>> right = {'items': {'type': 'table', 'columns': ['name'],
    ...                    'rows': [{'name': 'beta'}, {'name': 'alpha'}, {'name': 'gamma'}]}}
    >>> table = build_diff(left, right).tables[0]
    >>> [(row.status, row.id) for row in table.rows]
    [('moved', '2'), ('unchanged', '1'), ('unchanged', '3')]
    >>> count_statuses(table.rows)['moved']
    1
"""
from .config import (
    DiffOptions, get_diff_options, set_diff_options, reset_diff_options
)
from .models import (
    DiffStatus, SpanKind, Span, ValueNode, StructureNode, TableNode, TableRow,
    FieldRow, CellDiff, TableDiffRow, TableDiff, DiffResult, ParseResult
)
from .text_differ import diff_parts
from .similarity import (
    levenshtein_distance, token_similarity, row_similarity, similarity_score
)
from .normalization import (
    parse_json, normalize_value, collect, stringify_value, cell_text,
    structural_equal, values_equal
)
from .field_differ import build_field_rows
from .table_differ import (
    align_rows, align_rows_fallback, detect_moves, build_table_diffs,
    cell_diffs, count_statuses, zero_counts, merge_columns
)
from .differ import build_diff
from .markup import spans_to_stream, render_spans

__all__ = [
    'build_diff',
    'build_field_rows',
    'build_table_diffs',
    'align_rows',
    'align_rows_fallback',
    'detect_moves',
    'cell_diffs',
    'count_statuses',
    'zero_counts',
    'merge_columns',
    'diff_parts',
    'levenshtein_distance',
    'token_similarity',
    'row_similarity',
    'similarity_score',
    'parse_json',
    'normalize_value',
    'collect',
    'stringify_value',
    'cell_text',
    'structural_equal',
    'values_equal',
    'spans_to_stream',
    'render_spans',
    'DiffOptions',
    'get_diff_options',
    'set_diff_options',
    'reset_diff_options',
    'DiffStatus',
    'SpanKind',
    'Span',
    'ValueNode',
    'StructureNode',
    'TableNode',
    'TableRow',
    'FieldRow',
    'CellDiff',
    'TableDiffRow',
    'TableDiff',
    'DiffResult',
    'ParseResult',
]
