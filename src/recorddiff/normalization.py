# -*- coding: utf-8 -*-
"""
Normalization of parsed records into the node model, stringification of
nodes and cells, and structural equality of values.
"""
import json
import logging
from collections import namedtuple

from .config import (
    MAX_TEXT_LENGTH, CIRCULAR_SENTINEL, ROOT_PATH, ROW_ID_KEYS
)
from .models import ValueNode, StructureNode, TableNode, TableRow, ParseResult
from .utils import shorten

logger = logging.getLogger(__name__)

_MISSING = object()


# --- Parsing / normalization -------------------------------------------------

def parse_json(text):
    """
    Parse JSON text into a node.

    Returns ``None`` for blank text, otherwise a :class:`ParseResult` with
    either ``node`` or ``error`` set.
    """
    if not text or not text.strip():
        return None
    try:
        obj = json.loads(text)
    except ValueError as e:
        logger.warning("Invalid JSON: %s", e)
        return ParseResult(node=None, error=str(e))
    return ParseResult(node=normalize_value(obj), error=None)


def normalize_value(value):
    """Turn a parsed JSON value into a node."""
    if isinstance(value, dict):
        kind = value.get('type')
        if kind == 'table':
            return normalize_table(value)
        if kind == 'structure':
            raw_fields = value.get('fields') or {}
            return StructureNode(fields=dict(
                (k, normalize_value(v)) for k, v in raw_fields.items()))
        return StructureNode(fields=dict(
            (k, normalize_value(v)) for k, v in value.items()))
    # Arrays stay opaque values.
    return ValueNode(value)


def normalize_table(value):
    columns = value.get('columns')
    if isinstance(columns, list):
        columns = [c for c in columns if isinstance(c, str)]
    else:
        columns = []
    raw_rows = value.get('rows')
    if not isinstance(raw_rows, list):
        raw_rows = []

    rows = [normalize_row(r, index, columns) for index, r in enumerate(raw_rows)]

    if not columns:
        # No declared columns: infer them from the cells, first seen first.
        seen = set()
        for row in rows:
            for column in row.cells:
                if column not in seen:
                    seen.add(column)
                    columns.append(column)

    name = value.get('name')
    if not isinstance(name, str):
        name = value.get('title')
        if not isinstance(name, str):
            name = None

    return TableNode(
        columns=columns,
        rows=rows,
        name=name,
        has_explicit_ids=any(r.has_explicit_id for r in rows),
    )


def _explicit_id(row):
    for key in ROW_ID_KEYS:
        candidate = row.get(key, _MISSING)
        if candidate is not _MISSING and candidate is not None:
            return candidate
    return _MISSING


def normalize_row(value, index, columns):
    """Normalize one raw row; ``index`` is its 0-based position."""
    row = value if isinstance(value, dict) else None
    explicit = _explicit_id(row) if row is not None else _MISSING
    has_explicit_id = explicit is not _MISSING
    display_id = stringify_scalar(explicit) if has_explicit_id else str(index + 1)

    cells = None
    if row is not None:
        for key in ('cells', 'values'):
            if row.get(key) is not None:
                cells = row[key]
                break
        else:
            cells = row

    if isinstance(cells, list):
        cells = dict((column, cells[i] if i < len(cells) else None)
                     for i, column in enumerate(columns))

    normalized = {}
    if isinstance(cells, dict):
        for key, cell in cells.items():
            normalized[key] = normalize_value(cell)

    return TableRow(
        id=display_id,
        display_id=display_id,
        cells=normalized,
        has_explicit_id=has_explicit_id,
    )


def collect(node, path, fields, tables):
    """
    Flatten ``node`` into ``fields`` (dotted path -> raw value) and
    ``tables`` (dotted path -> :class:`TableNode`).
    """
    if node is None:
        return
    if isinstance(node, StructureNode):
        for name, child in node.fields.items():
            next_path = '%s.%s' % (path, name) if path else name
            if isinstance(child, TableNode):
                tables[next_path] = child
            elif isinstance(child, StructureNode):
                collect(child, next_path, fields, tables)
            elif isinstance(child, ValueNode):
                fields[next_path] = child.value
            else:
                raise TypeError("Not a diff node: %r" % (child,))
        return
    if isinstance(node, TableNode):
        tables[path or ROOT_PATH] = node
        return
    if isinstance(node, ValueNode):
        fields[path or ROOT_PATH] = node.value
        return
    raise TypeError("Not a diff node: %r" % (node,))


# --- Stringification ---------------------------------------------------------

def _to_json(value):
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'), default=str)


def stringify_scalar(value):
    """
    Text form of a raw value.

    >>> stringify_scalar(True), stringify_scalar(12), stringify_scalar(None)
    ('true', '12', '')
    >>> stringify_scalar({'b': 1, 'a': [1, 2]})
    '{"b":1,"a":[1,2]}'
    """
    if value is None:
        return u''
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return u'true' if value else u'false'
    if isinstance(value, (int, float)):
        return str(value)
    try:
        text = _to_json(value)
    except (TypeError, ValueError):
        # Circular containers cannot be serialized.
        text = repr(value)
    return shorten(text, MAX_TEXT_LENGTH)


def node_to_plain(node):
    """Convert a node back to plain Python data."""
    if isinstance(node, ValueNode):
        return node.value
    if isinstance(node, StructureNode):
        return dict((k, node_to_plain(v)) for k, v in node.fields.items())
    if isinstance(node, TableNode):
        return {
            'type': 'table',
            'columns': list(node.columns),
            'rows': [
                {'id': row.id,
                 'cells': dict((k, node_to_plain(v)) for k, v in row.cells.items())}
                for row in node.rows
            ],
        }
    return node


def stringify_value(node):
    """Bounded text summary of a node."""
    if node is None:
        return u''
    if isinstance(node, ValueNode):
        return stringify_scalar(node.value)
    if isinstance(node, TableNode):
        return u'[table %dx%d]' % (len(node.rows), len(node.columns))
    if isinstance(node, StructureNode):
        return shorten(_to_json(node_to_plain(node)), MAX_TEXT_LENGTH)
    raise TypeError("Not a diff node: %r" % (node,))


def cell_text(row, column):
    """Stringified cell of ``row``, cached on the row."""
    if row is None:
        return u''
    cached = row.cell_cache.get(column)
    if cached is not None:
        return cached
    value = row.cells.get(column)
    if isinstance(value, (ValueNode, StructureNode, TableNode)):
        text = stringify_value(value)
    else:
        text = stringify_scalar(value)
    row.cell_cache[column] = text
    return text


def is_null_cell(row, column):
    """True when the cell exists and holds an explicit null."""
    if row is None or column not in row.cells:
        return False
    value = row.cells[column]
    if value is None:
        return True
    return isinstance(value, ValueNode) and value.value is None


# --- Structural equality -----------------------------------------------------

EqualityResult = namedtuple('EqualityResult', 'equal error')


def canonicalize(value, _ancestors=None):
    """
    Canonical, hashable form of a raw value.

    Object keys are sorted and each JSON type is tagged, so ``True`` and
    ``1`` differ while ``1`` and ``1.0`` are equal. A reference back to an
    enclosing container becomes a circular sentinel. Mappings with keys that
    cannot be ordered raise ``TypeError``.
    """
    if _ancestors is None:
        _ancestors = set()
    if value is None:
        return ('null',)
    if isinstance(value, bool):
        return ('bool', value)
    if isinstance(value, (int, float)):
        return ('number', value)
    if isinstance(value, str):
        return ('string', value)
    if isinstance(value, (dict, list, tuple)):
        marker = id(value)
        if marker in _ancestors:
            return ('circular', CIRCULAR_SENTINEL)
        _ancestors.add(marker)
        try:
            if isinstance(value, dict):
                items = sorted(value.items(), key=lambda kv: kv[0])
                return ('object', tuple((k, canonicalize(v, _ancestors)) for k, v in items))
            return ('array', tuple(canonicalize(v, _ancestors) for v in value))
        finally:
            _ancestors.discard(marker)
    if isinstance(value, (ValueNode, StructureNode, TableNode)):
        return ('node', canonicalize(node_to_plain(value), _ancestors))
    return ('opaque', type(value).__name__, repr(value))


def structural_equal(a, b):
    """
    Compare two raw values structurally.

    Returns an :class:`EqualityResult`; ``error`` is set (and ``equal`` is
    ``None``) when a value cannot be canonicalized.
    """
    try:
        return EqualityResult(canonicalize(a) == canonicalize(b), None)
    except (TypeError, ValueError, RecursionError) as e:
        return EqualityResult(None, '%s: %s' % (type(e).__name__, e))


def serialize_stable(value):
    """Serialized form used when structural comparison is not possible."""
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True, default=repr)
    except (TypeError, ValueError, RecursionError):
        return repr(value)


def values_equal(a, b):
    """Structural equality, falling back to comparing serialized strings."""
    result = structural_equal(a, b)
    if result.error is None:
        return result.equal
    logger.debug("structural comparison failed (%s); comparing serialized forms", result.error)
    return serialize_stable(a) == serialize_stable(b)
