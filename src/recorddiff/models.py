# -*- coding: utf-8 -*-
"""
Data classes for the comparison node model and diff results.

The node model is a closed variant of three kinds:

* :class:`ValueNode` - a scalar, null, or opaque payload (lists included)
* :class:`StructureNode` - a mapping from field name to node
* :class:`TableNode` - ordered rows over an ordered set of columns
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class DiffStatus(object):
    """Status of one output row."""

    UNCHANGED = 'unchanged'
    ADDED = 'added'
    REMOVED = 'removed'
    CHANGED = 'changed'
    MOVED = 'moved'

    ALL = (CHANGED, ADDED, REMOVED, MOVED, UNCHANGED)


class SpanKind(object):
    EQUAL = 'equal'
    INSERT = 'insert'
    DELETE = 'delete'


@dataclass
class ValueNode:
    value: Any = None


@dataclass
class StructureNode:
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class TableRow:
    """
    One table row.

    Rows are immutable once normalized, so the two caches below are filled
    lazily and never invalidated:

    * ``signature_cache`` maps a column-set key to the row signature
    * ``cell_cache`` maps a column name to its stringified cell
    """
    id: str
    display_id: str
    cells: Dict[str, Any] = field(default_factory=dict)
    has_explicit_id: bool = False
    signature_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    cell_cache: Dict[str, str] = field(default_factory=dict, repr=False)


@dataclass
class TableNode:
    columns: List[str] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)
    name: Optional[str] = None
    has_explicit_ids: bool = False


NODE_TYPES = (ValueNode, StructureNode, TableNode)


@dataclass(frozen=True)
class Span:
    """A run of characters that is equal, inserted or deleted."""
    kind: str
    value: str


@dataclass
class FieldRow:
    key: str
    left_text: Optional[str]
    right_text: Optional[str]
    status: str
    spans: Optional[List[Span]] = None


@dataclass
class CellDiff:
    left_text: str
    right_text: str
    left_null: bool
    right_null: bool
    spans: Optional[List[Span]]


@dataclass
class TableDiffRow:
    """
    One output row of a table comparison.

    Attributes:
        id: Display id of the row (left side preferred)
        status: One of :class:`DiffStatus`
        left: Left row, ``None`` for added rows
        right: Right row, ``None`` for removed rows
        group_id: Shared by the removed/added halves of a rejected match
        pair: The row this one was compared against before being split
        move_id: Set on moved rows
        move_from_index: Left position of a moved row
        move_to_index: Right position of a moved row
        left_index: Position of ``left`` in the original left rows
        right_index: Position of ``right`` in the original right rows
        cell_diffs: Column name -> :class:`CellDiff`
    """
    id: str
    status: str
    left: Optional[TableRow] = None
    right: Optional[TableRow] = None
    group_id: str = ''
    pair: Optional[TableRow] = None
    move_id: Optional[str] = None
    move_from_index: Optional[int] = None
    move_to_index: Optional[int] = None
    left_index: Optional[int] = None
    right_index: Optional[int] = None
    cell_diffs: Optional[Dict[str, CellDiff]] = None


@dataclass
class TableDiff:
    path: str
    title: Optional[str]
    columns: List[str]
    rows: List[TableDiffRow] = field(default_factory=list)


@dataclass
class ParseResult:
    node: Any
    error: Optional[str] = None


@dataclass
class DiffResult:
    """Complete comparison of two record versions."""
    left: Any
    right: Any
    fields: List[FieldRow] = field(default_factory=list)
    tables: List[TableDiff] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
