# -*- coding: utf-8 -*-
"""
Comparison pipeline: parse both versions, flatten them and diff fields and
tables.
"""
import logging

from .config import resolve_options
from .field_differ import build_field_rows
from .models import DiffResult, ParseResult
from .normalization import parse_json, normalize_value, collect
from .table_differ import build_table_diffs

logger = logging.getLogger(__name__)


def parse_input(value):
    """Accept JSON text, an already parsed object, or None."""
    if isinstance(value, str):
        return parse_json(value)
    if value is None:
        return ParseResult(node=None, error=None)
    return ParseResult(node=normalize_value(value), error=None)


def build_diff(left, right, options=None):
    """
    Compare two versions of a record.

    Each side may be JSON text or a parsed object. Sides that fail to parse
    are reported in ``errors`` and compared as empty.
    """
    options = resolve_options(options)
    left_parsed = parse_input(left)
    right_parsed = parse_input(right)

    errors = []
    if left_parsed is not None and left_parsed.error:
        errors.append('Left version: %s' % left_parsed.error)
    if right_parsed is not None and right_parsed.error:
        errors.append('Right version: %s' % right_parsed.error)

    left_root = left_parsed.node if left_parsed is not None else None
    right_root = right_parsed.node if right_parsed is not None else None

    left_fields, right_fields = {}, {}
    left_tables, right_tables = {}, {}
    collect(left_root, '', left_fields, left_tables)
    collect(right_root, '', right_fields, right_tables)
    logger.debug("fields: %d/%d, tables: %d/%d", len(left_fields), len(right_fields),
                 len(left_tables), len(right_tables))

    return DiffResult(
        left=left_root,
        right=right_root,
        fields=build_field_rows(left_fields, right_fields),
        tables=build_table_diffs(left_tables, right_tables, options),
        errors=errors,
    )
