# -*- coding: utf-8 -*-
"""
Field diffing.

Compares two flattened ``path -> value`` mappings and classifies every path.
"""
from .models import DiffStatus, FieldRow
from .normalization import stringify_scalar, values_equal
from .text_differ import diff_parts

_MISSING = object()


def field_status(left, right):
    if left is _MISSING:
        return DiffStatus.ADDED
    if right is _MISSING:
        return DiffStatus.REMOVED
    if values_equal(left, right):
        return DiffStatus.UNCHANGED
    return DiffStatus.CHANGED


def build_field_rows(left, right):
    """
    Diff two flattened field mappings.

    Returns one :class:`FieldRow` per key of either side, sorted by key.
    Changed rows carry character spans between the two value texts.
    """
    keys = sorted(set(left) | set(right))
    rows = []
    for key in keys:
        lval = left.get(key, _MISSING)
        rval = right.get(key, _MISSING)
        status = field_status(lval, rval)
        left_text = None if lval is _MISSING else stringify_scalar(lval)
        right_text = None if rval is _MISSING else stringify_scalar(rval)
        spans = None
        if status == DiffStatus.CHANGED:
            spans = diff_parts(left_text, right_text)
        rows.append(FieldRow(
            key=key,
            left_text=left_text,
            right_text=right_text,
            status=status,
            spans=spans,
        ))
    return rows
