# -*- coding: utf-8 -*-
"""
Character-level text diffing.

The diff is the classic LCS table backtrack. It is used for inline
highlighting of changed field values and table cells, so it gives up on
inputs too large to highlight (see ``TEXT_DIFF_MAX_LENGTH`` and
``TEXT_DIFF_MAX_AREA``) and the caller shows the whole value instead.
"""
import logging

from .config import TEXT_DIFF_MAX_LENGTH, TEXT_DIFF_MAX_AREA
from .models import Span, SpanKind
from .utils import create_matrix

logger = logging.getLogger(__name__)


def _as_text(value):
    return u'' if value is None else str(value)


def merge_spans(parts):
    """Merge adjacent ``(kind, char)`` parts of the same kind into spans."""
    spans = []
    kind = None
    buf = []
    for part_kind, char in parts:
        if part_kind != kind and buf:
            spans.append(Span(kind, u''.join(buf)))
            del buf[:]
        kind = part_kind
        buf.append(char)
    if buf:
        spans.append(Span(kind, u''.join(buf)))
    return spans


def diff_parts(a, b):
    """
    Diff two strings character by character.

    Returns a list of :class:`Span`, or ``None`` when either string is
    longer than ``TEXT_DIFF_MAX_LENGTH`` or the product of the lengths
    exceeds ``TEXT_DIFF_MAX_AREA``.

    >>> [(s.kind, s.value) for s in diff_parts('kitten', 'sitting')]
    [('insert', 's'), ('delete', 'k'), ('equal', 'itt'), ('insert', 'i'), ('delete', 'e'), ('equal', 'n'), ('insert', 'g')]
    >>> diff_parts('', '')
    []
    """
    left = _as_text(a)
    right = _as_text(b)
    n = len(left)
    m = len(right)

    if n == 0 and m == 0:
        return []
    if n * m > TEXT_DIFF_MAX_AREA or n > TEXT_DIFF_MAX_LENGTH or m > TEXT_DIFF_MAX_LENGTH:
        logger.debug("text diff skipped: %dx%d characters over guard", n, m)
        return None

    lcs = create_matrix(n + 1, m + 1, 0)
    for i in range(1, n + 1):
        row = lcs[i]
        above = lcs[i - 1]
        ch = left[i - 1]
        for j in range(1, m + 1):
            if ch == right[j - 1]:
                row[j] = above[j - 1] + 1
            else:
                row[j] = max(above[j], row[j - 1])

    parts = []
    i = n
    j = m
    while i > 0 and j > 0:
        if left[i - 1] == right[j - 1]:
            parts.append((SpanKind.EQUAL, left[i - 1]))
            i -= 1
            j -= 1
        elif lcs[i - 1][j] >= lcs[i][j - 1]:
            # Ties go to the delete so the left side keeps the run.
            parts.append((SpanKind.DELETE, left[i - 1]))
            i -= 1
        else:
            parts.append((SpanKind.INSERT, right[j - 1]))
            j -= 1
    while i > 0:
        parts.append((SpanKind.DELETE, left[i - 1]))
        i -= 1
    while j > 0:
        parts.append((SpanKind.INSERT, right[j - 1]))
        j -= 1

    parts.reverse()
    return merge_spans(parts)


def left_text(spans):
    """Reassemble the left string from ``equal`` and ``delete`` spans."""
    return u''.join(s.value for s in spans if s.kind != SpanKind.INSERT)


def right_text(spans):
    """Reassemble the right string from ``equal`` and ``insert`` spans."""
    return u''.join(s.value for s in spans if s.kind != SpanKind.DELETE)
