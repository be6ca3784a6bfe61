# -*- coding: utf-8 -*-
"""
Inline markup for character spans.

Turns a span sequence into a Genshi event stream where deleted text is
wrapped in ``<del>`` and inserted text in ``<ins>``. A renderer showing one
side only passes ``side='left'`` (inserts dropped) or ``side='right'``
(deletes dropped).
"""
from genshi.core import Stream, QName, Attrs, START, END, TEXT

from .models import SpanKind

_POS = (None, -1, -1)

CHANGE_TAGS = {
    SpanKind.DELETE: 'del',
    SpanKind.INSERT: 'ins',
}


def _hidden_kind(side):
    if side == 'left':
        return SpanKind.INSERT
    if side == 'right':
        return SpanKind.DELETE
    if side is None:
        return None
    raise ValueError("side must be 'left', 'right' or None, not %r" % (side,))


def span_events(spans, side=None):
    hidden = _hidden_kind(side)
    for span in spans:
        if span.kind == hidden or not span.value:
            continue
        if span.kind == SpanKind.EQUAL:
            yield TEXT, span.value, _POS
            continue
        tag = QName(CHANGE_TAGS[span.kind])
        yield START, (tag, Attrs()), _POS
        yield TEXT, span.value, _POS
        yield END, tag, _POS


def spans_to_stream(spans, side=None):
    """Genshi :class:`Stream` of the spans for ``side`` (both when None)."""
    return Stream(list(span_events(spans, side)))


def render_spans(spans, side=None, fallback_text=u''):
    """
    Render spans as an HTML fragment.

    When ``spans`` is ``None`` (no inline diff available) the escaped
    ``fallback_text`` is returned instead.
    """
    if spans is None:
        stream = Stream([(TEXT, fallback_text or u'', _POS)])
    else:
        stream = spans_to_stream(spans, side)
    return stream.render('html', encoding=None, strip_whitespace=False)
