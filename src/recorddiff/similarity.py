# -*- coding: utf-8 -*-
"""
Distance and similarity primitives used to score table rows.
"""
from collections import namedtuple

from .config import (
    _token_split_re, SIGNATURE_SEPARATOR, COLUMN_KEY_SEPARATOR,
    TOKEN_SIMILARITY_MIN_LENGTH, SIMILAR_THRESHOLD
)
from .normalization import cell_text


Similarity = namedtuple('Similarity', 'same similar similarity')


def levenshtein_distance(a, b):
    """
    Edit distance with unit insert, delete and substitute costs.

    >>> levenshtein_distance('kitten', 'sitting')
    3
    """
    if a == b:
        return 0
    n = len(a)
    m = len(b)
    if n == 0:
        return m
    if m == 0:
        return n
    # Two rolling rows over the shorter string.
    if m > n:
        a, b = b, a
        n, m = m, n
    prev = list(range(m + 1))
    for i in range(1, n + 1):
        cur = [i] + [0] * m
        ca = a[i - 1]
        for j in range(1, m + 1):
            cost = 0 if ca == b[j - 1] else 1
            cur[j] = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
        prev = cur
    return prev[m]


def tokenize(text):
    """Lower-cased set of word tokens."""
    return set(t for t in _token_split_re.split(str(text).lower()) if t)


def token_similarity(a, b):
    """
    Jaccard similarity of the token sets of ``a`` and ``b``.

    >>> token_similarity('Red apple', 'apple, green')
    0.3333333333333333
    >>> token_similarity('', '...')
    1
    """
    left = tokenize(a)
    right = tokenize(b)
    if not left and not right:
        return 1
    union = len(left | right)
    if union == 0:
        return 0
    return len(left & right) / union


def column_key(columns):
    return COLUMN_KEY_SEPARATOR.join(columns)


def row_signature(row, columns):
    """Per-column text of ``row`` joined with ``|``, cached on the row."""
    key = column_key(columns)
    signature = row.signature_cache.get(key)
    if signature is None:
        signature = SIGNATURE_SEPARATOR.join(cell_text(row, c) for c in columns)
        row.signature_cache[key] = signature
    return signature


def rows_equal(left, right, columns):
    """True when every column stringifies identically on both rows."""
    if left is None or right is None:
        return False
    for column in columns:
        if cell_text(left, column) != cell_text(right, column):
            return False
    return True


def _signature_similarity(left, right, columns):
    sig_a = row_signature(left, columns)
    sig_b = row_signature(right, columns)
    max_len = max(len(sig_a), len(sig_b))
    if max_len == 0:
        return 1.0
    if max_len > TOKEN_SIMILARITY_MIN_LENGTH:
        return float(token_similarity(sig_a, sig_b))
    return 1.0 - levenshtein_distance(sig_a, sig_b) / max_len


def similarity_score(left, right, columns):
    """
    Score two rows.

    Returns ``Similarity(same, similar, similarity)``: ``same`` when all
    columns match exactly, ``similar`` when the similarity reaches
    ``SIMILAR_THRESHOLD``.
    """
    if left is None or right is None:
        return Similarity(False, False, 0.0)
    if rows_equal(left, right, columns):
        return Similarity(True, True, 1.0)
    sim = _signature_similarity(left, right, columns)
    return Similarity(False, sim >= SIMILAR_THRESHOLD, sim)


def row_similarity(left, right, columns):
    """Similarity ratio of two rows in ``[0, 1]`` (1 means identical)."""
    return similarity_score(left, right, columns).similarity
