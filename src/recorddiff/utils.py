# -*- coding: utf-8 -*-
"""
Utility helpers for recorddiff.
"""
import logging
from bisect import bisect_left

from .config import ELLIPSIS

logger = logging.getLogger('recorddiff.decisions')


def create_matrix(rows, cols, fill):
    """Build a ``rows`` x ``cols`` list-of-lists filled with ``fill``."""
    return [[fill] * cols for _ in range(rows)]


def shorten(s, max_len):
    """Truncate ``s`` to ``max_len`` characters, ending with an ellipsis."""
    if not isinstance(s, str):
        return str(s)
    if len(s) <= max_len:
        return s
    return s[:max_len - 1] + ELLIPSIS


def longest_increasing_subsequence(seq):
    """
    Return the positions in ``seq`` forming a longest strictly increasing
    subsequence.

    Patience sorting over the tails of the candidate subsequences, O(k log k).

    >>> longest_increasing_subsequence([1, 0, 2])
    [1, 2]
    >>> longest_increasing_subsequence([])
    []
    """
    tails = []       # tails[k]: smallest tail value of an increasing run of length k+1
    tail_pos = []    # position in seq of tails[k]
    prev = [-1] * len(seq)
    for pos, value in enumerate(seq):
        k = bisect_left(tails, value)
        if k == len(tails):
            tails.append(value)
            tail_pos.append(pos)
        else:
            tails[k] = value
            tail_pos[k] = pos
        prev[pos] = tail_pos[k - 1] if k > 0 else -1

    result = []
    pos = tail_pos[-1] if tail_pos else -1
    while pos != -1:
        result.append(pos)
        pos = prev[pos]
    result.reverse()
    return result


def log_decision(options, path, row_id, status, reason):
    """Log one alignment decision when decision logging is enabled."""
    if not options.log_decisions:
        return
    logger.info("%s :: %s -> %s. reason: %s", path, row_id, status, reason)
