# -*- coding: utf-8 -*-
"""
Table diffing logic.

Rows are aligned with an edit-distance DP over row similarity. Before the
alignment, rows that only changed their relative order are pulled out and
reported as moved; after it, every changed, split or moved row gets
per-cell character diffs.
"""
from .config import DELETE_COST, INSERT_COST, DISSIMILAR_COST, resolve_options
from .models import DiffStatus, CellDiff, TableDiff, TableDiffRow
from .normalization import cell_text, is_null_cell
from .similarity import similarity_score
from .text_differ import diff_parts
from .utils import create_matrix, longest_increasing_subsequence, log_decision

# DP moves
SUBSTITUTE = 'S'
DELETE = 'D'
INSERT = 'I'


def merge_columns(left, right):
    """Left columns in order, then right-only columns in order."""
    merged = []
    seen = set()
    for column in list(left or ()) + list(right or ()):
        if column not in seen:
            seen.add(column)
            merged.append(column)
    return merged


def zero_counts():
    return dict((status, 0) for status in DiffStatus.ALL)


def count_statuses(rows):
    """Count rows per status; every status is present, zero included."""
    counts = zero_counts()
    for row in rows:
        counts[row.status] += 1
    return counts


def cell_diffs(left, right, columns):
    """Per-column :class:`CellDiff` between two rows (either may be None)."""
    out = {}
    for column in columns:
        ltext = cell_text(left, column)
        rtext = cell_text(right, column)
        out[column] = CellDiff(
            left_text=ltext,
            right_text=rtext,
            left_null=is_null_cell(left, column),
            right_null=is_null_cell(right, column),
            spans=diff_parts(ltext, rtext),
        )
    return out


def _row_id(row, fallback):
    if row is not None and row.display_id is not None:
        return row.display_id
    if row is not None and row.id is not None:
        return row.id
    return fallback


def _keyed_rows(rows, indices):
    """Map ``(id, occurrence)`` to ``(row, index)``; repeated ids stay distinct."""
    keyed = {}
    seen = {}
    for pos, (row, index) in enumerate(zip(rows, indices)):
        row_id = _row_id(row, str(pos + 1))
        occurrence = seen.get(row_id, 0)
        seen[row_id] = occurrence + 1
        keyed[row_id, occurrence] = (row, index)
    return keyed


def align_rows_fallback(left_rows, right_rows, columns, left_indices=None, right_indices=None):
    """
    Id-based alignment used when the DP matrix would be too large.

    Rows are keyed by their id (1-based position when they have none) and
    compared content-wise. The n-th row carrying an id on one side pairs
    with the n-th row carrying it on the other. No move detection happens
    here.
    """
    if left_indices is None:
        left_indices = list(range(len(left_rows)))
    if right_indices is None:
        right_indices = list(range(len(right_rows)))

    left_map = _keyed_rows(left_rows, left_indices)
    right_map = _keyed_rows(right_rows, right_indices)

    keys = list(left_map)
    keys.extend(k for k in right_map if k not in left_map)

    rows = []
    for k, key in enumerate(keys):
        row_id = key[0]
        left, left_index = left_map.get(key, (None, None))
        right, right_index = right_map.get(key, (None, None))
        if left is not None and right is not None:
            if similarity_score(left, right, columns).same:
                status = DiffStatus.UNCHANGED
            else:
                status = DiffStatus.CHANGED
        elif left is not None:
            status = DiffStatus.REMOVED
        else:
            status = DiffStatus.ADDED
        rows.append(TableDiffRow(
            id=row_id,
            status=status,
            left=left,
            right=right,
            group_id='fallback-%d' % k,
            left_index=left_index,
            right_index=right_index,
        ))
    return rows


def align_rows(left_rows, right_rows, columns, path='', options=None,
               left_indices=None, right_indices=None, scores=None):
    """
    Align two row sequences with an edit-distance DP.

    ``left_indices``/``right_indices`` give each row's position in the
    original table (defaults to the position in the given lists). When
    ``n * m`` exceeds ``options.max_align_cells`` the id-based fallback is
    used instead. ``scores`` maps ``(left_index, right_index)`` to a
    :class:`Similarity` already computed for that pair and is filled in
    with the new ones.
    """
    options = resolve_options(options)
    if scores is None:
        scores = {}
    n = len(left_rows)
    m = len(right_rows)
    if left_indices is None:
        left_indices = list(range(n))
    if right_indices is None:
        right_indices = list(range(m))

    if n * m > options.max_align_cells:
        log_decision(options, path, '%dx%d' % (n, m), 'fallback',
                     'matrix too large for alignment')
        return align_rows_fallback(left_rows, right_rows, columns,
                                   left_indices, right_indices)

    dp = create_matrix(n + 1, m + 1, 0)
    move = create_matrix(n + 1, m + 1, '')
    for i in range(1, n + 1):
        dp[i][0] = dp[i - 1][0] + DELETE_COST
        move[i][0] = DELETE
    for j in range(1, m + 1):
        dp[0][j] = dp[0][j - 1] + INSERT_COST
        move[0][j] = INSERT

    for i in range(1, n + 1):
        left = left_rows[i - 1]
        li = left_indices[i - 1]
        for j in range(1, m + 1):
            key = (li, right_indices[j - 1])
            sim = scores.get(key)
            if sim is None:
                sim = similarity_score(left, right_rows[j - 1], columns)
                scores[key] = sim
            if sim.same:
                sub_cost = 0
            elif sim.similar:
                sub_cost = 1.0 - sim.similarity
            else:
                sub_cost = DISSIMILAR_COST

            delete = dp[i - 1][j] + DELETE_COST
            insert = dp[i][j - 1] + INSERT_COST
            substitute = dp[i - 1][j - 1] + sub_cost
            best = min(delete, insert, substitute)
            dp[i][j] = best
            # Ties: substitute, then delete, then insert.
            if best == substitute:
                move[i][j] = SUBSTITUTE
            elif best == delete:
                move[i][j] = DELETE
            else:
                move[i][j] = INSERT

    rows = []
    i = n
    j = m
    while i > 0 or j > 0:
        mv = move[i][j]
        if mv == SUBSTITUTE:
            left = left_rows[i - 1]
            right = right_rows[j - 1]
            li = left_indices[i - 1]
            ri = right_indices[j - 1]
            sim = scores[li, ri]
            row_id = _row_id(left, _row_id(right, str(i)))
            if sim.same or sim.similar:
                status = DiffStatus.UNCHANGED if sim.same else DiffStatus.CHANGED
                log_decision(options, path, row_id, status,
                             'matched by content, similarity %.3f' % sim.similarity)
                rows.append(TableDiffRow(
                    id=row_id, status=status, left=left, right=right,
                    group_id='g-%d-%d' % (i, j), left_index=li, right_index=ri))
            else:
                log_decision(options, path, row_id, 'removed+added',
                             'too different after alignment, similarity %.3f' % sim.similarity)
                pair_id = 'pair-%d-%d' % (i, j)
                # Flipped below into added, removed: only the added half has a
                # right index, so moved rows land before the pair.
                rows.append(TableDiffRow(
                    id=row_id, status=DiffStatus.REMOVED, left=left, pair=right,
                    group_id=pair_id, left_index=li))
                rows.append(TableDiffRow(
                    id=row_id, status=DiffStatus.ADDED, right=right, pair=left,
                    group_id=pair_id, right_index=ri))
            i -= 1
            j -= 1
        elif mv == DELETE:
            left = left_rows[i - 1]
            row_id = _row_id(left, str(i))
            log_decision(options, path, row_id, DiffStatus.REMOVED, 'deleted during alignment')
            rows.append(TableDiffRow(
                id=row_id, status=DiffStatus.REMOVED, left=left,
                group_id='g-%d-d' % i, left_index=left_indices[i - 1]))
            i -= 1
        else:
            right = right_rows[j - 1]
            row_id = _row_id(right, str(j))
            log_decision(options, path, row_id, DiffStatus.ADDED, 'inserted during alignment')
            rows.append(TableDiffRow(
                id=row_id, status=DiffStatus.ADDED, right=right,
                group_id='g-%d-i' % j, right_index=right_indices[j - 1]))
            j -= 1

    rows.reverse()
    return rows


def detect_moves(left_rows, right_rows, columns, path='', options=None, scores=None):
    """
    Find rows that only changed their relative order.

    Returns ``(left_index, right_index, similarity)`` tuples, sorted by
    right index. Empty when either side is empty, when fewer than two rows
    match, or when more than ``options.move_max_pairs`` candidate pairs
    exist. Every pair scored here is stored in ``scores`` under
    ``(left_index, right_index)`` when a dict is given.
    """
    options = resolve_options(options)
    if scores is None:
        scores = {}
    if not left_rows or not right_rows:
        return []

    threshold = options.move_similarity_threshold
    candidates = []
    for i, left in enumerate(left_rows):
        for j, right in enumerate(right_rows):
            score = similarity_score(left, right, columns)
            scores[i, j] = score
            sim = score.similarity
            if sim >= threshold:
                candidates.append((i, j, sim))
                if len(candidates) > options.move_max_pairs:
                    log_decision(options, path, '%dx%d' % (len(left_rows), len(right_rows)),
                                 'no-moves', 'more than %d move candidates' % options.move_max_pairs)
                    return []

    # Most similar first, then the most local match; sort is stable.
    candidates.sort(key=lambda c: (-c[2], abs(c[0] - c[1])))
    used_left = set()
    used_right = set()
    matches = []
    for i, j, sim in candidates:
        if i in used_left or j in used_right:
            continue
        used_left.add(i)
        used_right.add(j)
        matches.append((i, j, sim))

    if len(matches) < 2:
        return []

    matches.sort(key=lambda c: c[1])
    keep = set(longest_increasing_subsequence([i for i, _j, _s in matches]))
    moves = [match for pos, match in enumerate(matches) if pos not in keep]
    for i, j, sim in moves:
        log_decision(options, path, _row_id(left_rows[i], str(i + 1)), DiffStatus.MOVED,
                     'row %d -> %d, similarity %.3f' % (i, j, sim))
    return moves


def _insert_moved(rows, moved):
    """Insert ``moved`` before the first row with a greater right index."""
    for pos, row in enumerate(rows):
        if row.right_index is not None and row.right_index > moved.right_index:
            rows.insert(pos, moved)
            return
    rows.append(moved)


def diff_table(left_table, right_table, path, options=None):
    """Diff two tables found at ``path`` (either may be None)."""
    options = resolve_options(options)
    columns = merge_columns(left_table.columns if left_table else None,
                            right_table.columns if right_table else None)
    title = None
    if left_table is not None and left_table.name is not None:
        title = left_table.name
    elif right_table is not None:
        title = right_table.name

    left_rows = list(left_table.rows) if left_table else []
    right_rows = list(right_table.rows) if right_table else []
    n = len(left_rows)
    m = len(right_rows)

    if n * m > options.max_align_cells:
        rows = align_rows(left_rows, right_rows, columns, path, options)
    else:
        scores = {}
        moves = detect_moves(left_rows, right_rows, columns, path, options, scores)
        moved_left = set(i for i, _j, _s in moves)
        moved_right = set(j for _i, j, _s in moves)
        left_indices = [i for i in range(n) if i not in moved_left]
        right_indices = [j for j in range(m) if j not in moved_right]
        rows = align_rows(
            [left_rows[i] for i in left_indices],
            [right_rows[j] for j in right_indices],
            columns, path, options,
            left_indices=left_indices,
            right_indices=right_indices,
            scores=scores,
        )
        for i, j, _sim in moves:
            left = left_rows[i]
            right = right_rows[j]
            move_id = 'move-%d-%d' % (i, j)
            _insert_moved(rows, TableDiffRow(
                id=_row_id(left, str(i + 1)),
                status=DiffStatus.MOVED,
                left=left,
                right=right,
                group_id=move_id,
                move_id=move_id,
                move_from_index=i,
                move_to_index=j,
                left_index=i,
                right_index=j,
            ))

    for row in rows:
        if row.status == DiffStatus.CHANGED or row.status == DiffStatus.MOVED:
            row.cell_diffs = cell_diffs(row.left, row.right, columns)
        elif row.pair is not None:
            if row.status == DiffStatus.REMOVED:
                row.cell_diffs = cell_diffs(row.left, row.pair, columns)
            else:
                row.cell_diffs = cell_diffs(row.pair, row.right, columns)

    return TableDiff(path=path, title=title, columns=columns, rows=rows)


def build_table_diffs(left, right, options=None):
    """
    Diff two ``path -> TableNode`` mappings.

    Returns one :class:`TableDiff` per path of either side, sorted by path.
    """
    options = resolve_options(options)
    paths = sorted(set(left) | set(right))
    return [diff_table(left.get(p), right.get(p), p, options) for p in paths]
