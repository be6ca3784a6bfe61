import doctest

import recorddiff
from recorddiff import build_diff, count_statuses, set_diff_options, reset_diff_options
from recorddiff import normalization, similarity, text_differ, utils

for module in (recorddiff, normalization, similarity, text_differ, utils):
    doctest.testmod(module, verbose=True)


# Additional regression checks (basic asserts)
def _table(rows, columns=('name',)):
    return {'type': 'table', 'columns': list(columns), 'rows': rows}


def run_regressions():
    # Identical records produce no differences
    record = {'a': 1, 'nested': {'b': [1, 2]}, 't': _table([{'id': 1, 'name': 'x'}])}
    result = build_diff(record, record)
    assert all(row.status == 'unchanged' for row in result.fields)
    counts = count_statuses(result.tables[0].rows)
    assert counts == {'changed': 0, 'added': 0, 'removed': 0, 'moved': 0, 'unchanged': 1}

    # Reordering is reported as a move, not as removed + added
    left = _table([{'name': 'alpha'}, {'name': 'beta'}, {'name': 'gamma'}])
    right = _table([{'name': 'beta'}, {'name': 'alpha'}, {'name': 'gamma'}])
    counts = count_statuses(build_diff({'t': left}, {'t': right}).tables[0].rows)
    assert counts['moved'] == 1 and counts['added'] == 0 and counts['removed'] == 0

    # Forcing the id-based fallback still compares content
    set_diff_options(max_align_cells=1)
    try:
        left = _table([{'id': 1, 'name': 'alpha'}, {'id': 2, 'name': 'beta'}])
        right = _table([{'id': 1, 'name': 'alpha'}, {'id': 2, 'name': 'beta!'}])
        rows = build_diff({'t': left}, {'t': right}).tables[0].rows
        assert [r.status for r in rows] == ['unchanged', 'changed']
        assert rows[0].group_id == 'fallback-0'
    finally:
        reset_diff_options()

    # Invalid JSON is reported, the other side is still compared
    result = build_diff('{', '{"ok": true}')
    assert len(result.errors) == 1 and result.errors[0].startswith('Left version')
    assert [(r.key, r.status) for r in result.fields] == [('ok', 'added')]


if __name__ == '__main__':
    run_regressions()
    print('OK')
