from __future__ import annotations

import pytest

from recorddiff import TableRow, ValueNode, levenshtein_distance, row_similarity, token_similarity
from recorddiff.similarity import row_signature, rows_equal, similarity_score


def row(cells: dict, row_id: str = "1") -> TableRow:
    return TableRow(id=row_id, display_id=row_id,
                    cells={k: ValueNode(v) for k, v in cells.items()})


@pytest.mark.parametrize("a, b, expected", [
    ("", "", 0),
    ("abc", "", 3),
    ("", "abc", 3),
    ("kitten", "sitting", 3),
    ("flaw", "lawn", 2),
    ("привет", "привед", 1),
])
def test_levenshtein_distance(a, b, expected):
    assert levenshtein_distance(a, b) == expected
    assert levenshtein_distance(b, a) == expected


def test_token_similarity_is_jaccard_over_lowercased_tokens():
    assert token_similarity("Red Apple", "apple red") == 1
    assert token_similarity("a b c", "c d") == pytest.approx(1 / 4)
    assert token_similarity("", "") == 1
    assert token_similarity("word", "") == 0


def test_token_similarity_handles_cyrillic():
    assert token_similarity("Счёт-фактура №12", "счёт фактура 12") == 1


def test_signature_is_cached_per_column_set():
    r = row({"a": "x", "b": 2})
    assert row_signature(r, ["a", "b"]) == "x|2"
    assert row_signature(r, ["b"]) == "2"
    assert r.signature_cache == {"a\u0001b": "x|2", "b": "2"}
    assert r.cell_cache == {"a": "x", "b": "2"}


def test_rows_equal_compares_only_given_columns():
    left = row({"a": 1, "b": 2})
    right = row({"a": 1, "b": 3})
    assert rows_equal(left, right, ["a"])
    assert not rows_equal(left, right, ["a", "b"])
    assert not rows_equal(left, None, ["a"])


def test_row_similarity_uses_edit_distance_for_short_rows():
    left = row({"name": "beta", "value": 1})
    right = row({"name": "beta", "value": 2})
    assert row_similarity(left, right, ["name", "value"]) == pytest.approx(1 - 1 / 6)
    score = similarity_score(left, right, ["name", "value"])
    assert not score.same
    assert score.similar


def test_row_similarity_uses_tokens_for_long_rows():
    words = " ".join("word%d" % i for i in range(80))
    left = row({"text": words})
    right = row({"text": words + " extra"})
    assert len(row_signature(left, ["text"])) > 300
    assert row_similarity(left, right, ["text"]) == pytest.approx(80 / 81)


def test_empty_signatures_are_identical():
    assert row_similarity(row({}), row({}), ["a"]) == 1
    assert similarity_score(row({}), row({"a": None}), ["a"]).same


def test_dissimilar_rows_are_not_similar():
    score = similarity_score(row({"n": "left-only"}), row({"n": "totally different"}), ["n"])
    assert not score.similar
    assert score.similarity < 0.6
