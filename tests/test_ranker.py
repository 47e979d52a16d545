"""Tests for filtering and ordering model scores."""

import numpy as np

from extension_recommender.core.ranker import SessionResult, rank_results

EXTENSIONS = {"a.one": 0, "b.two": 1, "c.three": 2, "d.four": 3}


def _ids(results):
    return [r.extension_id for r in results]


def test_sorted_by_descending_confidence():
    scores = np.array([0.7, 0.9, 0.65, 0.8], dtype=np.float32)

    results = rank_results(scores, EXTENSIONS, {})

    assert _ids(results) == ["b.two", "d.four", "a.one", "c.three"]
    assert all(a.confidence >= b.confidence for a, b in zip(results, results[1:]))


def test_scores_below_threshold_are_dropped():
    scores = np.array([0.59, 0.61, 0.1, 0.6], dtype=np.float32)

    results = rank_results(scores, EXTENSIONS, {}, confidence_pass=0.6)

    assert _ids(results) == ["b.two", "d.four"]


def test_threshold_is_inclusive():
    scores = np.array([0.5, 0.0, 0.0, 0.0], dtype=np.float64)

    results = rank_results(scores, EXTENSIONS, {}, confidence_pass=0.5)

    assert results == [SessionResult("a.one", 0.5)]


def test_previously_installed_are_dropped_case_insensitively():
    extensions = {"MS-Python.Python": 0, "b.two": 1}
    scores = np.array([0.99, 0.9], dtype=np.float32)
    signals = {"PreviouslyInstalled": frozenset({"ms-python.python"})}

    results = rank_results(scores, extensions, signals)

    assert _ids(results) == ["b.two"]


def test_equal_scores_keep_row_order():
    scores = np.full(4, 0.75, dtype=np.float32)

    results = rank_results(scores, EXTENSIONS, {})

    assert _ids(results) == ["a.one", "b.two", "c.three", "d.four"]


def test_nan_scores_never_pass():
    scores = np.array([np.nan, 0.9, np.nan, 0.7], dtype=np.float32)

    results = rank_results(scores, EXTENSIONS, {}, confidence_pass=0.0)

    assert _ids(results) == ["b.two", "d.four"]


def test_nothing_above_threshold_is_an_empty_list():
    scores = np.zeros(4, dtype=np.float32)

    assert rank_results(scores, EXTENSIONS, {}) == []


def test_confidence_is_a_plain_float():
    results = rank_results(np.array([0.8, 0, 0, 0], dtype=np.float32), EXTENSIONS, {})

    assert type(results[0].confidence) is float
    assert results[0].to_dict() == {"extension_id": "a.one", "confidence": results[0].confidence}
