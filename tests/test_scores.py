"""Tests for score ordering and normalization helpers."""

import pytest

from linkrank.exceptions import InvalidParameterError
from linkrank.ranking.scores import normalize_scores, normalize_to_unit_sum, rank_nodes


class TestRankNodes:
    """Test rank_nodes."""

    def test_orders_descending(self):
        assert rank_nodes({"a": 0.2, "b": 0.9, "c": 0.5}) == [("b", 0.9), ("c", 0.5), ("a", 0.2)]

    def test_ties_keep_input_order(self):
        assert [node for node, _ in rank_nodes({3: 1.0, 1: 1.0, 2: 1.0})] == [3, 1, 2]

    def test_top_k(self):
        assert rank_nodes({"a": 0.2, "b": 0.9, "c": 0.5}, top_k=2) == [("b", 0.9), ("c", 0.5)]

    def test_top_k_zero(self):
        assert rank_nodes({"a": 1.0}, top_k=0) == []

    def test_negative_top_k(self):
        with pytest.raises(InvalidParameterError):
            rank_nodes({"a": 1.0}, top_k=-1)

    def test_empty(self):
        assert rank_nodes({}) == []


class TestNormalizeScores:
    """Test normalize_scores."""

    def test_empty(self):
        assert normalize_scores({}) == {}

    def test_default_range(self):
        result = normalize_scores({"a": 0.15, "b": 1.15, "c": 0.65})
        assert result == {"a": 0.0, "b": 1.0, "c": pytest.approx(0.5)}

    def test_custom_range(self):
        result = normalize_scores({"a": 1.0, "b": 3.0}, min_score=0.5, max_score=2.0)
        assert result == {"a": 0.5, "b": 2.0}

    def test_equal_scores_map_to_midpoint(self):
        assert normalize_scores({"a": 0.4, "b": 0.4}, 0.5, 2.0) == {"a": 1.25, "b": 1.25}


class TestNormalizeToUnitSum:
    """Test normalize_to_unit_sum."""

    def test_sums_to_one(self):
        result = normalize_to_unit_sum({1: 1.0, 2: 3.0})
        assert result == {1: pytest.approx(0.25), 2: pytest.approx(0.75)}
        assert sum(result.values()) == pytest.approx(1.0)

    def test_zero_total_unchanged(self):
        assert normalize_to_unit_sum({1: 0.0, 2: 0.0}) == {1: 0.0, 2: 0.0}

    def test_input_not_modified(self):
        scores = {1: 2.0, 2: 2.0}
        normalize_to_unit_sum(scores)
        assert scores == {1: 2.0, 2: 2.0}
