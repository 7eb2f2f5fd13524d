"""Tests for the PageRank iteration."""

import itertools
import math

import pytest

from linkrank.exceptions import DegenerateInputError, InvalidParameterError
from linkrank.models import Graph
from linkrank.ranking.engine import RankEngine, compute_pagerank, get_engine, run_pagerank


# 1 <-> 2, 2 -> 3, 3 is a sink; never settles exactly within a few sweeps
OSCILLATING = Graph(nodes=[1, 2, 3], edges={1: {2}, 2: {1, 3}})


class TestDegenerateInput:
    """Absent inputs raise, empty inputs do not."""

    def test_absent_graph(self):
        with pytest.raises(DegenerateInputError):
            compute_pagerank(None)

    def test_absent_nodes(self):
        with pytest.raises(DegenerateInputError):
            compute_pagerank(Graph(nodes=None, edges={}))

    def test_absent_edges(self):
        with pytest.raises(DegenerateInputError):
            compute_pagerank(Graph(nodes=[1, 2], edges=None))

    def test_object_without_attributes(self):
        with pytest.raises(DegenerateInputError):
            compute_pagerank(object())

    def test_empty_nodes_returns_empty_mapping(self):
        assert compute_pagerank(Graph(nodes=[], edges={})) == {}

    def test_empty_nodes_runs_no_sweep(self):
        result = run_pagerank(Graph(nodes=[], edges={}))
        assert result.sweeps == 0
        assert result.scores == {}


class TestParameters:
    """Parameter validation."""

    @pytest.mark.parametrize("damping", [-0.1, 1.5, float("nan")])
    def test_bad_damping(self, damping):
        with pytest.raises(InvalidParameterError):
            compute_pagerank(OSCILLATING, damping_factor=damping)

    def test_negative_tolerance(self):
        with pytest.raises(InvalidParameterError):
            compute_pagerank(OSCILLATING, tolerance=-1e-3)

    @pytest.mark.parametrize("max_iterations", [0, -5, 2.5, True])
    def test_bad_max_iterations(self, max_iterations):
        with pytest.raises(InvalidParameterError):
            compute_pagerank(OSCILLATING, max_iterations=max_iterations)

    def test_bad_time_limit(self):
        with pytest.raises(InvalidParameterError):
            run_pagerank(OSCILLATING, time_limit=0)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            compute_pagerank(OSCILLATING, damping_factor=2)


class TestComputePageRank:
    """Scores produced by the sweep loop."""

    def test_single_node(self):
        result = run_pagerank(Graph(nodes=[7], edges={}))
        assert result.scores == {7: pytest.approx(0.15)}
        # Stable from sweep 1, so sweep 2 reports zero change
        assert result.sweeps == 2
        assert result.delta == 0.0
        assert result.converged

    def test_single_node_custom_damping(self):
        scores = compute_pagerank(Graph(nodes=[7], edges={}), damping_factor=0.5)
        assert scores[7] == pytest.approx(0.5)

    def test_two_node_mutual_link(self):
        result = run_pagerank(Graph(nodes=[1, 2], edges={1: {2}, 2: {1}}))
        assert result.scores[1] == pytest.approx(1.0)
        assert result.scores[2] == pytest.approx(1.0)
        assert result.scores[1] == result.scores[2]
        assert result.sweeps < 100
        assert result.converged

    def test_fixed_point_stops_after_one_sweep(self):
        cycle = Graph(nodes=["a", "b", "c"], edges={"a": {"b"}, "b": {"c"}, "c": {"a"}})
        result = run_pagerank(cycle)
        assert result.sweeps == 1
        assert result.delta == 0.0
        assert result.scores == {"a": 1.0, "b": 1.0, "c": 1.0}

    def test_first_sweep_values(self):
        result = run_pagerank(OSCILLATING, max_iterations=1)
        assert result.sweeps == 1
        assert result.scores == {
            1: pytest.approx(0.575),
            2: pytest.approx(1.0),
            3: pytest.approx(0.575),
        }
        assert result.delta == pytest.approx(0.85 / 3)

    def test_update_is_synchronous(self):
        # Chain 1 -> 2 -> 3: node 3 must read node 2's previous score (1.0),
        # not the 0.15 + 0.85 * 0.15 it would see if updated in place
        result = run_pagerank(Graph(nodes=[1, 2, 3], edges={1: {2}, 2: {3}}), max_iterations=1)
        assert result.scores[3] == pytest.approx(1.0)
        assert result.scores[2] == pytest.approx(1.0)
        assert result.scores[1] == pytest.approx(0.15)

    def test_chain_converges_exactly(self):
        result = run_pagerank(Graph(nodes=[1, 2, 3], edges={1: {2}, 2: {3}}))
        assert result.scores[1] == pytest.approx(0.15)
        assert result.scores[2] == pytest.approx(0.15 + 0.85 * 0.15)
        assert result.scores[3] == pytest.approx(0.15 + 0.85 * (0.15 + 0.85 * 0.15))
        assert result.converged

    def test_iteration_cap_respected(self):
        result = run_pagerank(OSCILLATING, tolerance=0, max_iterations=5)
        assert result.sweeps == 5
        assert not result.converged
        assert result.delta > 0

    def test_cap_result_matches_manual_sweeps(self):
        capped = compute_pagerank(OSCILLATING, tolerance=0, max_iterations=3)
        pr = {1: 1.0, 2: 1.0, 3: 1.0}
        for _ in range(3):
            pr = {
                1: 0.15 + 0.85 * (pr[2] / 2),
                2: 0.15 + 0.85 * pr[1],
                3: 0.15 + 0.85 * (pr[2] / 2),
            }
        assert capped == pytest.approx(pr)

    def test_sink_never_produces_non_finite(self):
        graph = Graph(
            nodes=[1, 2, 3, 4],
            edges={1: {2, 3}, 2: {3}, 4: {3}},
        )
        result = run_pagerank(graph, tolerance=0, max_iterations=50)
        assert all(math.isfinite(score) for score in result.scores.values())
        assert result.scores[3] > result.scores[2] > result.scores[1]

    def test_self_loop_excluded_from_inbound(self):
        graph = Graph(nodes=[1, 2], edges={1: {1, 2}})
        scores = compute_pagerank(graph)
        assert scores[1] == pytest.approx(0.15)
        # Out-degree of 1 includes the self-loop, so 2 receives half
        assert scores[2] == pytest.approx(0.15 + 0.85 * 0.15 / 2)

    def test_no_renormalization(self):
        scores = compute_pagerank(Graph(nodes=[1, 2], edges={1: {2}, 2: {1}}))
        assert sum(scores.values()) == pytest.approx(2.0)

    def test_keys_match_nodes(self):
        graph = Graph(nodes=[5, 3, 9, 3], edges={5: {3}, 9: {5, 3, 100}})
        scores = compute_pagerank(graph)
        assert list(scores) == [5, 3, 9]

    def test_deterministic(self):
        graph = Graph(
            nodes=list(range(20)),
            edges={i: {(i * 7) % 20, (i * 3 + 1) % 20} for i in range(20)},
        )
        first = compute_pagerank(graph, tolerance=1e-12)
        second = compute_pagerank(graph, tolerance=1e-12)
        assert first == second

    def test_graph_not_mutated(self):
        edges = {1: {2}, 2: {1, 3}}
        nodes = [1, 2, 3]
        compute_pagerank(Graph(nodes=nodes, edges=edges))
        assert nodes == [1, 2, 3]
        assert edges == {1: {2}, 2: {1, 3}}


class TestTimeLimit:
    """Deadline checked between sweeps."""

    def test_expired_deadline_stops_after_one_sweep(self, monkeypatch):
        ticks = itertools.count(0.0, 10.0)
        monkeypatch.setattr("linkrank.ranking.engine.time.monotonic", lambda: next(ticks))

        result = run_pagerank(OSCILLATING, tolerance=0, max_iterations=50, time_limit=1.0)
        assert result.sweeps == 1
        assert result.timed_out
        assert not result.converged
        assert set(result.scores) == {1, 2, 3}

    def test_generous_deadline_does_not_interfere(self):
        result = run_pagerank(OSCILLATING, tolerance=0, max_iterations=5, time_limit=60.0)
        assert result.sweeps == 5
        assert not result.timed_out


class TestRankEngine:
    """RankEngine wrapper."""

    def test_explicit_parameters(self):
        engine = RankEngine(damping_factor=0.5, tolerance=0, max_iterations=2)
        result = engine.run(OSCILLATING)
        assert result.sweeps == 2
        assert engine.compute_pagerank(OSCILLATING) == compute_pagerank(
            OSCILLATING, damping_factor=0.5, tolerance=0, max_iterations=2
        )

    def test_defaults_from_settings(self, monkeypatch):
        from config.settings import settings

        monkeypatch.setattr(settings, "damping_factor", 0.6)
        monkeypatch.setattr(settings, "max_iterations", 7)
        engine = RankEngine()
        assert engine.damping_factor == 0.6
        assert engine.max_iterations == 7

    def test_rejects_bad_parameters(self):
        with pytest.raises(InvalidParameterError):
            RankEngine(max_iterations=0)

    def test_get_engine_is_singleton(self):
        assert get_engine() is get_engine()
