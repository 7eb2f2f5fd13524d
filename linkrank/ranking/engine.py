"""Damped iterative PageRank.

Computes, for every node A of a directed graph,

    PR(A) = (1 - d) + d * (PR(T1)/C(T1) + ... + PR(Tn)/C(Tn))

where T1..Tn link to A and C(T) is the out-degree of T. Scores start at 1.0
and are recomputed in synchronous sweeps until the mean absolute change drops
to the tolerance or the sweep cap is reached. Scores are not renormalized.
"""

import logging
import math
import threading
import time
from collections.abc import Hashable

from config.settings import settings
from linkrank.exceptions import DegenerateInputError, InvalidParameterError
from linkrank.models import Graph, PageRankResult
from linkrank.ranking.indexes import build_in_neighbors, build_out_degree, unique_nodes

logger = logging.getLogger(__name__)

DEFAULT_DAMPING_FACTOR = 0.85
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 100

INITIAL_SCORE = 1.0


def _check_graph(graph: Graph | None) -> None:
    if graph is None:
        raise DegenerateInputError("Graph is absent")
    if getattr(graph, "nodes", None) is None:
        raise DegenerateInputError("Graph has no node sequence")
    if getattr(graph, "edges", None) is None:
        raise DegenerateInputError("Graph has no edge mapping")


def _check_parameters(
    damping_factor: float,
    tolerance: float,
    max_iterations: int,
    time_limit: float | None,
) -> None:
    if isinstance(damping_factor, bool) or not isinstance(damping_factor, (int, float)):
        raise InvalidParameterError(f"damping_factor must be a number, got {damping_factor!r}")
    if not 0.0 <= damping_factor <= 1.0:
        raise InvalidParameterError(f"damping_factor must be in [0, 1], got {damping_factor}")

    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)):
        raise InvalidParameterError(f"tolerance must be a number, got {tolerance!r}")
    if math.isnan(tolerance) or tolerance < 0:
        raise InvalidParameterError(f"tolerance must be >= 0, got {tolerance}")

    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int):
        raise InvalidParameterError(f"max_iterations must be an int, got {max_iterations!r}")
    if max_iterations < 1:
        raise InvalidParameterError(f"max_iterations must be >= 1, got {max_iterations}")

    if time_limit is not None and not time_limit > 0:
        raise InvalidParameterError(f"time_limit must be > 0, got {time_limit}")


def _sweep(
    nodes: list[Hashable],
    in_neighbors: dict[Hashable, list[Hashable]],
    out_degree: dict[Hashable, int],
    previous: dict[Hashable, float],
    current: dict[Hashable, float],
    damping_factor: float,
) -> None:
    """Recompute every score into ``current`` reading only ``previous``."""
    base = 1.0 - damping_factor
    for node in nodes:
        inbound = 0.0
        for source in in_neighbors[node]:
            degree = out_degree[source]
            # Sinks contribute nothing
            if degree != 0:
                inbound += previous[source] / degree
        current[node] = base + damping_factor * inbound


def _mean_absolute_change(
    nodes: list[Hashable],
    previous: dict[Hashable, float],
    current: dict[Hashable, float],
) -> float:
    total = 0.0
    for node in nodes:
        total += abs(previous[node] - current[node])
    return total / len(nodes)


def run_pagerank(
    graph: Graph,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    time_limit: float | None = None,
) -> PageRankResult:
    """Compute PageRank scores and report how the iteration ended.

    Args:
        graph: Graph to rank; read, never mutated
        damping_factor: Weight of inbound contributions versus the (1 - d) baseline
        tolerance: Stop once the mean absolute change of a sweep is <= this
        max_iterations: Maximum number of sweeps
        time_limit: Optional deadline in seconds, checked between sweeps

    Returns:
        PageRankResult with one score per distinct node

    Raises:
        DegenerateInputError: If the graph, its nodes or its edges are absent
        InvalidParameterError: If a parameter is outside its domain
    """
    _check_graph(graph)
    _check_parameters(damping_factor, tolerance, max_iterations, time_limit)

    nodes = unique_nodes(graph.nodes)
    if not nodes:
        return PageRankResult(scores={}, sweeps=0, delta=0.0, converged=True)

    out_degree = build_out_degree(graph)
    in_neighbors = build_in_neighbors(graph)

    previous = {node: INITIAL_SCORE for node in nodes}
    current = dict(previous)

    deadline = time.monotonic() + time_limit if time_limit is not None else None
    sweeps = 0
    delta = 0.0
    timed_out = False

    while True:
        _sweep(nodes, in_neighbors, out_degree, previous, current, damping_factor)
        delta = _mean_absolute_change(nodes, previous, current)
        sweeps += 1

        # The freshest generation is always held by ``previous`` after the swap
        previous, current = current, previous

        if delta <= tolerance or sweeps >= max_iterations:
            break
        if deadline is not None and time.monotonic() >= deadline:
            timed_out = True
            logger.warning(f"PageRank stopped by time limit after {sweeps} sweeps (delta={delta:.3e})")
            break

    converged = delta <= tolerance
    if converged:
        logger.debug(f"PageRank converged after {sweeps} sweeps over {len(nodes)} nodes")
    elif not timed_out:
        logger.info(f"PageRank reached {max_iterations} sweeps without converging (delta={delta:.3e})")

    return PageRankResult(
        scores=previous,
        sweeps=sweeps,
        delta=delta,
        converged=converged,
        timed_out=timed_out,
    )


def compute_pagerank(
    graph: Graph,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> dict[Hashable, float]:
    """Compute the PageRank score of every node in a graph.

    Returns:
        Dict mapping node -> score, in node sequence order

    Raises:
        DegenerateInputError: If the graph, its nodes or its edges are absent
    """
    return run_pagerank(graph, damping_factor, tolerance, max_iterations).scores


class RankEngine:
    """PageRank engine with fixed parameters, reusable across graphs.

    Holds no per-graph state, so one instance may rank several graphs
    concurrently.
    """

    def __init__(
        self,
        damping_factor: float | None = None,
        tolerance: float | None = None,
        max_iterations: int | None = None,
    ):
        self.damping_factor = settings.damping_factor if damping_factor is None else damping_factor
        self.tolerance = settings.tolerance if tolerance is None else tolerance
        self.max_iterations = settings.max_iterations if max_iterations is None else max_iterations
        _check_parameters(self.damping_factor, self.tolerance, self.max_iterations, None)

    def run(self, graph: Graph, time_limit: float | None = None) -> PageRankResult:
        """Rank a graph, returning scores and diagnostics."""
        return run_pagerank(
            graph,
            damping_factor=self.damping_factor,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
            time_limit=time_limit,
        )

    def compute_pagerank(self, graph: Graph) -> dict[Hashable, float]:
        """Rank a graph, returning node -> score."""
        return self.run(graph).scores


_engine: RankEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> RankEngine:
    """Get the singleton RankEngine configured from settings."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = RankEngine()
    return _engine
