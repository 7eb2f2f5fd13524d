"""Shared data models for the linkrank package."""

from collections.abc import Collection, Hashable, Mapping, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Graph:
    """Directed graph as an ordered node sequence plus a successor mapping.

    A node missing from ``edges`` has no outgoing edges. ``None`` in either
    field marks absent input and is rejected by the engine.
    """

    nodes: Sequence[Hashable] | None
    edges: Mapping[Hashable, Collection[Hashable]] | None = field(default_factory=dict)


@dataclass
class PageRankResult:
    """Scores of one PageRank run with its convergence diagnostics."""

    scores: dict[Hashable, float]
    sweeps: int
    delta: float
    converged: bool
    timed_out: bool = False
