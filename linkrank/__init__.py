"""PageRank scoring for directed graphs."""

from .exceptions import DegenerateInputError, LinkRankError
from .models import Graph, PageRankResult
from .ranking import RankEngine, compute_pagerank, run_pagerank

__all__ = [
    "DegenerateInputError",
    "LinkRankError",
    "Graph",
    "PageRankResult",
    "RankEngine",
    "compute_pagerank",
    "run_pagerank",
]
