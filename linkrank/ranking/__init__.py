"""Ranking module: index construction, PageRank iteration and score helpers."""

from .indexes import build_in_neighbors, build_out_degree
from .engine import RankEngine, compute_pagerank, get_engine, run_pagerank
from .scores import normalize_scores, normalize_to_unit_sum, rank_nodes

__all__ = [
    "build_in_neighbors",
    "build_out_degree",
    "RankEngine",
    "compute_pagerank",
    "get_engine",
    "run_pagerank",
    "normalize_scores",
    "normalize_to_unit_sum",
    "rank_nodes",
]
