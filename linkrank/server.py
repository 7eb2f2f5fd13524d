"""FastMCP server exposing PageRank scoring as tools."""

import logging
import signal
import sys
from collections.abc import Hashable

from fastmcp import FastMCP

from config.settings import settings
from linkrank.exceptions import (
    ConfigurationError,
    DegenerateInputError,
    GraphLoadError,
    InvalidParameterError,
    StorageError,
)
from linkrank.graph.loader import graph_from_edges, load_edge_list
from linkrank.models import Graph, PageRankResult
from linkrank.ranking.engine import RankEngine
from linkrank.ranking.scores import rank_nodes
from linkrank.storage.postgres import close_pool, init_db
from linkrank.storage.scores import delete_scores, get_scores, store_scores

logger = logging.getLogger(__name__)

MIN_TOP_K = 1
MAX_TOP_K = 1000
MAX_EDGES = 1_000_000

mcp = FastMCP(
    "linkrank",
    instructions=(
        "PageRank scoring for directed graphs. Call rank_graph with [source, target] edge pairs, "
        "or rank_edge_file with the path of a whitespace-separated edge list."
    ),
)


def _validate_top_k(top_k: int | None) -> int:
    """Resolve top_k against settings and bounds."""
    if top_k is None:
        return settings.default_top_k
    if top_k < MIN_TOP_K:
        raise InvalidParameterError(f"top_k must be at least {MIN_TOP_K}")
    if top_k > MAX_TOP_K:
        raise InvalidParameterError(f"top_k cannot exceed {MAX_TOP_K}")
    return top_k


def _parse_edge_pairs(edges: list) -> list[tuple[Hashable, Hashable]]:
    """Validate JSON edge pairs into (source, target) tuples."""
    if len(edges) > MAX_EDGES:
        raise InvalidParameterError(f"Too many edges (max {MAX_EDGES})")

    pairs = []
    for i, edge in enumerate(edges):
        if not isinstance(edge, (list, tuple)) or len(edge) != 2:
            raise InvalidParameterError(f"Edge {i} must be a [source, target] pair")
        source, target = edge
        for endpoint in (source, target):
            if isinstance(endpoint, bool) or not isinstance(endpoint, (str, int)):
                raise InvalidParameterError(f"Edge {i} endpoints must be strings or integers")
        pairs.append((source, target))
    return pairs


def _rank(
    graph: Graph,
    damping_factor: float | None,
    tolerance: float | None,
    max_iterations: int | None,
) -> PageRankResult:
    engine = RankEngine(
        damping_factor=damping_factor,
        tolerance=tolerance,
        max_iterations=max_iterations,
    )
    time_limit = settings.time_limit or None
    return engine.run(graph, time_limit=time_limit)


def _build_payload(result: PageRankResult, top_k: int) -> dict:
    """Format a run for tool output."""
    return {
        "nodes": len(result.scores),
        "sweeps": result.sweeps,
        "delta": result.delta,
        "converged": result.converged,
        "timed_out": result.timed_out,
        "ranking": [
            {"node": node, "score": score}
            for node, score in rank_nodes(result.scores, top_k)
        ],
    }


def _rank_and_report(
    graph: Graph,
    damping_factor: float | None,
    tolerance: float | None,
    max_iterations: int | None,
    top_k: int | None,
    store_as: str | None,
) -> dict:
    limit = _validate_top_k(top_k)
    result = _rank(graph, damping_factor, tolerance, max_iterations)

    logger.info(f"Ranked {len(result.scores)} nodes in {result.sweeps} sweeps")

    payload = _build_payload(result, limit)
    if store_as:
        payload["stored"] = store_scores(store_as, result.scores)
    return payload


def _error_response(e: Exception) -> dict:
    """Map a failure to a tool error dict."""
    if isinstance(e, (InvalidParameterError, DegenerateInputError)):
        logger.warning(f"Rejected request: {e}")
        return {"error": str(e)}
    if isinstance(e, GraphLoadError):
        logger.warning(f"Graph load error: {e}")
        return {"error": str(e)}
    if isinstance(e, StorageError):
        logger.error(f"Storage error: {e}")
        return {"error": "Failed to access score storage"}
    if isinstance(e, ValueError):
        logger.warning(f"Invalid value: {e}")
        return {"error": str(e)}
    logger.exception(f"Unexpected error: {e}")
    return {"error": "An unexpected error occurred"}


@mcp.tool()
async def rank_graph(
    edges: list[list[str | int]],
    nodes: list[str | int] | None = None,
    damping_factor: float | None = None,
    tolerance: float | None = None,
    max_iterations: int | None = None,
    top_k: int | None = None,
    store_as: str | None = None,
) -> dict:
    """Compute PageRank for a graph given as edge pairs.

    Args:
        edges: Directed edges as [source, target] pairs
        nodes: Extra nodes (e.g. isolated ones); also fixes node order
        damping_factor: Damping factor in [0, 1] (default from settings)
        tolerance: Mean absolute change at which iteration stops
        max_iterations: Maximum number of sweeps
        top_k: Number of ranked nodes to return
        store_as: Persist all scores under this graph name

    Returns:
        Dict with node count, sweep diagnostics and the ranking
    """
    try:
        graph = graph_from_edges(_parse_edge_pairs(edges), nodes=nodes)
        return _rank_and_report(graph, damping_factor, tolerance, max_iterations, top_k, store_as)
    except Exception as e:
        return _error_response(e)


@mcp.tool()
async def rank_edge_file(
    path: str,
    damping_factor: float | None = None,
    tolerance: float | None = None,
    max_iterations: int | None = None,
    top_k: int | None = None,
    store_as: str | None = None,
) -> dict:
    """Compute PageRank for a whitespace-separated edge-list file.

    Args:
        path: Path to the edge list (one "source target" pair per line)
        damping_factor: Damping factor in [0, 1] (default from settings)
        tolerance: Mean absolute change at which iteration stops
        max_iterations: Maximum number of sweeps
        top_k: Number of ranked nodes to return
        store_as: Persist all scores under this graph name

    Returns:
        Dict with node count, sweep diagnostics and the ranking
    """
    try:
        graph = load_edge_list(path, node_type=str)
        return _rank_and_report(graph, damping_factor, tolerance, max_iterations, top_k, store_as)
    except Exception as e:
        return _error_response(e)


@mcp.tool()
async def get_stored_scores(name: str, top_k: int | None = None) -> dict:
    """Return previously stored scores for a graph, highest first.

    Args:
        name: Graph name used with store_as
        top_k: Number of ranked nodes to return
    """
    try:
        limit = _validate_top_k(top_k)
        scores = get_scores(name)
        if not scores:
            return {"message": f"No stored scores for {name}"}
        return {
            "name": name,
            "nodes": len(scores),
            "ranking": [{"node": node, "score": score} for node, score in rank_nodes(scores, limit)],
        }
    except Exception as e:
        return _error_response(e)


@mcp.tool()
async def delete_stored_scores(name: str) -> dict:
    """Delete stored scores for a graph.

    Args:
        name: Graph name used with store_as
    """
    try:
        delete_scores(name)
        return {"status": "deleted", "name": name}
    except Exception as e:
        return _error_response(e)


def _check_settings() -> None:
    """Reject settings the engine cannot run with."""
    try:
        RankEngine()
    except InvalidParameterError as e:
        raise ConfigurationError(f"Invalid PageRank settings: {e}") from e


def main() -> None:
    """Main entry point for MCP server."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.info("Starting linkrank MCP server...")

    try:
        _check_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.warning(f"Score storage unavailable: {e}")
        close_pool()

    def shutdown(sig, frame) -> None:
        logger.info(f"Received signal {sig}, shutting down...")
        close_pool()
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    try:
        mcp.run()
    except Exception as e:
        logger.exception(f"Server error: {e}")
        sys.exit(1)
    finally:
        close_pool()
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
