"""Build graphs from edge pairs and edge-list files.

Edge-list format: one ``source target`` pair per line, whitespace separated.
Blank lines and lines starting with ``#`` are skipped; a line holding a single
token declares a node without edges.
"""

import logging
from collections.abc import Callable, Hashable, Iterable
from pathlib import Path

from linkrank.exceptions import GraphLoadError
from linkrank.models import Graph

logger = logging.getLogger(__name__)


def graph_from_edges(
    edges: Iterable[tuple[Hashable, Hashable]],
    nodes: Iterable[Hashable] | None = None,
) -> Graph:
    """Build a Graph from (source, target) pairs.

    Args:
        edges: Directed edges
        nodes: Explicit node order; endpoints missing from it are appended
            in first-seen order

    Returns:
        Graph whose node sequence covers every endpoint
    """
    ordered: dict[Hashable, None] = dict.fromkeys(nodes) if nodes is not None else {}
    successors: dict[Hashable, set[Hashable]] = {}

    for source, target in edges:
        ordered.setdefault(source)
        ordered.setdefault(target)
        successors.setdefault(source, set()).add(target)

    return Graph(nodes=list(ordered), edges=successors)


def parse_edge_list(
    lines: Iterable[str],
    node_type: Callable[[str], Hashable] = int,
) -> Graph:
    """Parse edge-list lines into a Graph.

    Raises:
        GraphLoadError: If a line has more than two tokens or a token cannot
            be converted by ``node_type``
    """
    nodes: list[Hashable] = []
    edges: list[tuple[Hashable, Hashable]] = []

    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        parts = stripped.split()
        if len(parts) > 2:
            raise GraphLoadError(f"Line {lineno}: expected 'source target', got {stripped!r}")

        try:
            converted = [node_type(part) for part in parts]
        except (TypeError, ValueError) as e:
            raise GraphLoadError(f"Line {lineno}: invalid node identifier in {stripped!r}") from e

        if len(converted) == 1:
            nodes.append(converted[0])
        else:
            edges.append((converted[0], converted[1]))

    graph = graph_from_edges(edges, nodes=nodes)
    logger.debug(f"Parsed edge list: {len(graph.nodes)} nodes, {len(edges)} edges")
    return graph


def load_edge_list(
    path: str | Path,
    node_type: Callable[[str], Hashable] = int,
) -> Graph:
    """Read an edge-list file into a Graph.

    Raises:
        GraphLoadError: If the file cannot be read or parsed
    """
    file_path = Path(path)
    try:
        with file_path.open("r", encoding="utf-8") as f:
            graph = parse_edge_list(f, node_type=node_type)
    except OSError as e:
        raise GraphLoadError(f"Cannot read edge list {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise GraphLoadError(f"Edge list {file_path} is not valid UTF-8") from e

    logger.info(f"Loaded {file_path.name}: {len(graph.nodes)} nodes")
    return graph
