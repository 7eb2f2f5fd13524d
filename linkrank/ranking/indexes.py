"""Adjacency summaries derived from a graph before ranking.

Both indexes are built once per run and are read-only afterwards.
"""

from collections.abc import Collection, Hashable, Iterable, Mapping

from linkrank.models import Graph


def unique_nodes(nodes: Iterable[Hashable]) -> list[Hashable]:
    """Return nodes in first-seen order with duplicates removed."""
    return list(dict.fromkeys(nodes))


def _successors(
    edges: Mapping[Hashable, Collection[Hashable]],
    node: Hashable,
) -> list[Hashable]:
    targets = edges.get(node)
    if not targets:
        return []
    return list(dict.fromkeys(targets))


def build_out_degree(graph: Graph) -> dict[Hashable, int]:
    """Count outgoing edges for every node.

    A node absent from the edge mapping has out-degree 0. Self-loops count
    toward the out-degree.

    Args:
        graph: Graph with non-absent nodes and edges

    Returns:
        Dict mapping node -> number of distinct successors
    """
    return {
        node: len(_successors(graph.edges, node))
        for node in unique_nodes(graph.nodes)
    }


def build_in_neighbors(graph: Graph) -> dict[Hashable, list[Hashable]]:
    """Build the reverse lookup: node -> nodes that link to it.

    Inverts the edge relation in one pass. Predecessors are listed in node
    sequence order. A node never appears among its own in-neighbors, and
    edge targets outside the node sequence are ignored.

    Args:
        graph: Graph with non-absent nodes and edges

    Returns:
        Dict mapping node -> list of predecessors (empty list if none)
    """
    nodes = unique_nodes(graph.nodes)
    in_neighbors: dict[Hashable, list[Hashable]] = {node: [] for node in nodes}

    for source in nodes:
        for target in _successors(graph.edges, source):
            if target == source or target not in in_neighbors:
                continue
            in_neighbors[target].append(source)

    return in_neighbors
