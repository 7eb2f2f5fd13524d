"""Graph construction from edge pairs and edge-list files."""

from .loader import graph_from_edges, load_edge_list, parse_edge_list

__all__ = ["graph_from_edges", "load_edge_list", "parse_edge_list"]
