"""Database schema definitions for stored PageRank scores."""

import re
from psycopg import sql

SCORES_TABLE_SUFFIX = "_pagerank"


def validate_table_prefix(prefix: str) -> None:
    """Validate that a table-name prefix is safe and follows PostgreSQL rules.

    Raises:
        ValueError: If the prefix is invalid
    """
    if not prefix:
        raise ValueError("Graph name cannot be empty")

    if not re.match(r'^[a-z0-9_]+$', prefix):
        raise ValueError(
            f"Graph name '{prefix}' contains invalid characters. "
            "Only lowercase letters, numbers, and underscores are allowed."
        )

    # PostgreSQL identifier length limit is 63 bytes, suffix included
    if len((prefix + SCORES_TABLE_SUFFIX).encode('utf-8')) > 63:
        raise ValueError(f"Graph name '{prefix}' exceeds PostgreSQL 63-byte limit")


def sanitize_graph_name(graph_name: str) -> str:
    """Sanitize and validate a graph name for use in a table name.

    Raises:
        ValueError: If the sanitized name is invalid
    """
    prefix = graph_name.replace("-", "_").replace(".", "_").lower()
    validate_table_prefix(prefix)
    return prefix


def get_scores_table_name(graph_name: str) -> str:
    """Get the scores table name for a graph."""
    return f"{sanitize_graph_name(graph_name)}{SCORES_TABLE_SUFFIX}"


def get_create_scores_table_sql(graph_name: str) -> sql.Composed:
    """Generate SQL to create the scores table for a graph.

    Args:
        graph_name: Graph name (will be sanitized and validated)

    Returns:
        Composed SQL query
    """
    table = sql.Identifier(get_scores_table_name(graph_name))

    return sql.SQL(
        """
        CREATE TABLE IF NOT EXISTS {table} (
            node TEXT PRIMARY KEY,
            score DOUBLE PRECISION NOT NULL
        )
        """
    ).format(table=table)
