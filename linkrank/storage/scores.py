"""Persist PageRank scores per named graph.

Each graph gets its own ``<name>_pagerank`` table. Node identifiers are
stored as text, so fetched scores are keyed by ``str(node)``.
"""

import logging
from collections.abc import Hashable, Iterable, Mapping

import psycopg
from psycopg import sql

from config.settings import settings
from linkrank.exceptions import StorageError
from linkrank.storage.postgres import get_connection
from linkrank.storage.schema import get_create_scores_table_sql, get_scores_table_name

logger = logging.getLogger(__name__)


def store_scores(graph_name: str, scores: Mapping[Hashable, float]) -> int:
    """Store scores for a graph, replacing any previous run.

    Args:
        graph_name: Graph name
        scores: Dict mapping node -> score

    Returns:
        Number of rows written

    Raises:
        StorageError: If the database rejects the write
    """
    table_name = get_scores_table_name(graph_name)
    table = sql.Identifier(table_name)
    items = [(str(node), float(score)) for node, score in scores.items()]

    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(get_create_scores_table_sql(graph_name))

                # Clear existing scores
                cur.execute(sql.SQL("DELETE FROM {}").format(table))

                if items:
                    batch_size = settings.store_batch_size
                    insert_sql = sql.SQL("INSERT INTO {} (node, score) VALUES (%s, %s)").format(table)
                    for i in range(0, len(items), batch_size):
                        cur.executemany(insert_sql, items[i:i + batch_size])

            conn.commit()
    except psycopg.Error as e:
        raise StorageError(f"Failed to store scores for {graph_name}: {e}") from e

    logger.info(f"Stored {len(items)} PageRank scores for {graph_name}")
    return len(items)


def get_scores(
    graph_name: str,
    nodes: Iterable[Hashable] | None = None,
) -> dict[str, float]:
    """Fetch stored scores for a graph.

    Args:
        graph_name: Graph name
        nodes: Only fetch these nodes (all rows if None)

    Returns:
        Dict mapping str(node) -> score; empty if the graph was never stored

    Raises:
        StorageError: If the query fails
    """
    table_name = get_scores_table_name(graph_name)
    wanted = None if nodes is None else [str(node) for node in nodes]
    if wanted is not None and not wanted:
        return {}

    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT EXISTS (
                        SELECT FROM information_schema.tables
                        WHERE table_name = %s
                    )
                """, (table_name,))

                if not cur.fetchone()[0]:
                    logger.debug(f"Scores table {table_name} does not exist")
                    return {}

                if wanted is None:
                    cur.execute(
                        sql.SQL("SELECT node, score FROM {} ORDER BY score DESC").format(
                            sql.Identifier(table_name)
                        )
                    )
                else:
                    cur.execute(
                        sql.SQL("SELECT node, score FROM {} WHERE node = ANY(%s) ORDER BY score DESC").format(
                            sql.Identifier(table_name)
                        ),
                        (wanted,),
                    )

                return {row[0]: row[1] for row in cur.fetchall()}
    except psycopg.Error as e:
        raise StorageError(f"Failed to fetch scores for {graph_name}: {e}") from e


def delete_scores(graph_name: str) -> None:
    """Drop the scores table for a graph.

    Raises:
        StorageError: If the drop fails
    """
    table_name = get_scores_table_name(graph_name)

    try:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table_name)))
            conn.commit()
    except psycopg.Error as e:
        raise StorageError(f"Failed to delete scores table {table_name}: {e}") from e

    logger.debug(f"Deleted scores table {table_name}")
