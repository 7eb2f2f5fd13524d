"""PostgreSQL connection and helper functions."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from psycopg_pool import ConnectionPool

from config.settings import settings

logger = logging.getLogger(__name__)

# Global connection pool
_pool: ConnectionPool | None = None
_pool_lock = threading.Lock()


def get_pool() -> ConnectionPool:
    """Get or create the connection pool."""
    global _pool
    if _pool is None:
        with _pool_lock:
            if _pool is None:
                _pool = ConnectionPool(
                    settings.database_url,
                    min_size=1,
                    max_size=5,
                    open=True,
                )
    return _pool


def close_pool() -> None:
    """Close the connection pool."""
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.close()
            _pool = None


@contextmanager
def get_connection() -> Iterator:
    """Get a connection from the pool.

    Connections start with autocommit off; callers commit explicitly.
    Uncommitted changes are rolled back when the connection returns to the
    pool.
    """
    pool = get_pool()
    with pool.connection() as conn:
        yield conn


def init_db() -> None:
    """Check that the database is reachable."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
    logger.debug("Database connection verified")
