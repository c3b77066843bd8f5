"""
Database connection pool and query utilities.

Wraps a psycopg_pool.ConnectionPool with a bounded number of connections
and provides a simple interface for executing queries, returning rows as
dictionaries.

A single pool is created at startup and handed to the repositories that
need it; nothing in the package looks it up from global state.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool as PsycopgPool

from goodsdb.config import DEFAULT_POOL_MAX_SIZE, DEFAULT_POOL_TIMEOUT, Config
from goodsdb.exceptions import StorageError

logger = logging.getLogger(__name__)

JDBC_PREFIX = "jdbc:"


def to_conninfo(url: str) -> str:
    """Accept both libpq URLs and JDBC style ``jdbc:postgresql://...`` URLs."""
    if url.startswith(JDBC_PREFIX):
        return url[len(JDBC_PREFIX):]
    return url


class ConnectionPool:
    """
    Bounded pool of PostgreSQL connections.

    At most ``max_size`` connections are checked out at once; further
    callers of ``acquire()`` wait up to ``timeout`` seconds for one to be
    returned.

    Usage:
        with ConnectionPool(url, user, password) as pool:
            rows = pool.fetch_all("SELECT * FROM products")
    """

    def __init__(
        self,
        url: str,
        user: str,
        password: str,
        max_size: int = DEFAULT_POOL_MAX_SIZE,
        min_size: int = 1,
        timeout: float = DEFAULT_POOL_TIMEOUT,
        statement_timeout_ms: int = 0,
    ):
        self.max_size = max_size
        self.statement_timeout_ms = statement_timeout_ms
        self._pool = PsycopgPool(
            conninfo=to_conninfo(url),
            kwargs={"user": user, "password": password},
            min_size=min(min_size, max_size),
            max_size=max_size,
            timeout=timeout,
            configure=self._configure_connection,
            name="goodsdb",
            open=False,
        )

    @classmethod
    def from_config(cls, cfg: Config) -> "ConnectionPool":
        return cls(
            cfg.database_url,
            cfg.database_user,
            cfg.database_password,
            max_size=cfg.pool_max_size,
            timeout=cfg.pool_timeout,
            statement_timeout_ms=cfg.statement_timeout_ms,
        )

    def _configure_connection(self, conn: psycopg.Connection) -> None:
        """Called once for every new connection the pool creates."""
        if self.statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(self.statement_timeout_ms)}")
            conn.commit()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self, wait: bool = True, timeout: float = DEFAULT_POOL_TIMEOUT) -> "ConnectionPool":
        """
        Open the pool.

        Args:
            wait: Block until the minimum number of connections is ready
            timeout: Seconds to wait for them when wait is true

        Raises:
            StorageError: If the store cannot be reached
        """
        logger.info("Opening connection pool (max_size=%s)", self.max_size)
        try:
            self._pool.open(wait=wait, timeout=timeout)
        except psycopg.Error as e:
            self._pool.close()
            raise StorageError(
                "ConnectionPool.open()", e, details="Cannot connect to the data store"
            ) from e
        return self

    def close(self) -> None:
        """Close the pool. Safe to call more than once."""
        if not self.closed:
            logger.info("Closing connection pool")
            self._pool.close()

    @property
    def closed(self) -> bool:
        return self._pool.closed

    def stats(self) -> dict[str, int]:
        """Pool counters, e.g. ``pool_size``, ``pool_available``, ``requests_waiting``."""
        return self._pool.get_stats()

    def __enter__(self) -> "ConnectionPool":
        if self.closed:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Connection Management
    # =========================================================================

    @contextmanager
    def acquire(self):
        """
        Check out one connection for the duration of the block.

        - Waits while all connections are in use
        - Commits on successful exit
        - Rolls back on exception
        - Always returns the connection to the pool

        Usage:
            with pool.acquire() as conn:
                conn.execute("UPDATE ...")
        """
        with self._pool.connection() as conn:
            yield conn

    # =========================================================================
    # Query Helpers
    # =========================================================================

    def execute(self, query: str, params: tuple = None) -> int:
        """
        Execute a query without returning results.

        Returns:
            Number of rows affected
        """
        with self.acquire() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.rowcount

    def fetch_one(self, query: str, params: tuple = None) -> Optional[dict[str, Any]]:
        """
        Execute a query and return a single row as dict.

        Returns:
            Dict of column names to values, or None if no row found
        """
        with self.acquire() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                return cur.fetchone()

    def fetch_all(self, query: str, params: tuple = None) -> list[dict[str, Any]]:
        """
        Execute a query and return all rows as list of dicts.

        Returns:
            List of dicts, empty list if no rows found
        """
        with self.acquire() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                return cur.fetchall()

    def execute_many(self, query: str, params_list: Iterable[tuple]) -> int:
        """
        Execute a query once per parameter tuple, all in one transaction.

        Either every statement is committed or, on the first failure, none
        of them is.

        Returns:
            Number of parameter sets processed
        """
        params_list = list(params_list)
        with self.acquire() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.executemany(query, params_list)
        return len(params_list)
