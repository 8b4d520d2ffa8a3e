"""Base repository pattern for database operations."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from core.exceptions import PersistenceError
from database.connection import OptimizedSQLitePool


@contextmanager
def _persistence_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise PersistenceError(f"{operation} failed: {exc}") from exc


class BaseRepository:
    """Base repository with common database operations.

    Every sqlite error is re-raised as PersistenceError so callers above the
    store never depend on the driver.
    """

    def __init__(self, pool: OptimizedSQLitePool) -> None:
        self._pool = pool

    async def execute(self, query: str, params: Sequence[Any] = ()) -> int:
        """Execute a query in its own transaction and return the affected row count."""
        with _persistence_errors("execute"):
            async with self._pool.connection() as conn:
                try:
                    cursor = await conn.execute(query, params)
                    rowcount = cursor.rowcount
                    await conn.commit()
                except Exception:
                    await conn.rollback()
                    raise
                return rowcount

    async def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        """Fetch a single row."""
        with _persistence_errors("fetch_one"):
            async with self._pool.connection() as conn:
                cursor = await conn.execute(query, params)
                return await cursor.fetchone()

    async def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Fetch all rows."""
        with _persistence_errors("fetch_all"):
            async with self._pool.connection() as conn:
                cursor = await conn.execute(query, params)
                return list(await cursor.fetchall())

    async def fetch_value(self, query: str, params: Sequence[Any] = ()) -> Optional[Any]:
        """Fetch a single value from a single row."""
        row = await self.fetch_one(query, params)
        return row[0] if row else None

    async def transaction(self, queries: Sequence[Tuple[str, Sequence[Any]]]) -> None:
        """Execute multiple queries in a transaction."""
        with _persistence_errors("transaction"):
            async with self._pool.connection() as conn:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    for query, params in queries:
                        await conn.execute(query, params)
                    await conn.commit()
                except Exception:
                    await conn.rollback()
                    raise
