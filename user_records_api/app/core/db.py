"""
PostgreSQL access through a shared asynchronous connection pool.

``UserStore`` wraps a ``psycopg_pool.AsyncConnectionPool``.  It is
constructed explicitly and handed to the application by
``main.create_app`` rather than living in a module-level global, so
tests can substitute any object exposing the same coroutine methods
(``open``, ``close``, ``fetch_all``, ``fetch_one``).

Each query borrows one connection for its single statement.  The
``async with pool.connection()`` block commits on success, rolls back
on error and always returns the connection to the pool.  Any driver or
pool failure is re-raised as :class:`StoreError`; nothing is retried
here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from .config import Settings
from .errors import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class UserStore:
    """Execute parameterized statements against the users database."""

    def __init__(self, pool: AsyncConnectionPool, open_timeout: float = 10.0) -> None:
        self._pool = pool
        self._open_timeout = open_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "UserStore":
        """Create a store with an unopened pool sized from ``settings``.

        Must be called from a running event loop (e.g. the application
        lifespan).
        """
        pool = AsyncConnectionPool(
            conninfo=settings.database_dsn,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            timeout=settings.db_pool_timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )
        return cls(pool, open_timeout=settings.db_pool_timeout)

    async def open(self) -> None:
        """Open the pool and check that the database answers a query.

        The pool is closed again before a failure is re-raised.

        Raises
        ------
        StoreError
            If the database cannot be reached.  Callers treat this as fatal.
        """
        try:
            try:
                await self._pool.open(wait=True, timeout=self._open_timeout)
            except psycopg.Error as exc:
                raise StoreError(str(exc)) from exc
            await self.check_connection()
        except StoreError:
            await self._pool.close()
            raise
        logger.info("Connected to database (pool max size %s)", self._pool.max_size)

    async def check_connection(self) -> None:
        row = await self.fetch_one("SELECT 1 AS ok")
        if not row or row.get("ok") != 1:
            raise StoreError("Database connectivity check returned no result")

    async def close(self) -> None:
        await self._pool.close()

    async def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Row]:
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cursor:
                    await cursor.execute(query, params)
                    return await cursor.fetchall()
        except psycopg.Error as exc:
            raise StoreError(str(exc)) from exc

    async def fetch_one(self, query: str, params: Sequence[Any] = ()) -> Optional[Row]:
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor() as cursor:
                    await cursor.execute(query, params)
                    return await cursor.fetchone()
        except psycopg.Error as exc:
            raise StoreError(str(exc)) from exc
