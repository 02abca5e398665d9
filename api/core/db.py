"""
Async database access helpers (raw SQL) using asyncpg.

`Database` wraps either the connection pool or a single connection that is
inside a transaction. FastAPI creates one on startup (see `api/main.py`),
stores it on `app.state` and hands it to route handlers through `get_db`, so
tests can swap in a fake.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = config.database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _rows_affected(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 3" or "INSERT 0 1".
    parts = (status or "").split()
    if parts and parts[-1].isdigit():
        return int(parts[-1])
    return 0


class Database:
    """
    Thin logging wrapper over an asyncpg pool or connection.

    Driver errors are never re-wrapped; callers see `asyncpg` exceptions as-is.
    """

    def __init__(
        self,
        executor: Any,
        *,
        bound: bool = False,
        log: logging.Logger | None = None,
    ):
        # `executor` is an asyncpg Pool, or a pooled connection when `bound`.
        self._executor = executor
        self._bound = bound
        self._log = log or logger

    @property
    def in_transaction(self) -> bool:
        return self._bound

    def _trace(self, method: str, sql: str, args: tuple[Any, ...]) -> None:
        self._log.debug("db.%s sql=%s args=%r", method, " ".join(sql.split()), args)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        self._trace("fetch_one", sql, args)
        row = await self._executor.fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        self._trace("fetch_all", sql, args)
        rows = await self._executor.fetch(sql, *args)
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return rows affected.
        """
        self._trace("execute", sql, args)
        status = await self._executor.execute(sql, *args)
        return _rows_affected(status)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Database]:
        """
        Yield a `Database` bound to one connection inside BEGIN/COMMIT.

        Any exception rolls the transaction back and is re-raised unchanged.
        Nested use on a connection-bound instance becomes a savepoint.
        """
        if self._bound:
            async with self._run_transaction(self._executor) as tx_db:
                yield tx_db
            return

        async with self._executor.acquire() as conn:  # type: asyncpg.Connection
            async with self._run_transaction(conn) as tx_db:
                yield tx_db

    @asynccontextmanager
    async def _run_transaction(self, conn: Any) -> AsyncIterator[Database]:
        tx = conn.transaction()
        self._log.debug("db.begin")
        await tx.start()
        try:
            yield Database(conn, bound=True, log=self._log)
        except BaseException:
            self._log.debug("db.rollback")
            await tx.rollback()
            raise
        self._log.debug("db.commit")
        await tx.commit()

    async def ping(self) -> bool:
        row = await self.fetch_one("SELECT 1 AS ok")
        return bool(row and row.get("ok") == 1)


async def with_transaction(
    db: Database,
    operations: Sequence[Callable[[Database], Awaitable[T]]],
) -> list[T]:
    """
    Run `operations` in one transaction and return their results in order.

    Each operation receives the transaction-bound `Database`. They run one
    after another because a single connection cannot interleave statements.
    """
    results: list[T] = []
    async with db.transaction() as tx:
        for operation in operations:
            results.append(await operation(tx))
    return results


async def connect() -> Database:
    pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=config.db_pool_min(),
        max_size=config.db_pool_max(),
        command_timeout=config.db_command_timeout_s(),
    )
    logger.info("Database pool ready (min=%s max=%s).", config.db_pool_min(), config.db_pool_max())
    return Database(pool)


async def disconnect(db: Database) -> None:
    if db.in_transaction:
        return None
    await db._executor.close()
    logger.info("Database pool closed.")


def get_db(request: Request) -> Database:
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. Call connect() on startup.")
    return db
