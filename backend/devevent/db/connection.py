"""
Process-scoped database connection cache.

CONNECTION STRATEGY
===================

Problem:
  Short-lived invocations (serverless handlers, reloading workers) may ask
  for a connection many times while the first connect is still in flight.
  Connecting on every call opens a new pool each time (a connection storm).

Solution:
  ConnectionManager keeps two pieces of state:

  - `_engine`:  the connected AsyncEngine, cached for the process lifetime
  - `_pending`: the in-flight connect attempt, an asyncio.Task

  1. If an engine is cached, return it.
  2. Otherwise the first caller starts the connect task; every caller that
     arrives before it finishes awaits that same task.
  3. The task settles its own outcome in a done-callback, whether or not
     anyone is still waiting: on success the engine is cached, on failure
     or cancellation `_pending` is cleared so the next call starts over.
  4. Callers waiting on a failed attempt receive DatabaseConnectionError.

  Awaiters go through asyncio.shield(), so one cancelled caller does not
  cancel the attempt the others are waiting on.

  No lock is needed: everything runs on one event loop and the cached task
  is the only place a connect can start.
"""

import asyncio
from functools import lru_cache, partial
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from devevent.core.config import get_settings
from devevent.core.errors import ConfigError, DatabaseConnectionError
from devevent.core.logging import get_logger

logger = get_logger(__name__)

MAX_POOL_SIZE = 10
SERVER_SELECTION_TIMEOUT = 5  # seconds to obtain a connection
SOCKET_TIMEOUT = 45  # seconds a single statement may take

Connector = Callable[[URL], Awaitable[AsyncEngine]]


def engine_options(url: URL) -> dict[str, Any]:
    """Fixed pool and timeout options for the given backend."""
    if url.get_backend_name() == "sqlite":
        # SQLite has no server; timeout bounds waiting on the file lock
        return {"connect_args": {"timeout": SERVER_SELECTION_TIMEOUT}}

    options: dict[str, Any] = {
        "pool_size": MAX_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": SERVER_SELECTION_TIMEOUT,
        "pool_pre_ping": True,
    }
    if url.get_driver_name() == "asyncpg":
        options["connect_args"] = {
            "timeout": SERVER_SELECTION_TIMEOUT,
            "command_timeout": SOCKET_TIMEOUT,
        }
    return options


async def connect_engine(url: URL) -> AsyncEngine:
    """Create an engine and prove the server is reachable before returning it."""
    engine = create_async_engine(url, **engine_options(url))
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except BaseException:
        await engine.dispose()
        raise
    return engine


class ConnectionManager:
    """Connect at most once per process and share the result."""

    def __init__(
        self,
        url: Optional[str],
        database_name: Optional[str] = None,
        connector: Optional[Connector] = None,
    ) -> None:
        self.url = url
        self.database_name = database_name
        self._connector = connector or connect_engine
        self._engine: Optional[AsyncEngine] = None
        self._pending: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls) -> "ConnectionManager":
        settings = get_settings()
        return cls(settings.DATABASE_URL, settings.DATABASE_NAME)

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def resolve_url(self) -> URL:
        if not self.url:
            raise ConfigError("DATABASE_URL")
        try:
            url = make_url(self.url)
        except ArgumentError as exc:
            raise ConfigError("DATABASE_URL") from exc
        if self.database_name:
            url = url.set(database=self.database_name)
        return url

    def _start(self, url: URL) -> asyncio.Task:
        task = asyncio.ensure_future(self._connector(url))
        task.add_done_callback(partial(self._settle, url))
        self._pending = task
        return task

    def _settle(self, url: URL, task: asyncio.Task) -> None:
        """Record the outcome of a finished attempt, even if nobody awaits it."""
        superseded = self._pending is not task
        if not superseded:
            self._pending = None

        if task.cancelled():
            logger.warning("database_connection_cancelled")
            return

        exc = task.exception()
        if exc is not None:
            logger.error(
                "database_connection_failed",
                url=url.render_as_string(hide_password=True),
                error=str(exc),
            )
            return

        if superseded:
            # dispose() ran while this attempt was finishing
            asyncio.ensure_future(task.result().dispose())
            return

        self._engine = task.result()
        logger.info(
            "database_connected",
            url=url.render_as_string(hide_password=True),
            pool_size=MAX_POOL_SIZE,
        )

    async def get_connection(self) -> AsyncEngine:
        """Return the shared engine, connecting first if nobody has yet."""
        url = self.resolve_url()

        if self._engine is not None:
            return self._engine

        pending = self._pending or self._start(url)
        try:
            return await asyncio.shield(pending)
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise
            # The attempt itself was cancelled, not just this caller
            raise DatabaseConnectionError("connection attempt was cancelled")
        except Exception as exc:
            raise DatabaseConnectionError(str(exc)) from exc

    async def dispose(self) -> None:
        """Release the pool and cancel any attempt in flight. A later get_connection() connects again."""
        engine, self._engine = self._engine, None
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
        if engine is not None:
            await engine.dispose()
            logger.info("database_disconnected")


@lru_cache()
def get_connection_manager() -> ConnectionManager:
    return ConnectionManager.from_settings()


async def get_connection() -> AsyncEngine:
    """Shared engine for this process."""
    return await get_connection_manager().get_connection()


async def close_connection() -> None:
    """Dispose the shared engine on shutdown."""
    await get_connection_manager().dispose()
