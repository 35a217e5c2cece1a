"""
Async SQLite connection pool with aiosqlite.

Provides connection management with proper async context handling.
Transactions are explicit (``BEGIN IMMEDIATE`` ... ``COMMIT``) and
re-entrant within a task: a store call made while a transaction is open
joins it instead of taking a second connection.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path

import aiosqlite

from partsync.config import get_logger, get_settings
from partsync.core.exceptions import DatabaseError
from partsync.core.interfaces.unit_of_work import IUnitOfWork

logger = get_logger(__name__)

# Connection holding the transaction open in the current task, if any
_active_connection: ContextVar[aiosqlite.Connection | None] = ContextVar(
    "partsync_active_connection", default=None
)


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new database connection with optimized settings."""
        # Autocommit mode; transactions are opened explicitly.
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        # Enable WAL mode for better concurrency
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")

        # Enable foreign keys
        await conn.execute("PRAGMA foreign_keys=ON")

        # Row factory for dict-like access
        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Commits on success, rolls back on exception. Nested calls in the
        same task reuse the outer connection; only the outermost commits.
        ``BEGIN IMMEDIATE`` takes the write lock up front so concurrent
        read-modify-write sequences serialize.
        """
        active = _active_connection.get()
        if active is not None:
            yield active
            return

        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            token = _active_connection.set(conn)
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            else:
                await conn.execute("COMMIT")
            finally:
                _active_connection.reset(token)

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection from the global pool.

    Inside an open transaction this is the transaction's connection, so
    reads see uncommitted writes of the same unit of work.
    """
    try:
        active = _active_connection.get()
        if active is not None:
            yield active
            return

        pool = await get_pool()
        async with pool.acquire() as conn:
            yield conn
    except aiosqlite.Error as e:
        raise DatabaseError("query", str(e)) from e


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection with transaction context.

    Driver errors that escape the store (constraint violations the store
    did not translate, locked database) surface as DatabaseError.
    """
    pool = await get_pool()
    try:
        async with pool.transaction() as conn:
            yield conn
    except aiosqlite.Error as e:
        logger.error("transaction_failed", error=str(e))
        raise DatabaseError("transaction", str(e)) from e


class SQLiteUnitOfWork(IUnitOfWork):
    """IUnitOfWork over the global pool's re-entrant transactions."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with get_transaction():
            yield
