"""Tests for the SQLite connection pool and transactions."""

from pathlib import Path

import pytest

from partsync.core.exceptions import DatabaseError
from partsync.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    SQLiteUnitOfWork,
    get_connection,
    get_transaction,
)


async def _supplier_count(code: str) -> int:
    async with get_connection() as conn:
        cursor = await conn.execute("SELECT COUNT(*) FROM suppliers WHERE code = ?", (code,))
        return (await cursor.fetchone())[0]


class TestConnectionPool:
    """Tests for ConnectionPool."""

    def test_defaults(self, tmp_path: Path):
        """Pool size and busy timeout defaults."""
        pool = ConnectionPool(tmp_path / "pool.db")
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False

    async def test_initialize_creates_connections(self, tmp_path: Path):
        """Initialize opens pool_size connections and creates the directory."""
        db_path = tmp_path / "nested" / "pool.db"
        pool = ConnectionPool(db_path, pool_size=2)

        await pool.initialize()
        try:
            assert db_path.parent.exists()
            assert len(pool._connections) == 2
        finally:
            await pool.close()

    async def test_foreign_keys_enabled(self, tmp_path: Path):
        """Pooled connections enforce foreign keys."""
        pool = ConnectionPool(tmp_path / "pool.db", pool_size=1)
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA foreign_keys")
                assert (await cursor.fetchone())[0] == 1
        finally:
            await pool.close()


class TestTransactions:
    """Tests for get_transaction and SQLiteUnitOfWork."""

    async def test_commit(self, db):
        """Writes are visible after the transaction exits."""
        async with get_transaction() as conn:
            await conn.execute("INSERT INTO suppliers (code, name) VALUES ('TX-1', 'Tx')")

        assert await _supplier_count("TX-1") == 1

    async def test_nested_transaction_reuses_connection(self, db):
        """Inner transactions join the outer one."""
        async with get_transaction() as outer:
            async with get_transaction() as inner:
                assert inner is outer
            async with get_connection() as reader:
                assert reader is outer

    async def test_rollback_undoes_nested_writes(self, db):
        """An error after a nested block rolls back everything."""
        with pytest.raises(RuntimeError):
            async with get_transaction() as outer:
                await outer.execute("INSERT INTO suppliers (code, name) VALUES ('TX-2', 'Tx')")
                async with get_transaction() as inner:
                    await inner.execute("INSERT INTO suppliers (code, name) VALUES ('TX-3', 'Tx')")
                raise RuntimeError("boom")

        assert await _supplier_count("TX-2") == 0
        assert await _supplier_count("TX-3") == 0

    async def test_unit_of_work_rolls_back(self, db):
        """The unit of work spans store calls made inside it."""
        with pytest.raises(RuntimeError):
            async with SQLiteUnitOfWork().transaction():
                async with get_transaction() as conn:
                    await conn.execute("INSERT INTO suppliers (code, name) VALUES ('TX-4', 'Tx')")
                raise RuntimeError("boom")

        assert await _supplier_count("TX-4") == 0

    async def test_driver_errors_wrapped(self, db):
        """Constraint violations surface as DatabaseError."""
        with pytest.raises(DatabaseError) as exc_info:
            async with get_transaction() as conn:
                await conn.execute("INSERT INTO suppliers (code, name) VALUES (NULL, 'Tx')")

        assert exc_info.value.code == "DATABASE_ERROR"
        assert exc_info.value.details["operation"] == "transaction"
