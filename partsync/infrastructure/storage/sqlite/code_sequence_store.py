"""SQLite document-code sequences."""

from partsync.config import get_logger
from partsync.core.interfaces.unit_of_work import ICodeSequenceStore
from partsync.infrastructure.storage.sqlite.connection import get_transaction

logger = get_logger(__name__)


class SQLiteCodeSequenceStore(ICodeSequenceStore):
    """Counter rows keyed by (prefix, period), bumped atomically."""

    async def next_value(self, prefix: str, period: str) -> int:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO code_sequences (prefix, period, last_value)
                VALUES (?, ?, 1)
                ON CONFLICT (prefix, period)
                DO UPDATE SET last_value = last_value + 1
                RETURNING last_value
                """,
                (prefix, period),
            )
            row = await cursor.fetchone()
            await cursor.close()
            return int(row[0])
