"""Storage infrastructure implementations."""

from partsync.infrastructure.storage.sqlite import (
    SQLiteUnitOfWork,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    "SQLiteUnitOfWork",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
