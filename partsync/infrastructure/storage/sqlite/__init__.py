"""SQLite storage implementations."""

from partsync.infrastructure.storage.sqlite.audit_store import SQLiteAuditStore
from partsync.infrastructure.storage.sqlite.code_sequence_store import SQLiteCodeSequenceStore
from partsync.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    SQLiteUnitOfWork,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from partsync.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from partsync.infrastructure.storage.sqlite.master_data_store import SQLiteMasterDataStore
from partsync.infrastructure.storage.sqlite.mrp_store import SQLiteMrpResultStore
from partsync.infrastructure.storage.sqlite.order_store import (
    SQLitePurchaseOrderStore,
    SQLiteSalesOrderStore,
)
from partsync.infrastructure.storage.sqlite.picking_store import SQLitePickingStore

get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_master_data_store: SQLiteMasterDataStore | None = None
_inventory_store: SQLiteInventoryStore | None = None
_sales_order_store: SQLiteSalesOrderStore | None = None
_purchase_order_store: SQLitePurchaseOrderStore | None = None
_mrp_store: SQLiteMrpResultStore | None = None
_audit_store: SQLiteAuditStore | None = None
_picking_store: SQLitePickingStore | None = None
_code_sequence_store: SQLiteCodeSequenceStore | None = None
_unit_of_work: SQLiteUnitOfWork | None = None


async def get_master_data_store() -> SQLiteMasterDataStore:
    """Get singleton master data store instance."""
    global _master_data_store
    if _master_data_store is None:
        _master_data_store = SQLiteMasterDataStore()
    return _master_data_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_sales_order_store() -> SQLiteSalesOrderStore:
    """Get singleton sales order store instance."""
    global _sales_order_store
    if _sales_order_store is None:
        _sales_order_store = SQLiteSalesOrderStore()
    return _sales_order_store


async def get_purchase_order_store() -> SQLitePurchaseOrderStore:
    """Get singleton purchase order store instance."""
    global _purchase_order_store
    if _purchase_order_store is None:
        _purchase_order_store = SQLitePurchaseOrderStore()
    return _purchase_order_store


async def get_mrp_store() -> SQLiteMrpResultStore:
    """Get singleton MRP result store instance."""
    global _mrp_store
    if _mrp_store is None:
        _mrp_store = SQLiteMrpResultStore()
    return _mrp_store


async def get_audit_store() -> SQLiteAuditStore:
    """Get singleton audit store instance."""
    global _audit_store
    if _audit_store is None:
        _audit_store = SQLiteAuditStore()
    return _audit_store


async def get_picking_store() -> SQLitePickingStore:
    """Get singleton picking store instance."""
    global _picking_store
    if _picking_store is None:
        _picking_store = SQLitePickingStore()
    return _picking_store


async def get_code_sequence_store() -> SQLiteCodeSequenceStore:
    """Get singleton code sequence store instance."""
    global _code_sequence_store
    if _code_sequence_store is None:
        _code_sequence_store = SQLiteCodeSequenceStore()
    return _code_sequence_store


async def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unit of work."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork()
    return _unit_of_work


__all__ = [
    # Connection
    "ConnectionPool",
    "SQLiteUnitOfWork",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteAuditStore",
    "SQLiteCodeSequenceStore",
    "SQLiteInventoryStore",
    "SQLiteMasterDataStore",
    "SQLiteMrpResultStore",
    "SQLitePickingStore",
    "SQLitePurchaseOrderStore",
    "SQLiteSalesOrderStore",
    # Factory functions
    "get_audit_store",
    "get_code_sequence_store",
    "get_inventory_store",
    "get_master_data_store",
    "get_mrp_store",
    "get_picking_store",
    "get_purchase_order_store",
    "get_sales_order_store",
    "get_unit_of_work",
]
