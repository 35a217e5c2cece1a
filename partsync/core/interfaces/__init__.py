"""Core interfaces (ports) for dependency injection."""

from partsync.core.interfaces.audit_store import IAuditStore
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.mrp_store import IMrpResultStore
from partsync.core.interfaces.notifier import INotifier, NotificationEvent
from partsync.core.interfaces.order_store import IPurchaseOrderStore, ISalesOrderStore
from partsync.core.interfaces.picking_store import IPickingStore
from partsync.core.interfaces.unit_of_work import ICodeSequenceStore, IUnitOfWork

__all__ = [
    # Storage interfaces
    "IAuditStore",
    "IInventoryStore",
    "IMasterDataStore",
    "IMrpResultStore",
    "IPickingStore",
    "IPurchaseOrderStore",
    "ISalesOrderStore",
    # Transactions
    "ICodeSequenceStore",
    "IUnitOfWork",
    # Notifications
    "INotifier",
    "NotificationEvent",
]
