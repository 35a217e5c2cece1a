"""Core domain entities."""

from partsync.core.entities.audit import (
    AuditItem,
    AuditRecord,
    AuditStatus,
    AuditType,
    DiscrepancyLog,
    DiscrepancyStatus,
    DiscrepancyType,
)
from partsync.core.entities.auth import Action, Resource, Role, Session
from partsync.core.entities.inventory import (
    TRANSACTION_CODE_PREFIX,
    Inventory,
    LowStockAlert,
    MovementReference,
    ReferenceType,
    Transaction,
    TransactionType,
)
from partsync.core.entities.mrp import (
    MrpResult,
    MrpStatus,
    MrpSummary,
    MrpUrgency,
    PartDemand,
    StockSnapshot,
)
from partsync.core.entities.part import BomItem, Part, Product, Supplier
from partsync.core.entities.picking import (
    PickingItem,
    PickingItemStatus,
    PickingPriority,
    PickingTask,
    PickingTaskStatus,
)
from partsync.core.entities.purchase_order import (
    RECEIVABLE_STATUSES,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.entities.sales_order import (
    SalesOrder,
    SalesOrderItem,
    SalesOrderStatus,
)

__all__ = [
    # Master data
    "Supplier",
    "Part",
    "Product",
    "BomItem",
    # Inventory
    "Inventory",
    "Transaction",
    "TransactionType",
    "ReferenceType",
    "MovementReference",
    "LowStockAlert",
    "TRANSACTION_CODE_PREFIX",
    # Orders
    "SalesOrder",
    "SalesOrderItem",
    "SalesOrderStatus",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PurchaseOrderItemStatus",
    "PurchaseOrderStatus",
    "RECEIVABLE_STATUSES",
    # MRP
    "MrpResult",
    "MrpStatus",
    "MrpSummary",
    "MrpUrgency",
    "PartDemand",
    "StockSnapshot",
    # Audit
    "AuditRecord",
    "AuditItem",
    "AuditStatus",
    "AuditType",
    "DiscrepancyLog",
    "DiscrepancyStatus",
    "DiscrepancyType",
    # Picking
    "PickingTask",
    "PickingItem",
    "PickingTaskStatus",
    "PickingItemStatus",
    "PickingPriority",
    # Auth
    "Role",
    "Resource",
    "Action",
    "Session",
]
