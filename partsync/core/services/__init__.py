"""Core domain services."""

from partsync.core.services.audit_reconciliation import (
    AuditCompletion,
    AuditReconciliationService,
)
from partsync.core.services.codes import CodeGenerator, format_code
from partsync.core.services.consolidator import (
    ConsolidationOptions,
    ConsolidationResult,
    OrderConsolidator,
    OrderSelection,
)
from partsync.core.services.demand import DemandAggregator, explode_sales_orders
from partsync.core.services.ledger import InventoryLedger, LedgerEntry, plan_movement
from partsync.core.services.mrp_engine import MrpNettingEngine, classify_urgency
from partsync.core.services.mrp_planning import MrpPlanningService, MrpRunOutcome
from partsync.core.services.permissions import has_permission
from partsync.core.services.picking import PickingService, parse_location
from partsync.core.services.receiving import PurchaseOrderReceiver, ReceiptLine

__all__ = [
    "AuditCompletion",
    "AuditReconciliationService",
    "CodeGenerator",
    "format_code",
    "ConsolidationOptions",
    "ConsolidationResult",
    "OrderConsolidator",
    "OrderSelection",
    "DemandAggregator",
    "explode_sales_orders",
    "InventoryLedger",
    "LedgerEntry",
    "plan_movement",
    "MrpNettingEngine",
    "classify_urgency",
    "MrpPlanningService",
    "MrpRunOutcome",
    "has_permission",
    "PickingService",
    "parse_location",
    "PurchaseOrderReceiver",
    "ReceiptLine",
]
