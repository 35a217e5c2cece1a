"""Application use cases."""

from partsync.application.use_cases.create_orders_from_mrp import CreateOrdersFromMrpUseCase
from partsync.application.use_cases.list_mrp_results import ListMrpResultsUseCase
from partsync.application.use_cases.manage_audit import (
    CreateAuditUseCase,
    GetAuditUseCase,
    RecordAuditCountUseCase,
    RevertAuditUseCase,
    UpdateAuditUseCase,
)
from partsync.application.use_cases.manage_picking import (
    CompletePickingTaskUseCase,
    CreatePickingTaskUseCase,
    GetPickingTaskUseCase,
    RevertPickingTaskUseCase,
    UpdatePickingItemUseCase,
)
from partsync.application.use_cases.query_inventory import QueryInventoryUseCase
from partsync.application.use_cases.receive_purchase_order import ReceivePurchaseOrderUseCase
from partsync.application.use_cases.record_transaction import RecordTransactionUseCase
from partsync.application.use_cases.run_mrp import RunMrpUseCase

__all__ = [
    "RunMrpUseCase",
    "ListMrpResultsUseCase",
    "CreateOrdersFromMrpUseCase",
    "ReceivePurchaseOrderUseCase",
    "RecordTransactionUseCase",
    "QueryInventoryUseCase",
    "CreateAuditUseCase",
    "GetAuditUseCase",
    "RecordAuditCountUseCase",
    "UpdateAuditUseCase",
    "RevertAuditUseCase",
    "CreatePickingTaskUseCase",
    "GetPickingTaskUseCase",
    "UpdatePickingItemUseCase",
    "CompletePickingTaskUseCase",
    "RevertPickingTaskUseCase",
]
