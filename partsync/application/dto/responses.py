"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from partsync.core.entities.audit import AuditItem, AuditRecord, DiscrepancyLog
from partsync.core.entities.inventory import Inventory, LowStockAlert, Transaction
from partsync.core.entities.mrp import MrpResult, MrpSummary
from partsync.core.entities.picking import PickingItem, PickingTask
from partsync.core.entities.purchase_order import PurchaseOrder, PurchaseOrderItem

# Inventory


class InventoryResponse(BaseModel):
    """Stock position of one part."""

    part_id: int = Field(..., description="Part ID")
    current_qty: int = Field(..., description="On-hand quantity")
    reserved_qty: int = Field(default=0, description="Quantity reserved for other orders")
    available_qty: int = Field(..., description="current_qty - reserved_qty, floored at 0")
    incoming_qty: int = Field(default=0, description="Unreceived purchase order quantity")
    last_inbound_date: datetime | None = None
    last_outbound_date: datetime | None = None
    last_audit_date: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, inventory: Inventory) -> "InventoryResponse":
        return cls(
            part_id=inventory.part_id,
            current_qty=inventory.current_qty,
            reserved_qty=inventory.reserved_qty,
            available_qty=inventory.available_qty,
            incoming_qty=inventory.incoming_qty,
            last_inbound_date=inventory.last_inbound_date,
            last_outbound_date=inventory.last_outbound_date,
            last_audit_date=inventory.last_audit_date,
            updated_at=inventory.updated_at,
        )


class InventoryListResponse(BaseModel):
    items: list[InventoryResponse] = Field(default_factory=list)
    count: int = 0


class TransactionResponse(BaseModel):
    """Ledger entry."""

    id: int = Field(..., description="Transaction ID")
    transaction_code: str = Field(..., description="IN/OUT/ADJ/TRF code")
    part_id: int
    transaction_type: str
    quantity: int
    before_qty: int
    after_qty: int
    reference_type: str
    reference_id: str | None = None
    reason: str | None = None
    notes: str | None = None
    performed_by: str | None = None
    transaction_date: datetime

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,  # type: ignore[arg-type]
            transaction_code=transaction.transaction_code,
            part_id=transaction.part_id,
            transaction_type=transaction.transaction_type.value,
            quantity=transaction.quantity,
            before_qty=transaction.before_qty,
            after_qty=transaction.after_qty,
            reference_type=transaction.reference_type.value,
            reference_id=transaction.reference_id,
            reason=transaction.reason,
            notes=transaction.notes,
            performed_by=transaction.performed_by,
            transaction_date=transaction.transaction_date,
        )


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse] = Field(default_factory=list)
    count: int = 0


class RecordTransactionResponse(BaseModel):
    """Inventory after a manual movement and the ledger entry it produced."""

    inventory: InventoryResponse
    transaction: TransactionResponse


class LowStockAlertResponse(BaseModel):
    part_id: int
    part_code: str
    part_name: str
    current_qty: int
    safety_stock: int
    shortage: int
    last_inbound_date: datetime | None = None

    @classmethod
    def from_entity(cls, alert: LowStockAlert) -> "LowStockAlertResponse":
        return cls(**alert.model_dump())


class LowStockListResponse(BaseModel):
    items: list[LowStockAlertResponse] = Field(default_factory=list)
    count: int = 0


# MRP


class MrpResultResponse(BaseModel):
    """Net requirement and order suggestion for one part."""

    id: int
    part_id: int
    sales_order_id: int | None = None
    contributing_sales_order_ids: list[int] = Field(default_factory=list)
    calculation_date: date
    gross_requirement: int
    current_stock: int
    reserved_qty: int
    incoming_qty: int
    safety_stock: int
    net_requirement: int
    suggested_order_qty: int
    suggested_order_date: date | None = None
    earliest_due_date: date | None = None
    urgency: str
    status: str
    needs_order: bool

    @classmethod
    def from_entity(cls, result: MrpResult) -> "MrpResultResponse":
        return cls(
            id=result.id,  # type: ignore[arg-type]
            part_id=result.part_id,
            sales_order_id=result.sales_order_id,
            contributing_sales_order_ids=result.contributing_sales_order_ids,
            calculation_date=result.calculation_date,
            gross_requirement=result.gross_requirement,
            current_stock=result.current_stock,
            reserved_qty=result.reserved_qty,
            incoming_qty=result.incoming_qty,
            safety_stock=result.safety_stock,
            net_requirement=result.net_requirement,
            suggested_order_qty=result.suggested_order_qty,
            suggested_order_date=result.suggested_order_date,
            earliest_due_date=result.earliest_due_date,
            urgency=result.urgency.value,
            status=result.status.value,
            needs_order=result.needs_order,
        )


class MrpSummaryResponse(BaseModel):
    total_results: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    total_recommended_qty: int = 0
    parts_needing_order: int = 0

    @classmethod
    def from_summary(cls, summary: MrpSummary) -> "MrpSummaryResponse":
        return cls(**summary.model_dump())


class MrpResultListResponse(BaseModel):
    """MRP rows with a summary over them."""

    count: int
    summary: MrpSummaryResponse
    results: list[MrpResultResponse] = Field(default_factory=list)


class MrpRunResponse(MrpResultListResponse):
    as_of: date
    sales_order_id: int | None = None


# Purchase orders


class PurchaseOrderItemResponse(BaseModel):
    id: int
    part_id: int
    order_qty: int
    received_qty: int
    outstanding_qty: int
    unit_price: float
    total_price: float
    status: str
    notes: str | None = None

    @classmethod
    def from_entity(cls, item: PurchaseOrderItem) -> "PurchaseOrderItemResponse":
        return cls(
            id=item.id,  # type: ignore[arg-type]
            part_id=item.part_id,
            order_qty=item.order_qty,
            received_qty=item.received_qty,
            outstanding_qty=item.outstanding_qty,
            unit_price=item.unit_price,
            total_price=item.total_price,
            status=item.status.value,
            notes=item.notes,
        )


class PurchaseOrderResponse(BaseModel):
    """Purchase order with its lines."""

    id: int
    order_code: str = Field(..., description="PO code, e.g. PO2501-0001")
    supplier_id: int
    project: str | None = None
    sales_order_id: int | None = None
    order_date: date
    expected_date: date | None = None
    actual_date: date | None = None
    status: str
    total_amount: float
    notes: str | None = None
    created_by: str | None = None
    items: list[PurchaseOrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, order: PurchaseOrder) -> "PurchaseOrderResponse":
        return cls(
            id=order.id,  # type: ignore[arg-type]
            order_code=order.order_code,
            supplier_id=order.supplier_id,
            project=order.project,
            sales_order_id=order.sales_order_id,
            order_date=order.order_date,
            expected_date=order.expected_date,
            actual_date=order.actual_date,
            status=order.status.value,
            total_amount=order.total_amount,
            notes=order.notes,
            created_by=order.created_by,
            items=[PurchaseOrderItemResponse.from_entity(i) for i in order.items],
        )


class FailedGroupResponse(BaseModel):
    supplier_id: int
    project: str | None = None
    part_ids: list[int] = Field(default_factory=list)
    error_code: str
    message: str


class SkippedSelectionResponse(BaseModel):
    part_id: int
    reason: str
    mrp_result_ids: list[int] = Field(default_factory=list)


class CreateOrdersFromMrpResponse(BaseModel):
    """Created orders plus the groups that failed and the selections skipped."""

    purchase_orders: list[PurchaseOrderResponse] = Field(default_factory=list)
    total_orders: int = 0
    total_items: int = 0
    total_amount: float = 0.0
    failed_groups: list[FailedGroupResponse] = Field(default_factory=list)
    skipped: list[SkippedSelectionResponse] = Field(default_factory=list)


# Audit


class AuditItemResponse(BaseModel):
    id: int
    part_id: int
    system_qty: int
    counted_qty: int | None = None
    discrepancy: int | None = None
    notes: str | None = None
    counted_at: datetime | None = None
    adjustment_transaction_id: int | None = None

    @classmethod
    def from_entity(cls, item: AuditItem) -> "AuditItemResponse":
        return cls(
            id=item.id,  # type: ignore[arg-type]
            part_id=item.part_id,
            system_qty=item.system_qty,
            counted_qty=item.counted_qty,
            discrepancy=item.discrepancy,
            notes=item.notes,
            counted_at=item.counted_at,
            adjustment_transaction_id=item.adjustment_transaction_id,
        )


class AuditResponse(BaseModel):
    """Audit header with counted lines."""

    id: int
    audit_code: str
    audit_date: date
    audit_type: str
    status: str
    notes: str | None = None
    performed_by: str | None = None
    total_items: int
    matched_items: int
    discrepancy_items: int
    inventory_adjusted: bool
    completed_at: datetime | None = None
    items: list[AuditItemResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, audit: AuditRecord) -> "AuditResponse":
        return cls(
            id=audit.id,  # type: ignore[arg-type]
            audit_code=audit.audit_code,
            audit_date=audit.audit_date,
            audit_type=audit.audit_type.value,
            status=audit.status.value,
            notes=audit.notes,
            performed_by=audit.performed_by,
            total_items=audit.total_items,
            matched_items=audit.matched_items,
            discrepancy_items=audit.discrepancy_items,
            inventory_adjusted=audit.inventory_adjusted,
            completed_at=audit.completed_at,
            items=[AuditItemResponse.from_entity(i) for i in audit.items],
        )


class DiscrepancyLogResponse(BaseModel):
    id: int
    audit_item_id: int
    part_id: int
    discrepancy_type: str
    system_qty: int
    counted_qty: int
    discrepancy: int
    status: str
    resolution: str | None = None
    resolved_at: datetime | None = None

    @classmethod
    def from_entity(cls, log: DiscrepancyLog) -> "DiscrepancyLogResponse":
        return cls(
            id=log.id,  # type: ignore[arg-type]
            audit_item_id=log.audit_item_id,
            part_id=log.part_id,
            discrepancy_type=log.discrepancy_type.value,
            system_qty=log.system_qty,
            counted_qty=log.counted_qty,
            discrepancy=log.discrepancy,
            status=log.status.value,
            resolution=log.resolution,
            resolved_at=log.resolved_at,
        )


class AuditAdjustmentResponse(BaseModel):
    audit_item_id: int
    part_id: int
    system_qty: int
    counted_qty: int
    discrepancy: int
    transaction_id: int | None = None


class AuditUpdateResponse(BaseModel):
    """
    Audit after a status change.

    ``mode`` is set on completion: ADJUSTED when stock was corrected,
    REPORT_ONLY when discrepancies were only recorded.
    """

    audit: AuditResponse
    mode: str | None = None
    adjustments: list[AuditAdjustmentResponse] = Field(default_factory=list)
    discrepancy_logs: list[DiscrepancyLogResponse] = Field(default_factory=list)


# Picking


class PickingItemResponse(BaseModel):
    id: int
    part_id: int
    part_code: str | None = None
    storage_location: str | None = None
    required_qty: int
    picked_qty: int
    sequence: int
    status: str
    notes: str | None = None
    picked_at: datetime | None = None

    @classmethod
    def from_entity(cls, item: PickingItem) -> "PickingItemResponse":
        return cls(
            id=item.id,  # type: ignore[arg-type]
            part_id=item.part_id,
            part_code=item.part_code,
            storage_location=item.storage_location,
            required_qty=item.required_qty,
            picked_qty=item.picked_qty,
            sequence=item.sequence,
            status=item.status.value,
            notes=item.notes,
            picked_at=item.picked_at,
        )


class PickingTaskResponse(BaseModel):
    """Pick list in route order."""

    id: int
    task_code: str
    sales_order_id: int
    priority: str
    status: str
    total_items: int
    picked_items: int
    assigned_to: str | None = None
    notes: str | None = None
    created_at: datetime
    completed_at: datetime | None = None
    items: list[PickingItemResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, task: PickingTask) -> "PickingTaskResponse":
        return cls(
            id=task.id,  # type: ignore[arg-type]
            task_code=task.task_code,
            sales_order_id=task.sales_order_id,
            priority=task.priority.value,
            status=task.status.value,
            total_items=task.total_items,
            picked_items=task.picked_items,
            assigned_to=task.assigned_to,
            notes=task.notes,
            created_at=task.created_at,
            completed_at=task.completed_at,
            items=[PickingItemResponse.from_entity(i) for i in task.items],
        )


# Health and errors


class ComponentHealthResponse(BaseModel):
    """Health of a backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error: human-readable description
    - code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - details: structured context from the raised error
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error: str = Field(..., description="Human-readable error description")
    code: str = Field(..., description="Machine-readable error code")
    details: dict[str, Any] = Field(default_factory=dict, description="Structured context")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
