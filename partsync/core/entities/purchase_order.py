"""Purchase order entities (supply)."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class PurchaseOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    ORDERED = "ORDERED"
    PARTIAL = "PARTIAL"
    RECEIVED = "RECEIVED"
    CANCELLED = "CANCELLED"


# Orders that may still accept goods
RECEIVABLE_STATUSES = (
    PurchaseOrderStatus.APPROVED,
    PurchaseOrderStatus.ORDERED,
    PurchaseOrderStatus.PARTIAL,
)


class PurchaseOrderItemStatus(str, Enum):
    PENDING = "PENDING"
    ORDERED = "ORDERED"
    PARTIAL = "PARTIAL"
    COMPLETED = "COMPLETED"


class PurchaseOrderItem(BaseModel):
    """One part line on a purchase order."""

    id: int | None = None
    order_id: int | None = None
    part_id: int
    order_qty: int = Field(gt=0)
    received_qty: int = Field(default=0, ge=0)
    unit_price: float = 0.0  # snapshot of Part.unit_price at order time
    total_price: float = 0.0
    status: PurchaseOrderItemStatus = PurchaseOrderItemStatus.PENDING
    notes: str | None = None

    @property
    def outstanding_qty(self) -> int:
        return max(0, self.order_qty - self.received_qty)

    def receipt_status(self) -> PurchaseOrderItemStatus:
        """Status derived from how much has been received so far."""
        if self.received_qty >= self.order_qty:
            return PurchaseOrderItemStatus.COMPLETED
        if self.received_qty > 0:
            return PurchaseOrderItemStatus.PARTIAL
        return PurchaseOrderItemStatus.PENDING


class PurchaseOrder(BaseModel):
    """Order placed with a single supplier."""

    id: int | None = None
    order_code: str
    supplier_id: int
    project: str | None = None
    sales_order_id: int | None = None
    order_date: date = Field(default_factory=date.today)
    expected_date: date | None = None
    actual_date: date | None = None
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    total_amount: float = 0.0
    notes: str | None = None
    created_by: str | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
