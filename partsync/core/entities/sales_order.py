"""Sales order entities (customer demand)."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class SalesOrderStatus(str, Enum):
    RECEIVED = "RECEIVED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SalesOrderItem(BaseModel):
    """Ordered quantity of one product."""

    id: int | None = None
    sales_order_id: int | None = None
    product_id: int
    order_qty: int = Field(gt=0)
    produced_qty: int = 0
    status: str = "PENDING"
    due_date: date | None = None  # overrides the order's due date when set


class SalesOrder(BaseModel):
    """Customer order for products."""

    id: int | None = None
    order_code: str
    customer_name: str
    project: str | None = None
    order_date: date = Field(default_factory=date.today)
    due_date: date | None = None
    status: SalesOrderStatus = SalesOrderStatus.RECEIVED
    notes: str | None = None
    items: list[SalesOrderItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def item_due_date(self, item: SalesOrderItem) -> date | None:
        return item.due_date or self.due_date
