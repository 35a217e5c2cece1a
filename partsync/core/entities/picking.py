"""Warehouse picking entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class PickingPriority(str, Enum):
    HIGH = "HIGH"
    NORMAL = "NORMAL"


class PickingTaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PickingItemStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"  # scanned, not yet picked
    PICKED = "PICKED"
    SKIPPED = "SKIPPED"


class PickingItem(BaseModel):
    """One part to collect, in route order."""

    id: int | None = None
    picking_task_id: int | None = None
    part_id: int
    part_code: str | None = None
    storage_location: str | None = None
    required_qty: int = Field(gt=0)
    picked_qty: int = Field(default=0, ge=0)
    sequence: int
    status: PickingItemStatus = PickingItemStatus.PENDING
    notes: str | None = None
    picked_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status in (PickingItemStatus.PICKED, PickingItemStatus.SKIPPED)


class PickingTask(BaseModel):
    """Pick list generated for one sales order."""

    id: int | None = None
    task_code: str
    sales_order_id: int
    priority: PickingPriority = PickingPriority.NORMAL
    status: PickingTaskStatus = PickingTaskStatus.PENDING
    total_items: int = 0
    picked_items: int = 0
    assigned_to: str | None = None
    notes: str | None = None
    items: list[PickingItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None

    def recount(self) -> None:
        self.total_items = len(self.items)
        self.picked_items = sum(
            1 for i in self.items if i.status == PickingItemStatus.PICKED
        )
