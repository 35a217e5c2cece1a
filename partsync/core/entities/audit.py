"""Physical stock audit entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class AuditType(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
    SPOT = "SPOT"


class AuditStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class DiscrepancyType(str, Enum):
    OVERAGE = "OVERAGE"
    SHORTAGE = "SHORTAGE"


class DiscrepancyStatus(str, Enum):
    OPEN = "OPEN"
    INVESTIGATING = "INVESTIGATING"
    RESOLVED = "RESOLVED"


class AuditItem(BaseModel):
    """Counted line for one part."""

    id: int | None = None
    audit_id: int | None = None
    part_id: int
    system_qty: int = Field(ge=0)  # snapshot taken when the audit was created
    counted_qty: int | None = Field(default=None, ge=0)
    notes: str | None = None
    counted_at: datetime | None = None
    adjustment_transaction_id: int | None = None

    @property
    def is_counted(self) -> bool:
        return self.counted_qty is not None

    @property
    def discrepancy(self) -> int | None:
        """counted - system, or None before counting."""
        if self.counted_qty is None:
            return None
        return self.counted_qty - self.system_qty


class AuditRecord(BaseModel):
    """Stock-take header."""

    id: int | None = None
    audit_code: str
    audit_date: date = Field(default_factory=date.today)
    audit_type: AuditType = AuditType.SPOT
    status: AuditStatus = AuditStatus.PLANNED
    notes: str | None = None
    performed_by: str | None = None
    total_items: int = 0
    matched_items: int = 0
    discrepancy_items: int = 0
    inventory_adjusted: bool = False
    completed_at: datetime | None = None
    items: list[AuditItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def recount(self) -> None:
        """Recompute counters from the counted items."""
        counted = [i for i in self.items if i.is_counted]
        self.total_items = len(counted)
        self.matched_items = sum(1 for i in counted if i.discrepancy == 0)
        self.discrepancy_items = self.total_items - self.matched_items


class DiscrepancyLog(BaseModel):
    """Record of a non-zero audit discrepancy and its handling."""

    id: int | None = None
    audit_id: int
    audit_item_id: int
    part_id: int
    discrepancy_type: DiscrepancyType
    system_qty: int
    counted_qty: int
    discrepancy: int
    status: DiscrepancyStatus = DiscrepancyStatus.OPEN
    resolution: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
