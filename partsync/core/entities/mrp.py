"""MRP planning entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MrpStatus(str, Enum):
    PENDING = "PENDING"
    ORDERED = "ORDERED"


class MrpUrgency(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class PartDemand(BaseModel):
    """Gross requirement of one part aggregated over open sales orders."""

    part_id: int
    gross_requirement: int = 0
    earliest_due_date: date | None = None
    contributing_sales_orders: list[int] = Field(default_factory=list)
    # Sales order whose line carries the earliest due date
    primary_sales_order_id: int | None = None


class StockSnapshot(BaseModel):
    """Per-part stock and planning parameters read before netting."""

    part_id: int
    current_qty: int = 0
    reserved_qty: int = 0
    incoming_qty: int = 0
    safety_stock: int = 0
    reorder_point: int = 0
    min_order_qty: int = 1
    lead_time_days: int = 0


class MrpResult(BaseModel):
    """Net requirement and order suggestion for one part."""

    id: int | None = None
    part_id: int
    sales_order_id: int | None = None
    contributing_sales_order_ids: list[int] = Field(default_factory=list)
    calculation_date: date = Field(default_factory=date.today)
    gross_requirement: int = 0
    current_stock: int = 0
    reserved_qty: int = 0
    incoming_qty: int = 0
    safety_stock: int = 0
    net_requirement: int = 0
    suggested_order_qty: int = 0
    suggested_order_date: date | None = None
    earliest_due_date: date | None = None
    urgency: MrpUrgency = MrpUrgency.LOW
    status: MrpStatus = MrpStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def needs_order(self) -> bool:
        return self.net_requirement > 0


class MrpSummary(BaseModel):
    """Counts across a set of MRP results."""

    total_results: int = 0
    critical_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    total_recommended_qty: int = 0
    parts_needing_order: int = 0

    @classmethod
    def from_results(cls, results: list[MrpResult]) -> "MrpSummary":
        counts = {urgency: 0 for urgency in MrpUrgency}
        for result in results:
            counts[result.urgency] += 1
        return cls(
            total_results=len(results),
            critical_count=counts[MrpUrgency.CRITICAL],
            high_count=counts[MrpUrgency.HIGH],
            medium_count=counts[MrpUrgency.MEDIUM],
            low_count=counts[MrpUrgency.LOW],
            total_recommended_qty=sum(r.suggested_order_qty for r in results),
            parts_needing_order=sum(1 for r in results if r.needs_order),
        )
