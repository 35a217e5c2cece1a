"""
MRP Netting Engine.

Pure netting arithmetic: no I/O, deterministic for a given demand, stock
snapshot and planning date.
"""

from datetime import date, timedelta

from partsync.config import get_logger, get_settings
from partsync.core.entities.mrp import (
    MrpResult,
    MrpUrgency,
    PartDemand,
    StockSnapshot,
)

logger = get_logger(__name__)


def classify_urgency(
    suggested_order_date: date | None,
    as_of: date,
    high_days: int = 7,
    medium_days: int = 14,
) -> MrpUrgency:
    """Urgency from days remaining until the order must be placed."""
    if suggested_order_date is None:
        return MrpUrgency.LOW
    days = (suggested_order_date - as_of).days
    if days <= 0:
        return MrpUrgency.CRITICAL
    if days <= high_days:
        return MrpUrgency.HIGH
    if days <= medium_days:
        return MrpUrgency.MEDIUM
    return MrpUrgency.LOW


def net_requirement(gross: int, current: int, incoming: int, safety_stock: int) -> int:
    available = current + incoming - safety_stock
    return max(0, gross - available)


def suggested_quantity(net: int, min_order_qty: int) -> int:
    if net <= 0:
        return 0
    return max(net, min_order_qty)


class MrpNettingEngine:
    """Turns gross demand and stock positions into order suggestions."""

    def __init__(self, high_days: int | None = None, medium_days: int | None = None) -> None:
        mrp_settings = get_settings().mrp
        self._high_days = high_days if high_days is not None else mrp_settings.high_days
        self._medium_days = (
            medium_days if medium_days is not None else mrp_settings.medium_days
        )

    def urgency(self, suggested_order_date: date | None, as_of: date) -> MrpUrgency:
        return classify_urgency(
            suggested_order_date, as_of, self._high_days, self._medium_days
        )

    def compute_net_requirements(
        self,
        demand: dict[int, PartDemand],
        snapshots: dict[int, StockSnapshot],
        as_of: date,
        include_reorder_point: bool = True,
    ) -> list[MrpResult]:
        """
        One result per part with demand, plus reorder-point triggers.

        Args:
            demand: Gross requirement per part.
            snapshots: Stock and planning parameters of every active part.
            as_of: Planning date for urgency.
            include_reorder_point: Also emit rows for parts without demand
                whose projected stock is below their reorder point.

        Returns:
            Results sorted by part ID.
        """
        results: list[MrpResult] = []

        for part_id in sorted(demand):
            part_demand = demand[part_id]
            snapshot = snapshots.get(part_id)
            if snapshot is None:
                logger.warning("mrp_demand_for_inactive_part", part_id=part_id)
                continue
            results.append(self._net_part(part_demand, snapshot, as_of))

        if include_reorder_point:
            for part_id in sorted(snapshots):
                if part_id in demand:
                    continue
                result = self._reorder_point_trigger(snapshots[part_id], as_of)
                if result is not None:
                    results.append(result)

        results.sort(key=lambda r: r.part_id)
        return results

    def _net_part(
        self, demand: PartDemand, snapshot: StockSnapshot, as_of: date
    ) -> MrpResult:
        net = net_requirement(
            demand.gross_requirement,
            snapshot.current_qty,
            snapshot.incoming_qty,
            snapshot.safety_stock,
        )
        suggested = suggested_quantity(net, snapshot.min_order_qty)

        order_date = None
        if net > 0 and demand.earliest_due_date is not None:
            order_date = demand.earliest_due_date - timedelta(days=snapshot.lead_time_days)

        return MrpResult(
            part_id=demand.part_id,
            sales_order_id=demand.primary_sales_order_id,
            contributing_sales_order_ids=list(demand.contributing_sales_orders),
            calculation_date=as_of,
            gross_requirement=demand.gross_requirement,
            current_stock=snapshot.current_qty,
            reserved_qty=snapshot.reserved_qty,
            incoming_qty=snapshot.incoming_qty,
            safety_stock=snapshot.safety_stock,
            net_requirement=net,
            suggested_order_qty=suggested,
            suggested_order_date=order_date,
            earliest_due_date=demand.earliest_due_date,
            urgency=self.urgency(order_date, as_of),
        )

    def _reorder_point_trigger(
        self, snapshot: StockSnapshot, as_of: date
    ) -> MrpResult | None:
        projected = snapshot.current_qty + snapshot.incoming_qty
        if snapshot.reorder_point <= 0 or projected >= snapshot.reorder_point:
            return None

        net = max(
            net_requirement(0, snapshot.current_qty, snapshot.incoming_qty, snapshot.safety_stock),
            snapshot.reorder_point - projected,
        )
        return MrpResult(
            part_id=snapshot.part_id,
            calculation_date=as_of,
            gross_requirement=0,
            current_stock=snapshot.current_qty,
            reserved_qty=snapshot.reserved_qty,
            incoming_qty=snapshot.incoming_qty,
            safety_stock=snapshot.safety_stock,
            net_requirement=net,
            suggested_order_qty=suggested_quantity(net, snapshot.min_order_qty),
            urgency=MrpUrgency.LOW,
        )

    def refresh_urgency(self, results: list[MrpResult], as_of: date) -> list[MrpResult]:
        """Recompute urgency against ``as_of``; stored urgency goes stale daily."""
        for result in results:
            result.urgency = self.urgency(result.suggested_order_date, as_of)
        return results
