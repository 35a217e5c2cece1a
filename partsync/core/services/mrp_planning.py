"""
MRP planning run.

Reads demand, supply and stock, nets them with MrpNettingEngine and replaces
the PENDING result set in a single transaction.
"""

from dataclasses import dataclass, field
from datetime import date

from partsync.config import get_logger
from partsync.core.entities.mrp import MrpResult, MrpStatus, MrpSummary, MrpUrgency, StockSnapshot
from partsync.core.exceptions import SalesOrderNotFoundError
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.mrp_store import IMrpResultStore
from partsync.core.interfaces.notifier import INotifier, NotificationEvent
from partsync.core.interfaces.order_store import ISalesOrderStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.demand import DemandAggregator
from partsync.core.services.ledger import InventoryLedger
from partsync.core.services.mrp_engine import MrpNettingEngine

logger = get_logger(__name__)


@dataclass
class MrpRunOutcome:
    """Persisted results of one planning run."""

    as_of: date
    results: list[MrpResult] = field(default_factory=list)
    sales_order_id: int | None = None

    @property
    def summary(self) -> MrpSummary:
        return MrpSummary.from_results(self.results)


class MrpPlanningService:
    """Runs full or sales-order-scoped MRP recomputation."""

    def __init__(
        self,
        aggregator: DemandAggregator,
        engine: MrpNettingEngine,
        master_store: IMasterDataStore,
        inventory_store: IInventoryStore,
        sales_order_store: ISalesOrderStore,
        mrp_store: IMrpResultStore,
        ledger: InventoryLedger,
        unit_of_work: IUnitOfWork,
        notifier: INotifier | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._engine = engine
        self._master = master_store
        self._inventory = inventory_store
        self._sales_orders = sales_order_store
        self._mrp = mrp_store
        self._ledger = ledger
        self._uow = unit_of_work
        self._notifier = notifier

    async def run(
        self,
        as_of: date | None = None,
        sales_order_id: int | None = None,
    ) -> MrpRunOutcome:
        """
        Recompute MRP results.

        A full run replaces every PENDING result. A run scoped to one sales
        order replaces only that order's PENDING results; ORDERED results
        always survive.
        """
        as_of = as_of or date.today()
        logger.info("mrp_run_started", as_of=str(as_of), sales_order_id=sales_order_id)

        try:
            outcome = await self._run(as_of, sales_order_id)
        except Exception as e:
            logger.error("mrp_run_failed", sales_order_id=sales_order_id, error=str(e))
            await self._notify(
                NotificationEvent(
                    event_type="mrp.run",
                    title="MRP run failed",
                    message=str(e),
                    success=False,
                    payload={"sales_order_id": sales_order_id},
                )
            )
            raise

        summary = outcome.summary
        logger.info(
            "mrp_run_complete",
            results=summary.total_results,
            critical=summary.critical_count,
            parts_needing_order=summary.parts_needing_order,
        )
        await self._notify(
            NotificationEvent(
                event_type="mrp.run",
                title="MRP run completed",
                message=(
                    f"{summary.total_results} parts planned, "
                    f"{summary.parts_needing_order} need ordering"
                ),
                payload=summary.model_dump(),
            )
        )
        return outcome

    async def _run(self, as_of: date, sales_order_id: int | None) -> MrpRunOutcome:
        scope = None
        if sales_order_id is not None:
            if await self._sales_orders.get_sales_order(sales_order_id) is None:
                raise SalesOrderNotFoundError(sales_order_id)
            scope = [sales_order_id]

        demand = await self._aggregator.aggregate_demand(as_of, scope)
        incoming = await self._aggregator.incoming_supply()
        snapshots = await self._snapshots(incoming)

        results = self._engine.compute_net_requirements(
            demand, snapshots, as_of, include_reorder_point=scope is None
        )
        if sales_order_id is not None:
            for result in results:
                result.sales_order_id = sales_order_id

        async with self._uow.transaction():
            saved = await self._mrp.replace_pending(results, sales_order_id)
            await self._ledger.sync_incoming(incoming)

        return MrpRunOutcome(as_of=as_of, results=saved, sales_order_id=sales_order_id)

    async def _snapshots(self, incoming: dict[int, int]) -> dict[int, StockSnapshot]:
        parts = await self._master.list_parts(active_only=True)
        inventories = await self._inventory.get_inventories([p.id for p in parts if p.id])

        snapshots: dict[int, StockSnapshot] = {}
        for part in parts:
            if part.id is None:
                continue
            inventory = inventories.get(part.id)
            snapshots[part.id] = StockSnapshot(
                part_id=part.id,
                current_qty=inventory.current_qty if inventory else 0,
                reserved_qty=inventory.reserved_qty if inventory else 0,
                incoming_qty=incoming.get(part.id, 0),
                safety_stock=part.safety_stock,
                reorder_point=part.reorder_point,
                min_order_qty=part.min_order_qty,
                lead_time_days=part.lead_time_days,
            )
        return snapshots

    async def list_results(
        self,
        status: MrpStatus | None = None,
        urgency: MrpUrgency | None = None,
        only_needs_order: bool = False,
        as_of: date | None = None,
    ) -> list[MrpResult]:
        """Stored results with urgency recomputed for ``as_of`` (default today)."""
        results = await self._mrp.list_results(status=status)
        results = self._engine.refresh_urgency(results, as_of or date.today())
        if urgency is not None:
            results = [r for r in results if r.urgency == urgency]
        if only_needs_order:
            results = [r for r in results if r.needs_order]
        return results

    async def _notify(self, event: NotificationEvent) -> None:
        if self._notifier is not None:
            await self._notifier.notify(event)
