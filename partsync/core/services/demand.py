"""
Demand Aggregator.

Explodes open sales-order lines through product BOMs into gross part
requirements, and sums unreceived purchase-order quantities into incoming
supply.
"""

from datetime import date

from partsync.config import get_logger, get_settings
from partsync.core.entities.mrp import PartDemand
from partsync.core.entities.part import BomItem
from partsync.core.entities.sales_order import SalesOrder
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.order_store import IPurchaseOrderStore, ISalesOrderStore

logger = get_logger(__name__)


def explode_sales_orders(
    orders: list[SalesOrder],
    boms: dict[int, list[BomItem]],
) -> dict[int, PartDemand]:
    """
    Gross requirement per part for the given sales orders.

    Each (order line, BOM line) pair contributes
    ``ceil(order_qty * quantity_per_unit * (1 + loss_rate))``.
    """
    demand: dict[int, PartDemand] = {}

    for order in orders:
        for item in order.items:
            due = order.item_due_date(item)
            for bom_item in boms.get(item.product_id, []):
                if not bom_item.is_active:
                    continue
                required = bom_item.required_quantity(item.order_qty)
                if required <= 0:
                    continue

                entry = demand.get(bom_item.part_id)
                if entry is None:
                    entry = PartDemand(part_id=bom_item.part_id)
                    demand[bom_item.part_id] = entry

                entry.gross_requirement += required
                if order.id is not None and order.id not in entry.contributing_sales_orders:
                    entry.contributing_sales_orders.append(order.id)
                if due is not None and (
                    entry.earliest_due_date is None or due < entry.earliest_due_date
                ):
                    entry.earliest_due_date = due
                    entry.primary_sales_order_id = order.id
                elif entry.primary_sales_order_id is None and entry.earliest_due_date is None:
                    entry.primary_sales_order_id = order.id

    for entry in demand.values():
        entry.contributing_sales_orders.sort()
    return demand


class DemandAggregator:
    """Reads open orders and turns them into per-part demand and supply."""

    def __init__(
        self,
        sales_order_store: ISalesOrderStore,
        master_store: IMasterDataStore,
        purchase_order_store: IPurchaseOrderStore,
        open_statuses: list[str] | None = None,
        incoming_statuses: list[str] | None = None,
    ) -> None:
        mrp_settings = get_settings().mrp
        self._sales_orders = sales_order_store
        self._master = master_store
        self._purchase_orders = purchase_order_store
        self._open_statuses = open_statuses or mrp_settings.open_sales_order_statuses
        self._incoming_statuses = (
            incoming_statuses or mrp_settings.incoming_order_statuses
        )

    async def aggregate_demand(
        self,
        as_of: date | None = None,
        sales_order_ids: list[int] | None = None,
    ) -> dict[int, PartDemand]:
        """
        Gross requirement per part over open sales orders.

        Args:
            as_of: Planning date, recorded in logs.
            sales_order_ids: Restrict to these orders (still only open ones).
        """
        orders = await self._sales_orders.list_sales_orders(
            self._open_statuses, sales_order_ids
        )
        product_ids = sorted({item.product_id for o in orders for item in o.items})
        boms = await self._master.get_boms(product_ids) if product_ids else {}

        demand = explode_sales_orders(orders, boms)
        logger.info(
            "demand_aggregated",
            as_of=str(as_of or date.today()),
            sales_orders=len(orders),
            parts=len(demand),
            gross_total=sum(d.gross_requirement for d in demand.values()),
        )
        return demand

    async def incoming_supply(self) -> dict[int, int]:
        """Unreceived quantity per part on approved/ordered/partial POs."""
        incoming = await self._purchase_orders.incoming_by_part(self._incoming_statuses)
        return {part_id: qty for part_id, qty in incoming.items() if qty > 0}
