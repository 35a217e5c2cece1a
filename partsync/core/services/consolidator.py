"""
Order Consolidator.

Groups selected parts by (supplier, project) and creates one purchase order
per group. The project is the one of the sales order a selection comes from. Each group commits on its own; a failing group is reported and
does not undo the groups already created.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta

from partsync.config import get_logger, get_settings
from partsync.core.entities.mrp import MrpResult, MrpStatus
from partsync.core.entities.part import Part, Supplier
from partsync.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.exceptions import (
    MissingSupplierError,
    MrpResultNotFoundError,
    PartNotFoundError,
    PartSyncError,
    SalesOrderNotFoundError,
    ValidationError,
)
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.mrp_store import IMrpResultStore
from partsync.core.interfaces.notifier import INotifier, NotificationEvent
from partsync.core.interfaces.order_store import IPurchaseOrderStore, ISalesOrderStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.codes import PURCHASE_ORDER_PREFIX, CodeGenerator

logger = get_logger(__name__)

NO_PROJECT = "none"


@dataclass
class OrderSelection:
    """A part (and quantity) picked for ordering, usually from an MRP row."""

    part_id: int
    order_qty: int
    sales_order_id: int | None = None
    mrp_result_id: int | None = None
    project: str | None = None


@dataclass
class ConsolidationOptions:
    project: str | None = None
    sales_order_id: int | None = None
    order_date: date | None = None
    expected_date: date | None = None
    skip_draft: bool = False
    notes: str | None = None
    created_by: str | None = None


@dataclass
class FailedGroup:
    supplier_id: int
    project: str | None
    part_ids: list[int]
    error_code: str
    message: str


@dataclass
class SkippedSelection:
    part_id: int
    reason: str
    mrp_result_ids: list[int] = field(default_factory=list)


@dataclass
class ConsolidationResult:
    purchase_orders: list[PurchaseOrder] = field(default_factory=list)
    failed_groups: list[FailedGroup] = field(default_factory=list)
    skipped: list[SkippedSelection] = field(default_factory=list)

    @property
    def total_orders(self) -> int:
        return len(self.purchase_orders)

    @property
    def total_items(self) -> int:
        return sum(len(o.items) for o in self.purchase_orders)

    @property
    def total_amount(self) -> float:
        return sum(o.total_amount for o in self.purchase_orders)


@dataclass
class _GroupLine:
    part: Part
    order_qty: int
    mrp_result_ids: list[int] = field(default_factory=list)
    sales_order_ids: set[int] = field(default_factory=set)


def group_key(supplier_id: int, project: str | None) -> tuple[int, str]:
    return supplier_id, project or NO_PROJECT


def auto_notes(item_count: int, project: str | None) -> str:
    notes = f"Auto-generated from MRP ({item_count} items)"
    if project:
        notes += f" - {project}"
    return notes


class OrderConsolidator:
    """Creates purchase orders from MRP selections."""

    def __init__(
        self,
        master_store: IMasterDataStore,
        purchase_order_store: IPurchaseOrderStore,
        mrp_store: IMrpResultStore,
        sales_order_store: ISalesOrderStore,
        unit_of_work: IUnitOfWork,
        codes: CodeGenerator,
        notifier: INotifier | None = None,
        default_lead_time_days: int | None = None,
    ) -> None:
        self._master = master_store
        self._purchase_orders = purchase_order_store
        self._mrp = mrp_store
        self._sales_orders = sales_order_store
        self._uow = unit_of_work
        self._codes = codes
        self._notifier = notifier
        self._default_lead_time = (
            default_lead_time_days
            if default_lead_time_days is not None
            else get_settings().mrp.default_supplier_lead_time_days
        )

    async def consolidate(
        self,
        selections: list[OrderSelection],
        options: ConsolidationOptions | None = None,
    ) -> ConsolidationResult:
        """
        Create one purchase order per (supplier, project) group.

        Raises:
            ValidationError: Empty selection or non-positive quantity.
            PartNotFoundError: A selected part does not exist.
            MissingSupplierError: A selected part has no supplier.
            MrpResultNotFoundError: A referenced MRP result does not exist.
            SalesOrderNotFoundError: A referenced sales order does not exist.
        """
        options = options or ConsolidationOptions()
        if not selections:
            raise ValidationError("items", "at least one item is required")
        for selection in selections:
            if selection.order_qty <= 0:
                raise ValidationError("order_qty", "must be positive", selection.order_qty)

        # Every precondition is checked before the first write.
        parts = await self._master.get_parts(sorted({s.part_id for s in selections}))
        for selection in selections:
            part = parts.get(selection.part_id)
            if part is None:
                raise PartNotFoundError(selection.part_id)
            if part.supplier_id is None:
                raise MissingSupplierError(part.id or selection.part_id, part.part_code)

        suppliers = await self._master.get_suppliers(
            sorted({p.supplier_id for p in parts.values() if p.supplier_id is not None})
        )

        matches = [await self._matched_results(s, options) for s in selections]
        origins = [
            self._origin_sales_order_id(s, options, matched)
            for s, matched in zip(selections, matches)
        ]
        explicit_ids = {s.sales_order_id or options.sales_order_id for s in selections} - {None}
        sales_orders = await self._sales_orders.get_sales_orders(
            sorted({so_id for so_id in origins if so_id is not None})
        )
        for so_id in sorted(explicit_ids):
            if so_id not in sales_orders:
                raise SalesOrderNotFoundError(so_id)

        result = ConsolidationResult()
        groups: dict[tuple[int, str], dict[int, _GroupLine]] = {}

        for selection, matched, origin in zip(selections, matches, origins):
            if matched and all(r.status == MrpStatus.ORDERED for r in matched):
                result.skipped.append(
                    SkippedSelection(
                        part_id=selection.part_id,
                        reason="already ordered",
                        mrp_result_ids=[r.id for r in matched if r.id is not None],
                    )
                )
                continue

            part = parts[selection.part_id]
            sales_order = sales_orders.get(origin) if origin is not None else None
            project = (
                selection.project
                or options.project
                or (sales_order.project if sales_order is not None else None)
            )
            key = group_key(part.supplier_id, project)  # type: ignore[arg-type]
            lines = groups.setdefault(key, {})
            line = lines.get(part.id)  # type: ignore[arg-type]
            if line is None:
                line = _GroupLine(part=part, order_qty=0)
                lines[part.id] = line  # type: ignore[index]
            line.order_qty += selection.order_qty
            line.mrp_result_ids.extend(
                r.id for r in matched if r.status == MrpStatus.PENDING and r.id is not None
            )
            if origin is not None:
                line.sales_order_ids.add(origin)

        for key in sorted(groups):
            supplier_id, project_key = key
            project = None if project_key == NO_PROJECT else project_key
            lines = list(groups[key].values())
            try:
                order = await self._create_group_order(
                    suppliers.get(supplier_id), supplier_id, project, lines, options
                )
            except Exception as e:
                code = e.code if isinstance(e, PartSyncError) else e.__class__.__name__
                logger.error(
                    "po_group_failed",
                    supplier_id=supplier_id,
                    project=project,
                    error=str(e),
                )
                result.failed_groups.append(
                    FailedGroup(
                        supplier_id=supplier_id,
                        project=project,
                        part_ids=[line.part.id for line in lines if line.part.id],
                        error_code=code,
                        message=str(e),
                    )
                )
                continue

            result.purchase_orders.append(order)
            await self._notify_created(order)

        logger.info(
            "mrp_consolidation_complete",
            orders=result.total_orders,
            items=result.total_items,
            failed_groups=len(result.failed_groups),
            skipped=len(result.skipped),
        )
        return result

    async def _matched_results(
        self, selection: OrderSelection, options: ConsolidationOptions
    ) -> list[MrpResult]:
        if selection.mrp_result_id is not None:
            mrp_result = await self._mrp.get_result(selection.mrp_result_id)
            if mrp_result is None:
                raise MrpResultNotFoundError(selection.mrp_result_id)
            if mrp_result.part_id != selection.part_id:
                raise ValidationError(
                    "mrp_result_id",
                    f"MRP result belongs to part {mrp_result.part_id}",
                    selection.mrp_result_id,
                )
            return [mrp_result]

        sales_order_id = selection.sales_order_id or options.sales_order_id
        return await self._mrp.find_by_part(selection.part_id, sales_order_id)

    @staticmethod
    def _origin_sales_order_id(
        selection: OrderSelection, options: ConsolidationOptions, matched: list[MrpResult]
    ) -> int | None:
        """Explicit sales order first, else the one a picked MRP row was planned for."""
        sales_order_id = selection.sales_order_id or options.sales_order_id
        if sales_order_id is None and selection.mrp_result_id is not None and matched:
            sales_order_id = matched[0].sales_order_id
        return sales_order_id

    async def _create_group_order(
        self,
        supplier: Supplier | None,
        supplier_id: int,
        project: str | None,
        lines: list[_GroupLine],
        options: ConsolidationOptions,
    ) -> PurchaseOrder:
        order_date = options.order_date or date.today()
        lead_time = (
            supplier.lead_time_days
            if supplier is not None and supplier.lead_time_days is not None
            else self._default_lead_time
        )
        expected_date = options.expected_date or order_date + timedelta(days=lead_time)

        item_status = (
            PurchaseOrderItemStatus.ORDERED if options.skip_draft else PurchaseOrderItemStatus.PENDING
        )
        items = [
            PurchaseOrderItem(
                part_id=line.part.id,  # type: ignore[arg-type]
                order_qty=line.order_qty,
                unit_price=line.part.unit_price,
                total_price=line.order_qty * line.part.unit_price,
                status=item_status,
            )
            for line in sorted(lines, key=lambda ln: ln.part.part_code)
        ]

        sales_order_ids = set().union(*(line.sales_order_ids for line in lines))
        sales_order_id = options.sales_order_id
        if sales_order_id is None and len(sales_order_ids) == 1:
            sales_order_id = next(iter(sales_order_ids))

        async with self._uow.transaction():
            code = await self._codes.next_code(PURCHASE_ORDER_PREFIX, order_date)
            order = await self._purchase_orders.create_order(
                PurchaseOrder(
                    order_code=code,
                    supplier_id=supplier_id,
                    project=project,
                    sales_order_id=sales_order_id,
                    order_date=order_date,
                    expected_date=expected_date,
                    status=(
                        PurchaseOrderStatus.ORDERED
                        if options.skip_draft
                        else PurchaseOrderStatus.DRAFT
                    ),
                    total_amount=sum(i.total_price for i in items),
                    notes=options.notes or auto_notes(len(items), project),
                    created_by=options.created_by,
                    items=items,
                )
            )
            result_ids = [rid for line in lines for rid in line.mrp_result_ids]
            if result_ids:
                await self._mrp.mark_ordered(result_ids)

        logger.info(
            "purchase_order_created",
            order_code=order.order_code,
            supplier_id=supplier_id,
            project=project,
            items=len(order.items),
            total_amount=order.total_amount,
        )
        return order

    async def _notify_created(self, order: PurchaseOrder) -> None:
        if self._notifier is None:
            return
        await self._notifier.notify(
            NotificationEvent(
                event_type="order.created",
                title="Purchase order created",
                message=f"{order.order_code} ({len(order.items)} items)",
                payload={
                    "order_id": order.id,
                    "order_code": order.order_code,
                    "supplier_id": order.supplier_id,
                    "total_amount": order.total_amount,
                },
            )
        )
