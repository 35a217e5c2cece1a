"""
Picking Task Generator.

Builds a route-ordered pick list for a sales order and books stock out item
by item as it is picked.
"""

import re
from datetime import date, datetime

from partsync.config import get_logger, get_settings
from partsync.core.entities.inventory import MovementReference, ReferenceType, TransactionType
from partsync.core.entities.picking import (
    PickingItem,
    PickingItemStatus,
    PickingPriority,
    PickingTask,
    PickingTaskStatus,
)
from partsync.core.exceptions import (
    DuplicatePickingTaskError,
    InvalidStateError,
    PickingItemNotFoundError,
    PickingTaskNotFoundError,
    SalesOrderNotFoundError,
    ValidationError,
)
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.order_store import ISalesOrderStore
from partsync.core.interfaces.picking_store import IPickingStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.codes import PICKING_PREFIX, CodeGenerator
from partsync.core.services.demand import explode_sales_orders
from partsync.core.services.ledger import InventoryLedger

logger = get_logger(__name__)

UNKNOWN_LOCATION = "UNKNOWN"
PICK_REASON = "Picking issue"
PICK_REVERT_REASON = "Picking revert"

_LOCATION_RE = re.compile(r"^\s*([A-Za-z]+)\s*-\s*(\d+)\s*-\s*(\d+)\s*$")


def parse_location(location: str | None) -> tuple[str, int, int] | None:
    """'A-01-02' -> ('A', 1, 2); None when the code does not follow ZONE-ROW-SHELF."""
    if not location:
        return None
    match = _LOCATION_RE.match(location)
    if match is None:
        return None
    return match.group(1).upper(), int(match.group(2)), int(match.group(3))


def route_sort_key(location: str | None, part_code: str) -> tuple:
    """Zone, then row, then shelf; unparsable locations last; part code breaks ties."""
    parsed = parse_location(location)
    if parsed is None:
        return (1, "", 0, 0, part_code)
    return (0, *parsed, part_code)


class PickingService:
    def __init__(
        self,
        picking_store: IPickingStore,
        sales_order_store: ISalesOrderStore,
        master_store: IMasterDataStore,
        ledger: InventoryLedger,
        unit_of_work: IUnitOfWork,
        codes: CodeGenerator,
        high_priority_days: int | None = None,
    ) -> None:
        self._picking = picking_store
        self._sales_orders = sales_order_store
        self._master = master_store
        self._ledger = ledger
        self._uow = unit_of_work
        self._codes = codes
        self._high_priority_days = (
            high_priority_days
            if high_priority_days is not None
            else get_settings().mrp.picking_high_priority_days
        )

    async def create_from_sales_order(
        self,
        sales_order_id: int,
        assigned_to: str | None = None,
        today: date | None = None,
    ) -> PickingTask:
        """
        Generate the pick list of a sales order.

        Raises:
            SalesOrderNotFoundError: Unknown sales order.
            DuplicatePickingTaskError: The order already has a task.
            ValidationError: The order's products have no BOM parts.
        """
        today = today or date.today()
        sales_order = await self._sales_orders.get_sales_order(sales_order_id)
        if sales_order is None:
            raise SalesOrderNotFoundError(sales_order_id)

        existing = await self._picking.get_task_by_sales_order(sales_order_id)
        if existing is not None:
            raise DuplicatePickingTaskError(sales_order_id, existing.id)

        product_ids = sorted({item.product_id for item in sales_order.items})
        boms = await self._master.get_boms(product_ids) if product_ids else {}
        demand = explode_sales_orders([sales_order], boms)
        if not demand:
            raise ValidationError(
                "sales_order_id", "sales order has no BOM parts to pick", sales_order_id
            )

        parts = await self._master.get_parts(sorted(demand))
        lines = []
        for part_id, part_demand in demand.items():
            part = parts.get(part_id)
            part_code = part.part_code if part else str(part_id)
            location = (part.storage_location if part else None) or UNKNOWN_LOCATION
            lines.append((route_sort_key(location, part_code), part_id, part_code, location, part_demand.gross_requirement))
        lines.sort(key=lambda line: line[0])

        items = [
            PickingItem(
                part_id=part_id,
                part_code=part_code,
                storage_location=location,
                required_qty=required,
                sequence=sequence,
            )
            for sequence, (_, part_id, part_code, location, required) in enumerate(lines, start=1)
        ]

        priority = PickingPriority.NORMAL
        if sales_order.due_date is not None and (
            sales_order.due_date - today
        ).days <= self._high_priority_days:
            priority = PickingPriority.HIGH

        notes = f"Sales order {sales_order.order_code}"
        if sales_order.project:
            notes += f" - {sales_order.project}"

        async with self._uow.transaction():
            code = await self._codes.next_code(PICKING_PREFIX, today)
            task = PickingTask(
                task_code=code,
                sales_order_id=sales_order_id,
                priority=priority,
                assigned_to=assigned_to,
                notes=notes,
                items=items,
            )
            task.recount()
            task = await self._picking.create_task(task)

        logger.info(
            "picking_task_created",
            task_code=task.task_code,
            sales_order_id=sales_order_id,
            items=len(task.items),
            priority=task.priority.value,
        )
        return task

    async def get_task(self, task_id: int) -> PickingTask:
        task = await self._picking.get_task(task_id)
        if task is None:
            raise PickingTaskNotFoundError(task_id)
        return task

    async def _load(self, item_id: int) -> tuple[PickingTask, PickingItem]:
        item = await self._picking.get_item(item_id)
        if item is None:
            raise PickingItemNotFoundError(item_id)
        task = await self.get_task(item.picking_task_id)  # type: ignore[arg-type]
        return task, item

    @staticmethod
    def _require_open(task: PickingTask) -> None:
        if task.status == PickingTaskStatus.COMPLETED:
            raise InvalidStateError(
                "Picking task",
                task.id,  # type: ignore[arg-type]
                task.status.value,
                [PickingTaskStatus.PENDING.value, PickingTaskStatus.IN_PROGRESS.value],
            )

    @staticmethod
    def _require_item(item: PickingItem, allowed: list[PickingItemStatus]) -> None:
        if item.status not in allowed:
            raise InvalidStateError(
                "Picking item", item.id, item.status.value, [s.value for s in allowed]  # type: ignore[arg-type]
            )

    async def _save(self, task: PickingTask, item: PickingItem) -> PickingTask:
        await self._picking.update_item(item)
        task.items = [item if i.id == item.id else i for i in task.items]
        if task.status == PickingTaskStatus.PENDING:
            task.status = PickingTaskStatus.IN_PROGRESS
        task.recount()
        return await self._picking.update_task(task)

    async def scan_item(self, item_id: int) -> PickingTask:
        async with self._uow.transaction():
            task, item = await self._load(item_id)
            self._require_open(task)
            self._require_item(item, [PickingItemStatus.PENDING, PickingItemStatus.IN_PROGRESS])
            item.status = PickingItemStatus.IN_PROGRESS
            return await self._save(task, item)

    async def pick_item(
        self,
        item_id: int,
        picked_qty: int | None = None,
        performed_by: str | None = None,
    ) -> PickingTask:
        """Mark an item picked and issue its stock immediately (OUTBOUND, PICK)."""
        async with self._uow.transaction():
            task, item = await self._load(item_id)
            self._require_open(task)
            self._require_item(item, [PickingItemStatus.PENDING, PickingItemStatus.IN_PROGRESS])

            quantity = item.required_qty if picked_qty is None else picked_qty
            if quantity < 0 or quantity > item.required_qty:
                raise ValidationError(
                    "picked_qty", f"must be between 0 and {item.required_qty}", quantity
                )

            if quantity > 0:
                await self._ledger.apply_movement(
                    item.part_id,
                    TransactionType.OUTBOUND,
                    quantity,
                    MovementReference(
                        reference_type=ReferenceType.PICK,
                        reference_id=task.task_code,
                        notes=task.notes,
                    ),
                    PICK_REASON,
                    performed_by,
                )

            item.picked_qty = quantity
            item.status = PickingItemStatus.PICKED
            item.picked_at = datetime.utcnow()
            task = await self._save(task, item)

        logger.info(
            "picking_item_picked",
            task_code=task.task_code,
            part_id=item.part_id,
            picked_qty=quantity,
        )
        return task

    async def skip_item(self, item_id: int, notes: str | None = None) -> PickingTask:
        async with self._uow.transaction():
            task, item = await self._load(item_id)
            self._require_open(task)
            self._require_item(item, [PickingItemStatus.PENDING, PickingItemStatus.IN_PROGRESS])
            item.status = PickingItemStatus.SKIPPED
            if notes is not None:
                item.notes = notes
            return await self._save(task, item)

    async def _undo_item(
        self, task: PickingTask, item: PickingItem, performed_by: str | None
    ) -> None:
        if item.status == PickingItemStatus.PICKED and item.picked_qty > 0:
            await self._ledger.apply_movement(
                item.part_id,
                TransactionType.INBOUND,
                item.picked_qty,
                MovementReference(
                    reference_type=ReferenceType.PICK_REVERT,
                    reference_id=task.task_code,
                ),
                PICK_REVERT_REASON,
                performed_by,
            )
        item.status = PickingItemStatus.PENDING
        item.picked_qty = 0
        item.picked_at = None

    async def revert_item(self, item_id: int, performed_by: str | None = None) -> PickingTask:
        """Return a picked item's stock (INBOUND, PICK_REVERT) or un-skip it."""
        async with self._uow.transaction():
            task, item = await self._load(item_id)
            self._require_open(task)
            self._require_item(item, [PickingItemStatus.PICKED, PickingItemStatus.SKIPPED])
            await self._undo_item(task, item, performed_by)
            return await self._save(task, item)

    async def complete_task(self, task_id: int) -> PickingTask:
        """Close a task whose items are all picked or skipped. Stock was already issued."""
        async with self._uow.transaction():
            task = await self.get_task(task_id)
            self._require_open(task)
            pending = [i.id for i in task.items if not i.is_done]
            if pending:
                raise ValidationError(
                    "items", f"{len(pending)} item(s) not picked or skipped", pending
                )
            task.status = PickingTaskStatus.COMPLETED
            task.completed_at = datetime.utcnow()
            task.recount()
            task = await self._picking.update_task(task)

        logger.info("picking_task_completed", task_code=task.task_code)
        return task

    async def revert_task(self, task_id: int, performed_by: str | None = None) -> PickingTask:
        """
        Reopen a completed task.

        Picked items get their stock back and return to PENDING; skipped
        items return to PENDING without a ledger movement.
        """
        async with self._uow.transaction():
            task = await self.get_task(task_id)
            if task.status != PickingTaskStatus.COMPLETED:
                raise InvalidStateError(
                    "Picking task", task_id, task.status.value, [PickingTaskStatus.COMPLETED.value]
                )

            for item in task.items:
                if item.status in (PickingItemStatus.PICKED, PickingItemStatus.SKIPPED):
                    await self._undo_item(task, item, performed_by)
                    await self._picking.update_item(item)

            task.status = PickingTaskStatus.IN_PROGRESS
            task.completed_at = None
            task.recount()
            task = await self._picking.update_task(task)

        logger.info("picking_task_reverted", task_code=task.task_code)
        return task
