"""Purchase order receipt: books incoming goods through the ledger."""

from dataclasses import dataclass
from datetime import date

from partsync.config import get_logger
from partsync.core.entities.inventory import MovementReference, ReferenceType, TransactionType
from partsync.core.entities.purchase_order import (
    RECEIVABLE_STATUSES,
    PurchaseOrder,
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.exceptions import (
    InvalidStateError,
    PurchaseOrderNotFoundError,
    ValidationError,
)
from partsync.core.interfaces.order_store import IPurchaseOrderStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.ledger import InventoryLedger

logger = get_logger(__name__)

RECEIPT_REASON = "Purchase order receipt"


@dataclass
class ReceiptLine:
    """Quantity arriving now for one order line (added to what came before)."""

    item_id: int
    received_qty: int


class PurchaseOrderReceiver:
    def __init__(
        self,
        purchase_order_store: IPurchaseOrderStore,
        ledger: InventoryLedger,
        unit_of_work: IUnitOfWork,
    ) -> None:
        self._orders = purchase_order_store
        self._ledger = ledger
        self._uow = unit_of_work

    async def receive(
        self,
        order_id: int,
        lines: list[ReceiptLine],
        performed_by: str | None = None,
        receipt_date: date | None = None,
    ) -> PurchaseOrder:
        """
        Receive goods against a purchase order in one transaction.

        Cumulative received quantity may never exceed the ordered quantity.
        The order becomes RECEIVED once every line is complete, PARTIAL while
        anything has arrived.
        """
        if not lines:
            raise ValidationError("items", "at least one receipt line is required")

        async with self._uow.transaction():
            order = await self._orders.get_order(order_id)
            if order is None:
                raise PurchaseOrderNotFoundError(order_id)
            if order.status not in RECEIVABLE_STATUSES:
                raise InvalidStateError(
                    "Purchase order",
                    order_id,
                    order.status.value,
                    [s.value for s in RECEIVABLE_STATUSES],
                )

            items_by_id = {item.id: item for item in order.items}
            for line in lines:
                item = items_by_id.get(line.item_id)
                if item is None:
                    raise ValidationError(
                        "item_id", f"not a line of order {order.order_code}", line.item_id
                    )
                if line.received_qty < 0:
                    raise ValidationError("received_qty", "must be >= 0", line.received_qty)

                cumulative = item.received_qty + line.received_qty
                if cumulative > item.order_qty:
                    raise ValidationError(
                        "received_qty",
                        (
                            f"exceeds ordered quantity (ordered {item.order_qty}, "
                            f"received {item.received_qty}, now {line.received_qty})"
                        ),
                        line.received_qty,
                    )

                item.received_qty = cumulative
                item.status = item.receipt_status()
                await self._orders.update_item(item)

                if line.received_qty > 0:
                    await self._ledger.apply_movement(
                        item.part_id,
                        TransactionType.INBOUND,
                        line.received_qty,
                        MovementReference(
                            reference_type=ReferenceType.ORDER,
                            reference_id=order.order_code,
                            notes=f"PO {order.order_code}",
                        ),
                        RECEIPT_REASON,
                        performed_by,
                    )

            if all(i.status == PurchaseOrderItemStatus.COMPLETED for i in order.items):
                order.status = PurchaseOrderStatus.RECEIVED
                order.actual_date = receipt_date or date.today()
            elif any(i.received_qty > 0 for i in order.items):
                order.status = PurchaseOrderStatus.PARTIAL
            order = await self._orders.update_order(order)

        logger.info(
            "purchase_order_received",
            order_code=order.order_code,
            status=order.status.value,
            lines=len(lines),
        )
        return order

    async def get_order(self, order_id: int) -> PurchaseOrder:
        order = await self._orders.get_order(order_id)
        if order is None:
            raise PurchaseOrderNotFoundError(order_id)
        return order
