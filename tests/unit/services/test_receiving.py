"""Unit tests for purchase order receipt."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from partsync.core.entities.inventory import MovementReference, ReferenceType, TransactionType
from partsync.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.exceptions import (
    InvalidStateError,
    PurchaseOrderNotFoundError,
    ValidationError,
)
from partsync.core.services.receiving import PurchaseOrderReceiver, ReceiptLine


def _order(status=PurchaseOrderStatus.ORDERED, received=(0, 0)):
    return PurchaseOrder(
        id=1,
        order_code="PO2501-0001",
        supplier_id=1,
        status=status,
        items=[
            PurchaseOrderItem(id=10, order_id=1, part_id=100, order_qty=50, received_qty=received[0]),
            PurchaseOrderItem(id=11, order_id=1, part_id=101, order_qty=20, received_qty=received[1]),
        ],
    )


@pytest.fixture
def orders():
    store = AsyncMock()
    store.update_item.side_effect = lambda item: item
    store.update_order.side_effect = lambda order: order
    return store


@pytest.fixture
def ledger():
    return AsyncMock()


@pytest.fixture
def receiver(orders, ledger, uow):
    return PurchaseOrderReceiver(orders, ledger, uow)


class TestReceive:
    async def test_partial_receipt(self, receiver, orders, ledger):
        orders.get_order.return_value = _order()

        order = await receiver.receive(1, [ReceiptLine(item_id=10, received_qty=30)], performed_by="bob")

        assert order.status == PurchaseOrderStatus.PARTIAL
        assert order.actual_date is None
        assert order.items[0].received_qty == 30
        assert order.items[0].status == PurchaseOrderItemStatus.PARTIAL
        ledger.apply_movement.assert_awaited_once_with(
            100,
            TransactionType.INBOUND,
            30,
            MovementReference(
                reference_type=ReferenceType.ORDER,
                reference_id="PO2501-0001",
                notes="PO PO2501-0001",
            ),
            "Purchase order receipt",
            "bob",
        )

    async def test_full_receipt_completes_order(self, receiver, orders):
        orders.get_order.return_value = _order(status=PurchaseOrderStatus.PARTIAL, received=(30, 0))

        order = await receiver.receive(
            1,
            [ReceiptLine(item_id=10, received_qty=20), ReceiptLine(item_id=11, received_qty=20)],
            receipt_date=date(2025, 2, 3),
        )

        assert order.status == PurchaseOrderStatus.RECEIVED
        assert order.actual_date == date(2025, 2, 3)
        assert all(i.status == PurchaseOrderItemStatus.COMPLETED for i in order.items)

    async def test_zero_quantity_line_books_nothing(self, receiver, orders, ledger):
        orders.get_order.return_value = _order()

        order = await receiver.receive(1, [ReceiptLine(item_id=11, received_qty=0)])

        ledger.apply_movement.assert_not_awaited()
        assert order.status == PurchaseOrderStatus.ORDERED

    async def test_over_receipt_rejected(self, receiver, orders, ledger, uow):
        orders.get_order.return_value = _order(received=(45, 0))

        with pytest.raises(ValidationError) as exc_info:
            await receiver.receive(1, [ReceiptLine(item_id=10, received_qty=6)])

        assert exc_info.value.details["field"] == "received_qty"
        ledger.apply_movement.assert_not_awaited()
        assert uow.rollbacks == 1

    @pytest.mark.parametrize(
        "status",
        [PurchaseOrderStatus.DRAFT, PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED],
    )
    async def test_status_must_allow_receipt(self, receiver, orders, status):
        orders.get_order.return_value = _order(status=status)

        with pytest.raises(InvalidStateError):
            await receiver.receive(1, [ReceiptLine(item_id=10, received_qty=1)])

    async def test_unknown_line(self, receiver, orders):
        orders.get_order.return_value = _order()
        with pytest.raises(ValidationError):
            await receiver.receive(1, [ReceiptLine(item_id=999, received_qty=1)])

    async def test_unknown_order(self, receiver, orders):
        orders.get_order.return_value = None
        with pytest.raises(PurchaseOrderNotFoundError):
            await receiver.receive(5, [ReceiptLine(item_id=10, received_qty=1)])

    async def test_requires_lines(self, receiver):
        with pytest.raises(ValidationError):
            await receiver.receive(1, [])
