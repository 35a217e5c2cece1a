"""Receive Purchase Order Use Case: INBOUND movements for delivered goods."""

from partsync.application.dto.requests import ReceivePurchaseOrderRequest
from partsync.application.dto.responses import PurchaseOrderResponse
from partsync.config import get_logger
from partsync.core.entities.purchase_order import PurchaseOrder
from partsync.core.services.receiving import PurchaseOrderReceiver, ReceiptLine

logger = get_logger(__name__)


class ReceivePurchaseOrderUseCase:
    """Receive goods against a purchase order."""

    def __init__(self, receiver: PurchaseOrderReceiver | None = None):
        self._receiver = receiver

    async def _get_receiver(self) -> PurchaseOrderReceiver:
        if self._receiver is None:
            from partsync.application.services import get_purchase_order_receiver

            self._receiver = await get_purchase_order_receiver()
        return self._receiver

    async def execute(
        self,
        order_id: int,
        request: ReceivePurchaseOrderRequest,
        performed_by: str | None = None,
    ) -> PurchaseOrder:
        receiver = await self._get_receiver()
        return await receiver.receive(
            order_id,
            [ReceiptLine(item_id=i.item_id, received_qty=i.received_qty) for i in request.items],
            performed_by=performed_by,
            receipt_date=request.receipt_date,
        )

    async def get_order(self, order_id: int) -> PurchaseOrder:
        receiver = await self._get_receiver()
        return await receiver.get_order(order_id)

    def to_response(self, order: PurchaseOrder) -> PurchaseOrderResponse:
        return PurchaseOrderResponse.from_entity(order)
