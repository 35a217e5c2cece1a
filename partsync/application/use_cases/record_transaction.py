"""Record Transaction Use Case: manual stock movement through the ledger."""

from partsync.application.dto.requests import RecordTransactionRequest
from partsync.application.dto.responses import (
    InventoryResponse,
    RecordTransactionResponse,
    TransactionResponse,
)
from partsync.config import get_logger
from partsync.core.entities.inventory import MovementReference
from partsync.core.services.ledger import InventoryLedger, LedgerEntry

logger = get_logger(__name__)


class RecordTransactionUseCase:
    """Apply one INBOUND, OUTBOUND, ADJUSTMENT or TRANSFER movement."""

    def __init__(self, ledger: InventoryLedger | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> InventoryLedger:
        if self._ledger is None:
            from partsync.application.services import get_inventory_ledger

            self._ledger = await get_inventory_ledger()
        return self._ledger

    async def execute(
        self,
        request: RecordTransactionRequest,
        performed_by: str | None = None,
    ) -> LedgerEntry:
        ledger = await self._get_ledger()
        return await ledger.apply_movement(
            request.part_id,
            request.transaction_type,
            request.quantity,
            MovementReference(
                reference_type=request.reference_type,
                reference_id=request.reference_id,
                notes=request.notes,
            ),
            request.reason,
            performed_by,
            new_quantity=request.new_quantity,
        )

    def to_response(self, entry: LedgerEntry) -> RecordTransactionResponse:
        return RecordTransactionResponse(
            inventory=InventoryResponse.from_entity(entry.inventory),
            transaction=TransactionResponse.from_entity(entry.transaction),
        )
