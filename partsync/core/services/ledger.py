"""
Inventory Ledger.

The only component allowed to change Inventory.current_qty. Every change is
paired with an append-only Transaction row inside one unit of work, so

    current_qty == sum of signed transaction deltas

holds for every part at every commit.
"""

from dataclasses import dataclass
from datetime import datetime

from partsync.config import get_logger
from partsync.core.entities.inventory import (
    TRANSACTION_CODE_PREFIX,
    Inventory,
    LowStockAlert,
    MovementReference,
    ReferenceType,
    Transaction,
    TransactionType,
)
from partsync.core.exceptions import (
    InsufficientStockError,
    PartNotFoundError,
    ValidationError,
)
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.codes import CodeGenerator

logger = get_logger(__name__)


@dataclass
class LedgerEntry:
    """Inventory row after a movement and the transaction that recorded it."""

    inventory: Inventory
    transaction: Transaction


def plan_movement(
    part_id: int,
    before_qty: int,
    transaction_type: TransactionType,
    quantity: int = 0,
    new_quantity: int | None = None,
) -> tuple[int, int]:
    """
    Compute (recorded quantity, after quantity) for a movement.

    Pure; raises before anything is written.
    """
    if transaction_type == TransactionType.ADJUSTMENT:
        if new_quantity is None:
            raise ValidationError("new_quantity", "required for ADJUSTMENT")
        if new_quantity < 0:
            raise ValidationError("new_quantity", "must be >= 0", new_quantity)
        return abs(new_quantity - before_qty), new_quantity

    if quantity <= 0:
        raise ValidationError("quantity", "must be a positive integer", quantity)

    if transaction_type == TransactionType.INBOUND:
        return quantity, before_qty + quantity

    if transaction_type == TransactionType.OUTBOUND:
        if before_qty - quantity < 0:
            raise InsufficientStockError(part_id, before_qty, quantity)
        return quantity, before_qty - quantity

    # TRANSFER moves stock between locations; on-hand total is unchanged.
    return quantity, before_qty


class InventoryLedger:
    """Applies stock movements atomically and keeps the transaction history."""

    def __init__(
        self,
        inventory_store: IInventoryStore,
        master_store: IMasterDataStore,
        unit_of_work: IUnitOfWork,
        codes: CodeGenerator,
    ) -> None:
        self._inventory = inventory_store
        self._master = master_store
        self._uow = unit_of_work
        self._codes = codes

    async def apply_movement(
        self,
        part_id: int,
        transaction_type: TransactionType,
        quantity: int = 0,
        reference: MovementReference | None = None,
        reason: str | None = None,
        performed_by: str | None = None,
        *,
        new_quantity: int | None = None,
    ) -> LedgerEntry:
        """
        Apply one movement.

        Args:
            part_id: Part whose stock changes.
            transaction_type: INBOUND, OUTBOUND, ADJUSTMENT or TRANSFER.
            quantity: Units moved; ignored for ADJUSTMENT.
            reference: Source document of the movement.
            reason: Free-text reason stored on the transaction.
            performed_by: User name for the audit trail.
            new_quantity: Target on-hand quantity for ADJUSTMENT.

        Raises:
            PartNotFoundError: Unknown part.
            InsufficientStockError: OUTBOUND would make stock negative.
            ValidationError: Non-positive quantity or missing new_quantity.
        """
        reference = reference or MovementReference()

        async with self._uow.transaction():
            part = await self._master.get_part(part_id)
            if part is None:
                raise PartNotFoundError(part_id)

            inventory = await self._inventory.get_inventory(part_id)
            if inventory is None:
                inventory = Inventory(part_id=part_id)
            before_qty = inventory.current_qty

            try:
                recorded_qty, after_qty = plan_movement(
                    part_id, before_qty, transaction_type, quantity, new_quantity
                )
            except InsufficientStockError:
                logger.warning(
                    "ledger_insufficient_stock",
                    part_id=part_id,
                    available=before_qty,
                    requested=quantity,
                )
                raise

            now = datetime.utcnow()
            inventory.current_qty = after_qty
            inventory.updated_at = now
            if transaction_type == TransactionType.INBOUND:
                inventory.last_inbound_date = now
            elif transaction_type == TransactionType.OUTBOUND:
                inventory.last_outbound_date = now
            elif reference.reference_type == ReferenceType.AUDIT:
                inventory.last_audit_date = now
            inventory = await self._inventory.save_inventory(inventory)

            code = await self._codes.next_code(
                TRANSACTION_CODE_PREFIX[transaction_type], now
            )
            transaction = await self._inventory.add_transaction(
                Transaction(
                    transaction_code=code,
                    part_id=part_id,
                    transaction_type=transaction_type,
                    quantity=recorded_qty,
                    before_qty=before_qty,
                    after_qty=after_qty,
                    reference_type=reference.reference_type,
                    reference_id=reference.reference_id,
                    reason=reason,
                    notes=reference.notes,
                    performed_by=performed_by,
                    transaction_date=now,
                )
            )

        logger.info(
            "ledger_movement_applied",
            transaction_code=transaction.transaction_code,
            part_id=part_id,
            type=transaction_type.value,
            quantity=recorded_qty,
            before_qty=before_qty,
            after_qty=after_qty,
            reference_type=reference.reference_type.value,
            reference_id=reference.reference_id,
        )
        return LedgerEntry(inventory=inventory, transaction=transaction)

    async def revert(
        self,
        transaction: Transaction,
        performed_by: str | None = None,
        reason: str | None = None,
    ) -> LedgerEntry:
        """
        Undo a movement by appending its opposite.

        The original row stays; history is never rewritten. ADJUSTMENT is
        undone by applying the inverse of its stored delta to the current
        quantity, so later movements are preserved.
        """
        reference = MovementReference(
            reference_type=transaction.reference_type.reverted(),
            reference_id=transaction.reference_id,
            notes=f"revert {transaction.transaction_code}",
        )
        reason = reason or f"Revert {transaction.transaction_code}"

        if transaction.transaction_type == TransactionType.INBOUND:
            return await self.apply_movement(
                transaction.part_id,
                TransactionType.OUTBOUND,
                transaction.quantity,
                reference,
                reason,
                performed_by,
            )
        if transaction.transaction_type == TransactionType.OUTBOUND:
            return await self.apply_movement(
                transaction.part_id,
                TransactionType.INBOUND,
                transaction.quantity,
                reference,
                reason,
                performed_by,
            )
        if transaction.transaction_type == TransactionType.TRANSFER:
            return await self.apply_movement(
                transaction.part_id,
                TransactionType.TRANSFER,
                transaction.quantity,
                reference,
                reason,
                performed_by,
            )

        async with self._uow.transaction():
            inventory = await self._inventory.get_inventory(transaction.part_id)
            current = inventory.current_qty if inventory else 0
            target = current - transaction.delta
            if target < 0:
                raise InsufficientStockError(
                    transaction.part_id, current, transaction.delta
                )
            return await self.apply_movement(
                transaction.part_id,
                TransactionType.ADJUSTMENT,
                reference=reference,
                reason=reason,
                performed_by=performed_by,
                new_quantity=target,
            )

    async def get_inventory(self, part_id: int) -> Inventory:
        """Inventory row of a part; a part never moved reads as zero stock."""
        inventory = await self._inventory.get_inventory(part_id)
        if inventory is None:
            if await self._master.get_part(part_id) is None:
                raise PartNotFoundError(part_id)
            inventory = Inventory(part_id=part_id)
        return inventory

    async def list_transactions(
        self, part_id: int | None = None, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        return await self._inventory.list_transactions(part_id, limit=limit, offset=offset)

    async def low_stock_alerts(self) -> list[LowStockAlert]:
        return await self._inventory.list_low_stock()

    async def sync_incoming(self, incoming: dict[int, int]) -> None:
        """Refresh the informational incoming_qty column from open PO supply."""
        await self._inventory.set_incoming(incoming)
        logger.info("inventory_incoming_synced", parts=len(incoming))
