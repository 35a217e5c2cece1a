"""Unit tests for the inventory ledger."""

from unittest.mock import AsyncMock

import pytest

from partsync.core.entities.inventory import (
    Inventory,
    MovementReference,
    ReferenceType,
    Transaction,
    TransactionType,
)
from partsync.core.entities.part import Part
from partsync.core.exceptions import (
    InsufficientStockError,
    PartNotFoundError,
    ValidationError,
)
from partsync.core.services.codes import CodeGenerator
from partsync.core.services.ledger import InventoryLedger, plan_movement


class TestPlanMovement:
    def test_inbound(self):
        assert plan_movement(1, 10, TransactionType.INBOUND, 5) == (5, 15)

    def test_outbound(self):
        assert plan_movement(1, 10, TransactionType.OUTBOUND, 10) == (10, 0)

    def test_outbound_below_zero(self):
        with pytest.raises(InsufficientStockError) as exc_info:
            plan_movement(1, 10, TransactionType.OUTBOUND, 11)
        assert exc_info.value.details["available"] == 10
        assert exc_info.value.details["requested"] == 11

    def test_adjustment_records_absolute_difference(self):
        assert plan_movement(1, 100, TransactionType.ADJUSTMENT, new_quantity=90) == (10, 90)
        assert plan_movement(1, 90, TransactionType.ADJUSTMENT, new_quantity=100) == (10, 100)

    def test_adjustment_to_same_quantity(self):
        assert plan_movement(1, 50, TransactionType.ADJUSTMENT, new_quantity=50) == (0, 50)

    def test_adjustment_requires_new_quantity(self):
        with pytest.raises(ValidationError):
            plan_movement(1, 10, TransactionType.ADJUSTMENT)

    def test_adjustment_rejects_negative_target(self):
        with pytest.raises(ValidationError):
            plan_movement(1, 10, TransactionType.ADJUSTMENT, new_quantity=-1)

    def test_transfer_keeps_quantity(self):
        assert plan_movement(1, 10, TransactionType.TRANSFER, 4) == (4, 10)

    @pytest.mark.parametrize(
        "transaction_type",
        [TransactionType.INBOUND, TransactionType.OUTBOUND, TransactionType.TRANSFER],
    )
    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity_rejected(self, transaction_type, quantity):
        with pytest.raises(ValidationError):
            plan_movement(1, 10, transaction_type, quantity)


@pytest.fixture
def stores():
    inventory_store = AsyncMock()
    master_store = AsyncMock()
    sequences = AsyncMock()

    master_store.get_part.return_value = Part(id=1, part_code="P-1", part_name="Part 1")
    inventory_store.get_inventory.return_value = Inventory(id=1, part_id=1, current_qty=100)
    inventory_store.save_inventory.side_effect = lambda inv: inv

    counter = iter(range(1, 100))

    def add_transaction(tx):
        tx.id = next(counter)
        return tx

    inventory_store.add_transaction.side_effect = add_transaction
    sequences.next_value.return_value = 1
    return inventory_store, master_store, sequences


@pytest.fixture
def ledger(stores, uow):
    inventory_store, master_store, sequences = stores
    return InventoryLedger(inventory_store, master_store, uow, CodeGenerator(sequences))


class TestApplyMovement:
    async def test_inbound_updates_stock_and_appends_transaction(self, ledger, stores, uow):
        inventory_store, _, _ = stores

        entry = await ledger.apply_movement(
            1,
            TransactionType.INBOUND,
            25,
            MovementReference(reference_type=ReferenceType.ORDER, reference_id="PO2501-0001"),
            "Purchase order receipt",
            "alice",
        )

        assert entry.inventory.current_qty == 125
        assert entry.inventory.last_inbound_date is not None
        tx = entry.transaction
        assert tx.transaction_code.startswith("IN")
        assert tx.transaction_code.endswith("-0001")
        assert (tx.before_qty, tx.after_qty, tx.quantity) == (100, 125, 25)
        assert tx.reference_type == ReferenceType.ORDER
        assert tx.reference_id == "PO2501-0001"
        assert tx.performed_by == "alice"
        inventory_store.save_inventory.assert_awaited_once()
        inventory_store.add_transaction.assert_awaited_once()
        assert uow.commits == 1

    async def test_outbound_insufficient_writes_nothing(self, ledger, stores, uow):
        inventory_store, _, _ = stores

        with pytest.raises(InsufficientStockError):
            await ledger.apply_movement(1, TransactionType.OUTBOUND, 101)

        inventory_store.save_inventory.assert_not_awaited()
        inventory_store.add_transaction.assert_not_awaited()
        assert uow.rollbacks == 1

    async def test_adjustment(self, ledger):
        entry = await ledger.apply_movement(
            1,
            TransactionType.ADJUSTMENT,
            reference=MovementReference(reference_type=ReferenceType.AUDIT, reference_id="AU2501-0001"),
            new_quantity=90,
        )
        assert entry.inventory.current_qty == 90
        assert entry.inventory.last_audit_date is not None
        assert entry.transaction.quantity == 10
        assert entry.transaction.delta == -10
        assert entry.transaction.transaction_code.startswith("ADJ")

    async def test_first_movement_creates_inventory(self, ledger, stores):
        inventory_store, _, _ = stores
        inventory_store.get_inventory.return_value = None

        entry = await ledger.apply_movement(1, TransactionType.INBOUND, 5)

        assert entry.inventory.current_qty == 5
        assert entry.transaction.before_qty == 0

    async def test_unknown_part(self, ledger, stores):
        _, master_store, _ = stores
        master_store.get_part.return_value = None

        with pytest.raises(PartNotFoundError):
            await ledger.apply_movement(99, TransactionType.INBOUND, 5)


def _tx(transaction_type, quantity, before, after, reference_type=ReferenceType.MANUAL):
    return Transaction(
        id=7,
        transaction_code="X2501-0007",
        part_id=1,
        transaction_type=transaction_type,
        quantity=quantity,
        before_qty=before,
        after_qty=after,
        reference_type=reference_type,
        reference_id="REF-1",
    )


class TestRevert:
    async def test_revert_inbound_is_outbound(self, ledger):
        entry = await ledger.revert(
            _tx(TransactionType.INBOUND, 20, 80, 100, ReferenceType.ORDER)
        )
        assert entry.transaction.transaction_type == TransactionType.OUTBOUND
        assert entry.transaction.quantity == 20
        assert entry.transaction.reference_type == ReferenceType.ORDER_REVERT
        assert entry.transaction.reference_id == "REF-1"
        assert entry.transaction.reason == "Revert X2501-0007"
        assert entry.inventory.current_qty == 80

    async def test_revert_outbound_is_inbound(self, ledger):
        entry = await ledger.revert(
            _tx(TransactionType.OUTBOUND, 10, 110, 100, ReferenceType.PICK)
        )
        assert entry.transaction.transaction_type == TransactionType.INBOUND
        assert entry.transaction.reference_type == ReferenceType.PICK_REVERT
        assert entry.inventory.current_qty == 110

    async def test_revert_adjustment_applies_inverse_delta(self, ledger, stores):
        inventory_store, _, _ = stores
        # Audit moved 100 -> 90, then 5 more arrived
        inventory_store.get_inventory.return_value = Inventory(id=1, part_id=1, current_qty=95)

        entry = await ledger.revert(
            _tx(TransactionType.ADJUSTMENT, 10, 100, 90, ReferenceType.AUDIT),
            reason="Stock audit revert (AU2501-0001)",
        )

        assert entry.inventory.current_qty == 105
        assert entry.transaction.transaction_type == TransactionType.ADJUSTMENT
        assert entry.transaction.reference_type == ReferenceType.AUDIT_REVERT
        assert entry.transaction.reason == "Stock audit revert (AU2501-0001)"

    async def test_revert_adjustment_below_zero(self, ledger, stores):
        inventory_store, _, _ = stores
        inventory_store.get_inventory.return_value = Inventory(id=1, part_id=1, current_qty=3)

        with pytest.raises(InsufficientStockError):
            await ledger.revert(_tx(TransactionType.ADJUSTMENT, 10, 0, 10))


class TestQueries:
    async def test_get_inventory_of_unmoved_part_is_zero(self, ledger, stores):
        inventory_store, _, _ = stores
        inventory_store.get_inventory.return_value = None

        inventory = await ledger.get_inventory(1)

        assert inventory.current_qty == 0

    async def test_get_inventory_unknown_part(self, ledger, stores):
        inventory_store, master_store, _ = stores
        inventory_store.get_inventory.return_value = None
        master_store.get_part.return_value = None

        with pytest.raises(PartNotFoundError):
            await ledger.get_inventory(42)

    async def test_sync_incoming(self, ledger, stores):
        inventory_store, _, _ = stores
        await ledger.sync_incoming({1: 40})
        inventory_store.set_incoming.assert_awaited_once_with({1: 40})
