"""Tests for RecordTransactionUseCase and QueryInventoryUseCase."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from partsync.application.dto.requests import RecordTransactionRequest
from partsync.application.use_cases.query_inventory import QueryInventoryUseCase
from partsync.application.use_cases.record_transaction import RecordTransactionUseCase
from partsync.core.entities.inventory import (
    Inventory,
    LowStockAlert,
    MovementReference,
    ReferenceType,
    Transaction,
    TransactionType,
)
from partsync.core.exceptions import PartNotFoundError
from partsync.core.services.ledger import LedgerEntry


@pytest.fixture
def entry():
    return LedgerEntry(
        inventory=Inventory(part_id=1, current_qty=70, reserved_qty=80),
        transaction=Transaction(
            id=9,
            transaction_code="OUT2501-0001",
            part_id=1,
            transaction_type=TransactionType.OUTBOUND,
            quantity=30,
            before_qty=100,
            after_qty=70,
            transaction_date=datetime(2025, 1, 10, 9, 0),
        ),
    )


class TestRecordTransactionUseCase:
    async def test_execute_forwards_movement(self, entry):
        """Test the request becomes one ledger movement."""
        ledger = AsyncMock()
        ledger.apply_movement.return_value = entry
        use_case = RecordTransactionUseCase(ledger=ledger)
        request = RecordTransactionRequest(
            part_id=1,
            transaction_type=TransactionType.OUTBOUND,
            quantity=30,
            reference_type=ReferenceType.SALES_ORDER,
            reference_id="SO2501-0001",
            reason="Shipment",
            notes="dock 2",
        )

        result = await use_case.execute(request, performed_by="bob")

        assert result is entry
        ledger.apply_movement.assert_awaited_once_with(
            1,
            TransactionType.OUTBOUND,
            30,
            MovementReference(
                reference_type=ReferenceType.SALES_ORDER,
                reference_id="SO2501-0001",
                notes="dock 2",
            ),
            "Shipment",
            "bob",
            new_quantity=None,
        )

    def test_adjustment_request_camel_case(self):
        """Test ADJUSTMENT requests carry a target quantity."""
        request = RecordTransactionRequest.model_validate(
            {"partId": 1, "transactionType": "ADJUSTMENT", "newQuantity": 90}
        )
        assert request.transaction_type == TransactionType.ADJUSTMENT
        assert request.new_quantity == 90
        assert request.quantity == 0

    def test_negative_quantity_rejected(self):
        """Test negative quantities fail validation."""
        with pytest.raises(PydanticValidationError):
            RecordTransactionRequest(part_id=1, transaction_type=TransactionType.INBOUND, quantity=-1)

    def test_to_response(self, entry):
        """Test available quantity is floored at zero."""
        response = RecordTransactionUseCase().to_response(entry)
        assert response.inventory.current_qty == 70
        assert response.inventory.available_qty == 0
        assert response.transaction.transaction_code == "OUT2501-0001"
        assert response.transaction.transaction_type == "OUTBOUND"
        assert response.transaction.reference_type == "MANUAL"


class TestQueryInventoryUseCase:
    async def test_list_inventory(self):
        """Test paging parameters reach the store."""
        store = AsyncMock()
        store.list_inventory.return_value = [Inventory(part_id=1, current_qty=5)]
        use_case = QueryInventoryUseCase(inventory_store=store, ledger=AsyncMock())

        items = await use_case.list_inventory(limit=10, offset=20)

        store.list_inventory.assert_awaited_once_with(limit=10, offset=20)
        response = QueryInventoryUseCase.inventory_response(items)
        assert response.count == 1
        assert response.items[0].available_qty == 5

    async def test_low_stock(self):
        """Test low stock alerts come from the ledger."""
        ledger = AsyncMock()
        ledger.low_stock_alerts.return_value = [
            LowStockAlert(
                part_id=2, part_code="PANEL-01", part_name="Panel",
                current_qty=1, safety_stock=5, shortage=4,
            )
        ]
        use_case = QueryInventoryUseCase(inventory_store=AsyncMock(), ledger=ledger)

        alerts = await use_case.low_stock()

        response = QueryInventoryUseCase.low_stock_response(alerts)
        assert response.count == 1
        assert response.items[0].shortage == 4

    async def test_part_transactions(self, entry):
        """Test ledger history is read after checking the part exists."""
        ledger = AsyncMock()
        ledger.list_transactions.return_value = [entry.transaction]
        use_case = QueryInventoryUseCase(inventory_store=AsyncMock(), ledger=ledger)

        transactions = await use_case.part_transactions(1, limit=5)

        ledger.get_inventory.assert_awaited_once_with(1)
        ledger.list_transactions.assert_awaited_once_with(1, limit=5, offset=0)
        response = QueryInventoryUseCase.transactions_response(transactions)
        assert response.transactions[0].id == 9

    async def test_part_transactions_unknown_part(self):
        """Test unknown parts raise before the history query."""
        ledger = AsyncMock()
        ledger.get_inventory.side_effect = PartNotFoundError(99)
        use_case = QueryInventoryUseCase(inventory_store=AsyncMock(), ledger=ledger)

        with pytest.raises(PartNotFoundError):
            await use_case.part_transactions(99)
        ledger.list_transactions.assert_not_awaited()
