"""API tests for inventory endpoints."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from partsync.api.dependencies import (
    get_query_inventory_use_case,
    get_record_transaction_use_case,
)
from partsync.application.use_cases import QueryInventoryUseCase, RecordTransactionUseCase
from partsync.core.entities.inventory import (
    Inventory,
    LowStockAlert,
    Transaction,
    TransactionType,
)
from partsync.core.exceptions import InsufficientStockError, PartNotFoundError
from partsync.core.services.ledger import LedgerEntry


@pytest.fixture
def transaction():
    return Transaction(
        id=9,
        transaction_code="OUT2501-0001",
        part_id=1,
        transaction_type=TransactionType.OUTBOUND,
        quantity=30,
        before_qty=100,
        after_qty=70,
        performed_by="bob",
        transaction_date=datetime(2025, 1, 10, 9, 0),
    )


@pytest.fixture
def mock_record(override, transaction):
    use_case = AsyncMock(spec=RecordTransactionUseCase)
    use_case.execute.return_value = LedgerEntry(
        inventory=Inventory(part_id=1, current_qty=70, reserved_qty=10),
        transaction=transaction,
    )
    use_case.to_response.side_effect = RecordTransactionUseCase().to_response
    override(get_record_transaction_use_case, use_case)
    return use_case


@pytest.fixture
def mock_query(override, transaction):
    use_case = AsyncMock(spec=QueryInventoryUseCase)
    use_case.list_inventory.return_value = [Inventory(part_id=1, current_qty=70, reserved_qty=10)]
    use_case.low_stock.return_value = [
        LowStockAlert(
            part_id=2, part_code="PANEL-01", part_name="Front panel",
            current_qty=1, safety_stock=5, shortage=4,
        )
    ]
    use_case.part_transactions.return_value = [transaction]
    use_case.inventory_response.side_effect = QueryInventoryUseCase.inventory_response
    use_case.low_stock_response.side_effect = QueryInventoryUseCase.low_stock_response
    use_case.transactions_response.side_effect = QueryInventoryUseCase.transactions_response
    override(get_query_inventory_use_case, use_case)
    return use_case


class TestRecordTransaction:
    async def test_outbound(self, client, as_role, mock_record):
        """Test a movement returns the new position and the ledger entry."""
        response = await client.post(
            "/api/transactions",
            json={"partId": 1, "transactionType": "OUTBOUND", "quantity": 30},
            headers=as_role("OPERATOR", "bob"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["inventory"]["available_qty"] == 60
        assert data["transaction"]["transaction_code"] == "OUT2501-0001"
        assert mock_record.execute.await_args.kwargs == {"performed_by": "bob"}

    async def test_insufficient_stock(self, client, as_role, mock_record):
        """Test overdrawing stock is a 400 with the shortfall."""
        mock_record.execute.side_effect = InsufficientStockError(1, available=5, requested=30)

        response = await client.post(
            "/api/transactions",
            json={"partId": 1, "transactionType": "OUTBOUND", "quantity": 30},
            headers=as_role("OPERATOR"),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_STOCK"

    async def test_unknown_part(self, client, as_role, mock_record):
        """Test unknown parts are 404."""
        mock_record.execute.side_effect = PartNotFoundError(99)

        response = await client.post(
            "/api/transactions",
            json={"partId": 99, "transactionType": "INBOUND", "quantity": 1},
            headers=as_role("ADMIN"),
        )

        assert response.status_code == 404
        assert response.json()["code"] == "PART_NOT_FOUND"

    async def test_negative_quantity(self, client, as_role, mock_record):
        """Test negative quantities fail validation."""
        response = await client.post(
            "/api/transactions",
            json={"partId": 1, "transactionType": "INBOUND", "quantity": -5},
            headers=as_role("ADMIN"),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        mock_record.execute.assert_not_awaited()


class TestQueryInventory:
    async def test_list(self, client, as_role, mock_query):
        """Test paging is forwarded."""
        response = await client.get(
            "/api/inventory", params={"limit": 10, "offset": 5}, headers=as_role("VIEWER")
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["available_qty"] == 60
        mock_query.list_inventory.assert_awaited_once_with(limit=10, offset=5)

    async def test_low_stock(self, client, as_role, mock_query):
        """Test low stock alerts."""
        response = await client.get("/api/inventory/low-stock", headers=as_role("VIEWER"))

        assert response.status_code == 200
        assert response.json()["items"][0]["shortage"] == 4

    async def test_part_transactions(self, client, as_role, mock_query):
        """Test ledger history of one part."""
        response = await client.get("/api/parts/1/transactions", headers=as_role("VIEWER"))

        assert response.status_code == 200
        assert response.json()["transactions"][0]["before_qty"] == 100
        mock_query.part_transactions.assert_awaited_once_with(1, limit=100, offset=0)
