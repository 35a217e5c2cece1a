"""Tests for CreateOrdersFromMrpUseCase and ReceivePurchaseOrderUseCase."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from partsync.application.dto.requests import (
    CreateOrdersFromMrpRequest,
    ReceivePurchaseOrderRequest,
)
from partsync.application.use_cases.create_orders_from_mrp import CreateOrdersFromMrpUseCase
from partsync.application.use_cases.receive_purchase_order import ReceivePurchaseOrderUseCase
from partsync.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from partsync.core.services.consolidator import (
    ConsolidationResult,
    FailedGroup,
    SkippedSelection,
)
from partsync.core.services.receiving import ReceiptLine


@pytest.fixture
def purchase_order():
    return PurchaseOrder(
        id=1,
        order_code="PO2501-0001",
        supplier_id=2,
        order_date=date(2025, 1, 10),
        expected_date=date(2025, 1, 15),
        total_amount=60.0,
        items=[
            PurchaseOrderItem(
                id=5, order_id=1, part_id=10, order_qty=30, received_qty=10,
                unit_price=2.0, total_price=60.0,
            )
        ],
    )


class TestCreateOrdersFromMrpUseCase:
    async def test_execute_builds_selections(self):
        """Test request items become selections with shared options."""
        consolidator = AsyncMock()
        consolidator.consolidate.return_value = ConsolidationResult()
        use_case = CreateOrdersFromMrpUseCase(consolidator=consolidator)
        request = CreateOrdersFromMrpRequest.model_validate(
            {
                "items": [
                    {"partId": 10, "orderQty": 30, "mrpResultId": 4},
                    {"part_id": 11, "order_qty": 5, "project": "Line 4"},
                ],
                "skipDraft": True,
                "orderDate": "2025-01-10",
            }
        )

        await use_case.execute(request, created_by="alice")

        selections, options = consolidator.consolidate.await_args.args
        assert [(s.part_id, s.order_qty, s.mrp_result_id, s.project) for s in selections] == [
            (10, 30, 4, None),
            (11, 5, None, "Line 4"),
        ]
        assert options.skip_draft is True
        assert options.order_date == date(2025, 1, 10)
        assert options.created_by == "alice"

    def test_request_rejects_empty_items(self):
        """Test at least one item is required."""
        with pytest.raises(PydanticValidationError):
            CreateOrdersFromMrpRequest(items=[])

    def test_request_rejects_non_positive_qty(self):
        """Test order quantities must be positive."""
        with pytest.raises(PydanticValidationError):
            CreateOrdersFromMrpRequest.model_validate({"items": [{"partId": 1, "orderQty": 0}]})

    def test_to_response(self, purchase_order):
        """Test result conversion with failures and skips."""
        result = ConsolidationResult(
            purchase_orders=[purchase_order],
            failed_groups=[
                FailedGroup(
                    supplier_id=3, project=None, part_ids=[12],
                    error_code="DATABASE_ERROR", message="locked",
                )
            ],
            skipped=[SkippedSelection(part_id=13, reason="already ordered", mrp_result_ids=[8])],
        )

        response = CreateOrdersFromMrpUseCase().to_response(result)

        assert response.total_orders == 1
        assert response.total_items == 1
        assert response.total_amount == 60.0
        assert response.purchase_orders[0].order_code == "PO2501-0001"
        assert response.purchase_orders[0].items[0].outstanding_qty == 20
        assert response.failed_groups[0].error_code == "DATABASE_ERROR"
        assert response.skipped[0].mrp_result_ids == [8]


class TestReceivePurchaseOrderUseCase:
    async def test_execute_maps_lines(self, purchase_order):
        """Test receipt lines and date are forwarded."""
        receiver = AsyncMock()
        receiver.receive.return_value = purchase_order
        use_case = ReceivePurchaseOrderUseCase(receiver=receiver)
        request = ReceivePurchaseOrderRequest.model_validate(
            {"items": [{"orderItemId": 5, "receivedQty": 10}], "receiptDate": "2025-01-20"}
        )

        order = await use_case.execute(1, request, performed_by="bob")

        assert order is purchase_order
        receiver.receive.assert_awaited_once_with(
            1,
            [ReceiptLine(item_id=5, received_qty=10)],
            performed_by="bob",
            receipt_date=date(2025, 1, 20),
        )

    async def test_get_order(self, purchase_order):
        """Test get_order delegates to the receiver."""
        receiver = AsyncMock()
        receiver.get_order.return_value = purchase_order
        use_case = ReceivePurchaseOrderUseCase(receiver=receiver)

        assert await use_case.get_order(1) is purchase_order

    def test_to_response(self, purchase_order):
        """Test status is rendered as its value."""
        purchase_order.status = PurchaseOrderStatus.PARTIAL
        response = ReceivePurchaseOrderUseCase().to_response(purchase_order)
        assert response.status == "PARTIAL"
        assert response.items[0].received_qty == 10
