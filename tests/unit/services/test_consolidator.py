"""Unit tests for purchase order consolidation."""

from datetime import date
from itertools import count
from unittest.mock import AsyncMock

import pytest

from partsync.core.entities.mrp import MrpResult, MrpStatus
from partsync.core.entities.part import Part, Supplier
from partsync.core.entities.purchase_order import (
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.entities.sales_order import SalesOrder
from partsync.core.exceptions import (
    DatabaseError,
    MissingSupplierError,
    MrpResultNotFoundError,
    PartNotFoundError,
    SalesOrderNotFoundError,
    ValidationError,
)
from partsync.core.services.codes import CodeGenerator
from partsync.core.services.consolidator import (
    ConsolidationOptions,
    OrderConsolidator,
    OrderSelection,
    auto_notes,
)

ORDER_DATE = date(2025, 1, 10)

PARTS = {
    1: Part(id=1, part_code="CABLE-2M", part_name="Cable", unit_price=2.0, supplier_id=1),
    2: Part(id=2, part_code="BRACKET", part_name="Bracket", unit_price=1.5, supplier_id=1),
    3: Part(id=3, part_code="BOLT-M6", part_name="Bolt", unit_price=0.5, supplier_id=2),
    4: Part(id=4, part_code="ORPHAN", part_name="Orphan", supplier_id=None),
}
SUPPLIERS = {
    1: Supplier(id=1, code="SUP-A", name="Acme", lead_time_days=5),
    2: Supplier(id=2, code="SUP-B", name="Bolt & Co", lead_time_days=None),
}
SALES_ORDERS = {
    4: SalesOrder(id=4, order_code="SO2501-0004", customer_name="Northwind"),
    6: SalesOrder(id=6, order_code="SO2501-0006", customer_name="Northwind", project="Line 4"),
    7: SalesOrder(id=7, order_code="SO2501-0007", customer_name="Contoso", project="Line 7"),
}


@pytest.fixture
def master():
    store = AsyncMock()
    store.get_parts.side_effect = lambda ids: {i: PARTS[i] for i in ids if i in PARTS}
    store.get_suppliers.side_effect = lambda ids: {i: SUPPLIERS[i] for i in ids if i in SUPPLIERS}
    return store


@pytest.fixture
def purchase_orders():
    store = AsyncMock()
    order_ids = count(1)
    item_ids = count(1)

    def create_order(order):
        order.id = next(order_ids)
        for item in order.items:
            item.id = next(item_ids)
            item.order_id = order.id
        return order

    store.create_order.side_effect = create_order
    return store


@pytest.fixture
def mrp():
    store = AsyncMock()
    store.find_by_part.return_value = []
    return store


@pytest.fixture
def sales_orders():
    store = AsyncMock()
    store.get_sales_orders.side_effect = lambda ids: {
        i: SALES_ORDERS[i] for i in ids if i in SALES_ORDERS
    }
    return store


@pytest.fixture
def notifier():
    return AsyncMock()


@pytest.fixture
def consolidator(master, purchase_orders, mrp, sales_orders, uow, notifier):
    sequences = AsyncMock()
    sequence = count(1)
    sequences.next_value.side_effect = lambda prefix, period: next(sequence)
    return OrderConsolidator(
        master_store=master,
        purchase_order_store=purchase_orders,
        mrp_store=mrp,
        sales_order_store=sales_orders,
        unit_of_work=uow,
        codes=CodeGenerator(sequences),
        notifier=notifier,
        default_lead_time_days=7,
    )


OPTIONS = ConsolidationOptions(order_date=ORDER_DATE, created_by="alice")


class TestAutoNotes:
    def test_without_project(self):
        assert auto_notes(3, None) == "Auto-generated from MRP (3 items)"

    def test_with_project(self):
        assert auto_notes(1, "Line 4") == "Auto-generated from MRP (1 items) - Line 4"


class TestConsolidate:
    async def test_one_order_per_supplier(self, consolidator, purchase_orders, uow):
        result = await consolidator.consolidate(
            [
                OrderSelection(part_id=1, order_qty=30),
                OrderSelection(part_id=3, order_qty=100),
                OrderSelection(part_id=2, order_qty=4),
            ],
            OPTIONS,
        )

        assert result.total_orders == 2
        assert result.total_items == 3
        assert result.failed_groups == []
        first, second = result.purchase_orders

        assert first.supplier_id == 1
        assert first.order_code == "PO2501-0001"
        assert first.status == PurchaseOrderStatus.DRAFT
        assert first.order_date == ORDER_DATE
        assert first.expected_date == date(2025, 1, 15)
        assert [i.part_id for i in first.items] == [2, 1]  # by part code
        assert first.total_amount == pytest.approx(30 * 2.0 + 4 * 1.5)
        assert first.notes == "Auto-generated from MRP (2 items)"
        assert first.created_by == "alice"
        assert all(i.status == PurchaseOrderItemStatus.PENDING for i in first.items)

        assert second.supplier_id == 2
        assert second.order_code == "PO2501-0002"
        assert second.expected_date == date(2025, 1, 17)  # default lead time
        assert purchase_orders.create_order.await_count == 2
        assert uow.commits == 2
        assert result.total_amount == pytest.approx(66.0 + 50.0)

    async def test_projects_split_orders(self, consolidator):
        result = await consolidator.consolidate(
            [
                OrderSelection(part_id=1, order_qty=10, project="Line 4"),
                OrderSelection(part_id=2, order_qty=10),
            ],
            OPTIONS,
        )

        assert result.total_orders == 2
        projects = {o.project for o in result.purchase_orders}
        assert projects == {"Line 4", None}
        tagged = next(o for o in result.purchase_orders if o.project == "Line 4")
        assert tagged.notes == "Auto-generated from MRP (1 items) - Line 4"

    async def test_sales_order_projects_split_orders(self, consolidator):
        """Lines of one supplier split by the project of their sales order."""
        result = await consolidator.consolidate(
            [
                OrderSelection(part_id=1, order_qty=10, sales_order_id=6),
                OrderSelection(part_id=2, order_qty=4, sales_order_id=7),
                OrderSelection(part_id=1, order_qty=5, sales_order_id=4),
            ],
            OPTIONS,
        )

        assert [(o.supplier_id, o.project) for o in result.purchase_orders] == [
            (1, "Line 4"),
            (1, "Line 7"),
            (1, None),
        ]
        assert [o.sales_order_id for o in result.purchase_orders] == [6, 7, 4]
        assert result.purchase_orders[1].items[0].part_id == 2

    async def test_project_follows_selected_mrp_row(self, consolidator, mrp, sales_orders):
        mrp.get_result.return_value = MrpResult(
            id=8, part_id=1, sales_order_id=7, status=MrpStatus.PENDING
        )

        result = await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=10, mrp_result_id=8)], OPTIONS
        )

        [order] = result.purchase_orders
        assert order.project == "Line 7"
        assert order.sales_order_id == 7
        sales_orders.get_sales_orders.assert_awaited_once_with([7])

    async def test_explicit_project_overrides_sales_order(self, consolidator):
        result = await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=10, sales_order_id=6, project="Rework")],
            OPTIONS,
        )

        assert result.purchase_orders[0].project == "Rework"

    async def test_same_part_twice_is_merged(self, consolidator):
        result = await consolidator.consolidate(
            [
                OrderSelection(part_id=1, order_qty=10, sales_order_id=4),
                OrderSelection(part_id=1, order_qty=5, sales_order_id=4),
            ],
            OPTIONS,
        )

        [order] = result.purchase_orders
        assert len(order.items) == 1
        assert order.items[0].order_qty == 15
        assert order.sales_order_id == 4

    async def test_skip_draft(self, consolidator):
        options = ConsolidationOptions(order_date=ORDER_DATE, skip_draft=True, notes="Rush")
        result = await consolidator.consolidate([OrderSelection(part_id=1, order_qty=1)], options)

        [order] = result.purchase_orders
        assert order.status == PurchaseOrderStatus.ORDERED
        assert order.items[0].status == PurchaseOrderItemStatus.ORDERED
        assert order.notes == "Rush"

    async def test_explicit_expected_date(self, consolidator):
        options = ConsolidationOptions(order_date=ORDER_DATE, expected_date=date(2025, 3, 1))
        result = await consolidator.consolidate([OrderSelection(part_id=3, order_qty=1)], options)
        assert result.purchase_orders[0].expected_date == date(2025, 3, 1)

    async def test_marks_pending_results_ordered(self, consolidator, mrp):
        mrp.get_result.return_value = MrpResult(id=8, part_id=1, status=MrpStatus.PENDING)

        await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=10, mrp_result_id=8)], OPTIONS
        )

        mrp.mark_ordered.assert_awaited_once_with([8])

    async def test_matches_results_by_part_and_sales_order(self, consolidator, mrp):
        mrp.find_by_part.return_value = [
            MrpResult(id=11, part_id=1, status=MrpStatus.PENDING),
            MrpResult(id=12, part_id=1, status=MrpStatus.ORDERED),
        ]

        await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=10, sales_order_id=6)], OPTIONS
        )

        mrp.find_by_part.assert_awaited_once_with(1, 6)
        mrp.mark_ordered.assert_awaited_once_with([11])

    async def test_already_ordered_selection_is_skipped(self, consolidator, mrp, purchase_orders):
        mrp.find_by_part.return_value = [MrpResult(id=5, part_id=1, status=MrpStatus.ORDERED)]

        result = await consolidator.consolidate([OrderSelection(part_id=1, order_qty=10)], OPTIONS)

        assert result.total_orders == 0
        [skipped] = result.skipped
        assert skipped.part_id == 1
        assert skipped.reason == "already ordered"
        assert skipped.mrp_result_ids == [5]
        purchase_orders.create_order.assert_not_awaited()

    async def test_notifies_each_created_order(self, consolidator, notifier):
        await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=1), OrderSelection(part_id=3, order_qty=1)],
            OPTIONS,
        )

        assert notifier.notify.await_count == 2
        event = notifier.notify.await_args_list[0].args[0]
        assert event.event_type == "order.created"
        assert event.payload["order_code"] == "PO2501-0001"


class TestConsolidateValidation:
    async def test_empty_selection(self, consolidator):
        with pytest.raises(ValidationError):
            await consolidator.consolidate([], OPTIONS)

    async def test_non_positive_quantity(self, consolidator):
        with pytest.raises(ValidationError):
            await consolidator.consolidate([OrderSelection(part_id=1, order_qty=0)], OPTIONS)

    async def test_unknown_part(self, consolidator, purchase_orders):
        with pytest.raises(PartNotFoundError):
            await consolidator.consolidate(
                [OrderSelection(part_id=1, order_qty=1), OrderSelection(part_id=99, order_qty=1)],
                OPTIONS,
            )
        purchase_orders.create_order.assert_not_awaited()

    async def test_missing_supplier_fails_before_any_write(self, consolidator, purchase_orders):
        with pytest.raises(MissingSupplierError):
            await consolidator.consolidate(
                [OrderSelection(part_id=1, order_qty=1), OrderSelection(part_id=4, order_qty=1)],
                OPTIONS,
            )
        purchase_orders.create_order.assert_not_awaited()

    async def test_unknown_mrp_result(self, consolidator, mrp):
        mrp.get_result.return_value = None
        with pytest.raises(MrpResultNotFoundError):
            await consolidator.consolidate(
                [OrderSelection(part_id=1, order_qty=1, mrp_result_id=77)], OPTIONS
            )

    async def test_unknown_sales_order(self, consolidator, purchase_orders):
        with pytest.raises(SalesOrderNotFoundError):
            await consolidator.consolidate(
                [OrderSelection(part_id=1, order_qty=1, sales_order_id=99)], OPTIONS
            )
        purchase_orders.create_order.assert_not_awaited()

    async def test_mrp_result_of_other_part(self, consolidator, mrp):
        mrp.get_result.return_value = MrpResult(id=77, part_id=3)
        with pytest.raises(ValidationError):
            await consolidator.consolidate(
                [OrderSelection(part_id=1, order_qty=1, mrp_result_id=77)], OPTIONS
            )


class TestGroupFailure:
    async def test_failed_group_does_not_undo_others(self, consolidator, purchase_orders, uow):
        created = purchase_orders.create_order.side_effect

        def fail_for_supplier_two(order):
            if order.supplier_id == 2:
                raise DatabaseError("insert", "disk I/O error")
            return created(order)

        purchase_orders.create_order.side_effect = fail_for_supplier_two

        result = await consolidator.consolidate(
            [OrderSelection(part_id=1, order_qty=1), OrderSelection(part_id=3, order_qty=1)],
            OPTIONS,
        )

        assert [o.supplier_id for o in result.purchase_orders] == [1]
        [failed] = result.failed_groups
        assert failed.supplier_id == 2
        assert failed.part_ids == [3]
        assert failed.error_code == "DATABASE_ERROR"
        assert uow.commits == 1
        assert uow.rollbacks == 1
