"""End-to-end MRP planning and consolidation over SQLite."""

from datetime import date

import pytest

from partsync.application.services import get_mrp_planning_service, get_order_consolidator
from partsync.core.entities.inventory import Inventory
from partsync.core.entities.mrp import MrpStatus, MrpUrgency
from partsync.core.entities.purchase_order import PurchaseOrderStatus
from partsync.core.entities.sales_order import SalesOrderStatus
from partsync.core.services.consolidator import ConsolidationOptions, OrderSelection
from partsync.infrastructure.storage.sqlite import SQLiteInventoryStore, SQLiteMrpResultStore

AS_OF = date(2025, 1, 1)
DUE = date(2025, 1, 15)


def _by_part(results):
    return {r.part_id: r for r in results}


def _selections(results):
    return [
        OrderSelection(part_id=r.part_id, order_qty=r.suggested_order_qty, mrp_result_id=r.id)
        for r in results
        if r.needs_order
    ]


class TestMrpFlow:
    async def test_full_run(self, catalog, make_sales_order):
        """Ten controllers explode into netted, MOQ-rounded suggestions."""
        so = await make_sales_order("SO2501-0001", 10, DUE)
        planning = await get_mrp_planning_service()

        outcome = await planning.run(as_of=AS_OF)

        results = _by_part(outcome.results)
        assert set(results) == {catalog.bolt.id, catalog.panel.id, catalog.cable.id}

        bolt = results[catalog.bolt.id]
        assert bolt.gross_requirement == 22
        assert bolt.net_requirement == 22
        assert bolt.suggested_order_qty == 100
        assert bolt.suggested_order_date == date(2025, 1, 12)
        assert bolt.urgency == MrpUrgency.MEDIUM
        assert bolt.sales_order_id == so.id

        panel = results[catalog.panel.id]
        assert panel.net_requirement == 15
        assert panel.suggested_order_date == date(2025, 1, 5)
        assert panel.urgency == MrpUrgency.HIGH

        cable = results[catalog.cable.id]
        assert cable.gross_requirement == 30
        assert cable.urgency == MrpUrgency.HIGH
        assert outcome.summary.parts_needing_order == 3

    async def test_stock_and_safety_stock_net_out(self, catalog, make_sales_order):
        """On-hand stock reduces the requirement; safety stock raises it."""
        await make_sales_order("SO2501-0001", 10, DUE)
        store = SQLiteInventoryStore()

        await store.save_inventory(Inventory(part_id=catalog.cable.id, current_qty=40))
        await store.save_inventory(Inventory(part_id=catalog.panel.id, current_qty=12))

        outcome = await (await get_mrp_planning_service()).run(as_of=AS_OF)

        results = _by_part(outcome.results)
        assert results[catalog.cable.id].net_requirement == 0
        assert results[catalog.cable.id].suggested_order_date is None
        assert results[catalog.cable.id].urgency == MrpUrgency.LOW
        assert results[catalog.panel.id].net_requirement == 3

    async def test_cancelled_orders_are_not_demand(self, catalog, make_sales_order):
        """Only open sales orders contribute."""
        await make_sales_order("SO2501-0001", 10, DUE, status=SalesOrderStatus.CANCELLED)

        outcome = await (await get_mrp_planning_service()).run(as_of=AS_OF)

        assert outcome.results == []

    async def test_consolidate_then_rerun(self, catalog, make_sales_order):
        """Ordered rows survive a rerun and their supply nets the new run to zero."""
        await make_sales_order("SO2501-0001", 10, DUE)
        planning = await get_mrp_planning_service()
        outcome = await planning.run(as_of=AS_OF)

        consolidator = await get_order_consolidator()
        result = await consolidator.consolidate(
            _selections(outcome.results),
            ConsolidationOptions(order_date=AS_OF, skip_draft=True, created_by="alice"),
        )

        assert result.failed_groups == []
        assert [o.order_code for o in result.purchase_orders] == ["PO2501-0001", "PO2501-0002"]
        acme, bolts = result.purchase_orders
        assert acme.supplier_id == catalog.supplier.id
        assert acme.status == PurchaseOrderStatus.ORDERED
        assert [i.part_id for i in acme.items] == [catalog.cable.id, catalog.panel.id]
        assert acme.total_amount == pytest.approx(30 * 2.0 + 15 * 12.0)
        assert acme.expected_date == date(2025, 1, 6)
        assert bolts.supplier_id == catalog.other_supplier.id
        assert bolts.expected_date == date(2025, 1, 8)

        mrp_store = SQLiteMrpResultStore()
        ordered = await mrp_store.list_results(status=MrpStatus.ORDERED)
        assert len(ordered) == 3

        rerun = await planning.run(as_of=AS_OF)

        assert all(r.net_requirement == 0 for r in rerun.results)
        assert len(await mrp_store.list_results(status=MrpStatus.ORDERED)) == 3
        inventory = await SQLiteInventoryStore().get_inventory(catalog.bolt.id)
        assert inventory.incoming_qty == 100

    async def test_ordered_selection_is_skipped(self, catalog, make_sales_order):
        """Selecting an already ordered row creates nothing."""
        await make_sales_order("SO2501-0001", 10, DUE)
        outcome = await (await get_mrp_planning_service()).run(as_of=AS_OF)
        consolidator = await get_order_consolidator()
        selections = _selections(outcome.results)
        await consolidator.consolidate(selections, ConsolidationOptions(order_date=AS_OF))

        again = await consolidator.consolidate(selections, ConsolidationOptions(order_date=AS_OF))

        assert again.purchase_orders == []
        assert {s.part_id for s in again.skipped} == {
            catalog.bolt.id,
            catalog.panel.id,
            catalog.cable.id,
        }

    async def test_scoped_run_keeps_other_orders(self, catalog, make_sales_order):
        """A run for one sales order leaves the rows of others alone."""
        first = await make_sales_order("SO2501-0001", 10, DUE)
        planning = await get_mrp_planning_service()
        await planning.run(as_of=AS_OF)
        second = await make_sales_order("SO2501-0002", 5, date(2025, 1, 30))

        outcome = await planning.run(as_of=AS_OF, sales_order_id=second.id)

        assert {r.sales_order_id for r in outcome.results} == {second.id}
        assert _by_part(outcome.results)[catalog.bolt.id].gross_requirement == 11
        pending = await SQLiteMrpResultStore().list_results(status=MrpStatus.PENDING)
        assert {r.sales_order_id for r in pending} == {first.id, second.id}
        assert len(pending) == 6

    async def test_orders_split_by_sales_order_project(self, catalog, make_sales_order):
        """One supplier, two projects: one purchase order per project."""
        line4 = await make_sales_order("SO2501-0001", 10, DUE, project="Line 4")
        line7 = await make_sales_order("SO2501-0002", 5, DUE, project="Line 7")
        consolidator = await get_order_consolidator()

        result = await consolidator.consolidate(
            [
                OrderSelection(part_id=catalog.cable.id, order_qty=30, sales_order_id=line4.id),
                OrderSelection(part_id=catalog.panel.id, order_qty=5, sales_order_id=line7.id),
            ],
            ConsolidationOptions(order_date=AS_OF),
        )

        assert [(o.supplier_id, o.project, o.sales_order_id) for o in result.purchase_orders] == [
            (catalog.supplier.id, "Line 4", line4.id),
            (catalog.supplier.id, "Line 7", line7.id),
        ]
        assert [i.part_id for i in result.purchase_orders[0].items] == [catalog.cable.id]
        assert [i.part_id for i in result.purchase_orders[1].items] == [catalog.panel.id]

    async def test_unattributed_selection_leaves_sales_order_rows(
        self, catalog, make_sales_order
    ):
        """Ordering a part without a sales order does not consume scoped rows."""
        first = await make_sales_order("SO2501-0001", 10, DUE)
        second = await make_sales_order("SO2501-0002", 5, date(2025, 1, 30))
        planning = await get_mrp_planning_service()
        await planning.run(as_of=AS_OF, sales_order_id=first.id)
        await planning.run(as_of=AS_OF, sales_order_id=second.id)
        consolidator = await get_order_consolidator()

        result = await consolidator.consolidate(
            [OrderSelection(part_id=catalog.cable.id, order_qty=10)],
            ConsolidationOptions(order_date=AS_OF),
        )

        assert result.total_orders == 1
        assert result.purchase_orders[0].project is None
        mrp_store = SQLiteMrpResultStore()
        assert await mrp_store.list_results(status=MrpStatus.ORDERED) == []
        cable_rows = [
            r for r in await mrp_store.list_results(status=MrpStatus.PENDING)
            if r.part_id == catalog.cable.id
        ]
        assert {r.sales_order_id for r in cable_rows} == {first.id, second.id}
