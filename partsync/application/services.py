"""
Domain service wiring.

Builds the core services over the SQLite stores. Use cases call these
lazily when no service was injected.
"""

from partsync.core.services.audit_reconciliation import AuditReconciliationService
from partsync.core.services.codes import CodeGenerator
from partsync.core.services.consolidator import OrderConsolidator
from partsync.core.services.demand import DemandAggregator
from partsync.core.services.ledger import InventoryLedger
from partsync.core.services.mrp_engine import MrpNettingEngine
from partsync.core.services.mrp_planning import MrpPlanningService
from partsync.core.services.picking import PickingService
from partsync.core.services.receiving import PurchaseOrderReceiver
from partsync.infrastructure.notifications import get_notifier
from partsync.infrastructure.storage.sqlite import (
    get_audit_store,
    get_code_sequence_store,
    get_inventory_store,
    get_master_data_store,
    get_mrp_store,
    get_picking_store,
    get_purchase_order_store,
    get_sales_order_store,
    get_unit_of_work,
)


async def get_code_generator() -> CodeGenerator:
    return CodeGenerator(await get_code_sequence_store())


async def get_inventory_ledger() -> InventoryLedger:
    return InventoryLedger(
        await get_inventory_store(),
        await get_master_data_store(),
        await get_unit_of_work(),
        await get_code_generator(),
    )


async def get_mrp_planning_service() -> MrpPlanningService:
    master = await get_master_data_store()
    sales_orders = await get_sales_order_store()
    aggregator = DemandAggregator(sales_orders, master, await get_purchase_order_store())
    return MrpPlanningService(
        aggregator=aggregator,
        engine=MrpNettingEngine(),
        master_store=master,
        inventory_store=await get_inventory_store(),
        sales_order_store=sales_orders,
        mrp_store=await get_mrp_store(),
        ledger=await get_inventory_ledger(),
        unit_of_work=await get_unit_of_work(),
        notifier=get_notifier(),
    )


async def get_order_consolidator() -> OrderConsolidator:
    return OrderConsolidator(
        master_store=await get_master_data_store(),
        purchase_order_store=await get_purchase_order_store(),
        mrp_store=await get_mrp_store(),
        sales_order_store=await get_sales_order_store(),
        unit_of_work=await get_unit_of_work(),
        codes=await get_code_generator(),
        notifier=get_notifier(),
    )


async def get_purchase_order_receiver() -> PurchaseOrderReceiver:
    return PurchaseOrderReceiver(
        await get_purchase_order_store(),
        await get_inventory_ledger(),
        await get_unit_of_work(),
    )


async def get_audit_service() -> AuditReconciliationService:
    return AuditReconciliationService(
        audit_store=await get_audit_store(),
        inventory_store=await get_inventory_store(),
        master_store=await get_master_data_store(),
        ledger=await get_inventory_ledger(),
        unit_of_work=await get_unit_of_work(),
        codes=await get_code_generator(),
    )


async def get_picking_service() -> PickingService:
    return PickingService(
        picking_store=await get_picking_store(),
        sales_order_store=await get_sales_order_store(),
        master_store=await get_master_data_store(),
        ledger=await get_inventory_ledger(),
        unit_of_work=await get_unit_of_work(),
        codes=await get_code_generator(),
    )
