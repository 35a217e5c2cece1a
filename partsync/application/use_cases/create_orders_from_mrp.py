"""Create Orders From MRP Use Case: consolidate selections into purchase orders."""

from partsync.application.dto.requests import CreateOrdersFromMrpRequest
from partsync.application.dto.responses import (
    CreateOrdersFromMrpResponse,
    FailedGroupResponse,
    PurchaseOrderResponse,
    SkippedSelectionResponse,
)
from partsync.config import get_logger
from partsync.core.services.consolidator import (
    ConsolidationOptions,
    ConsolidationResult,
    OrderConsolidator,
    OrderSelection,
)

logger = get_logger(__name__)


class CreateOrdersFromMrpUseCase:
    """One purchase order per (supplier, project) group of selected parts."""

    def __init__(self, consolidator: OrderConsolidator | None = None):
        self._consolidator = consolidator

    async def _get_consolidator(self) -> OrderConsolidator:
        if self._consolidator is None:
            from partsync.application.services import get_order_consolidator

            self._consolidator = await get_order_consolidator()
        return self._consolidator

    async def execute(
        self,
        request: CreateOrdersFromMrpRequest,
        created_by: str | None = None,
    ) -> ConsolidationResult:
        logger.info(
            "create_orders_from_mrp_started",
            items=len(request.items),
            project=request.project,
            created_by=created_by,
        )
        consolidator = await self._get_consolidator()
        return await consolidator.consolidate(
            [
                OrderSelection(
                    part_id=item.part_id,
                    order_qty=item.order_qty,
                    sales_order_id=item.sales_order_id,
                    mrp_result_id=item.mrp_result_id,
                    project=item.project,
                )
                for item in request.items
            ],
            ConsolidationOptions(
                project=request.project,
                sales_order_id=request.sales_order_id,
                order_date=request.order_date,
                expected_date=request.expected_date,
                skip_draft=request.skip_draft,
                notes=request.notes,
                created_by=created_by,
            ),
        )

    def to_response(self, result: ConsolidationResult) -> CreateOrdersFromMrpResponse:
        """Convert result to API response."""
        return CreateOrdersFromMrpResponse(
            purchase_orders=[PurchaseOrderResponse.from_entity(o) for o in result.purchase_orders],
            total_orders=result.total_orders,
            total_items=result.total_items,
            total_amount=result.total_amount,
            failed_groups=[
                FailedGroupResponse(
                    supplier_id=g.supplier_id,
                    project=g.project,
                    part_ids=g.part_ids,
                    error_code=g.error_code,
                    message=g.message,
                )
                for g in result.failed_groups
            ],
            skipped=[
                SkippedSelectionResponse(
                    part_id=s.part_id,
                    reason=s.reason,
                    mrp_result_ids=s.mrp_result_ids,
                )
                for s in result.skipped
            ],
        )
