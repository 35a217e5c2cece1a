"""Run MRP Use Case: recompute net requirements and order suggestions."""

from partsync.application.dto.requests import RunMrpRequest
from partsync.application.dto.responses import (
    MrpResultResponse,
    MrpRunResponse,
    MrpSummaryResponse,
)
from partsync.config import get_logger
from partsync.core.services.mrp_planning import MrpPlanningService, MrpRunOutcome

logger = get_logger(__name__)


class RunMrpUseCase:
    """Full or sales-order-scoped MRP run."""

    def __init__(self, planning: MrpPlanningService | None = None):
        self._planning = planning

    async def _get_planning(self) -> MrpPlanningService:
        if self._planning is None:
            from partsync.application.services import get_mrp_planning_service

            self._planning = await get_mrp_planning_service()
        return self._planning

    async def execute(self, request: RunMrpRequest) -> MrpRunOutcome:
        planning = await self._get_planning()
        return await planning.run(as_of=request.as_of, sales_order_id=request.sales_order_id)

    def to_response(self, outcome: MrpRunOutcome) -> MrpRunResponse:
        """Convert outcome to API response."""
        return MrpRunResponse(
            count=len(outcome.results),
            summary=MrpSummaryResponse.from_summary(outcome.summary),
            results=[MrpResultResponse.from_entity(r) for r in outcome.results],
            as_of=outcome.as_of,
            sales_order_id=outcome.sales_order_id,
        )
