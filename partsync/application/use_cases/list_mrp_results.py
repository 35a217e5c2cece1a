"""List MRP Results Use Case."""

from datetime import date

from partsync.application.dto.responses import (
    MrpResultListResponse,
    MrpResultResponse,
    MrpSummaryResponse,
)
from partsync.core.entities.mrp import MrpResult, MrpStatus, MrpSummary, MrpUrgency
from partsync.core.services.mrp_planning import MrpPlanningService


class ListMrpResultsUseCase:
    """Stored MRP rows with urgency recomputed for today."""

    def __init__(self, planning: MrpPlanningService | None = None):
        self._planning = planning

    async def _get_planning(self) -> MrpPlanningService:
        if self._planning is None:
            from partsync.application.services import get_mrp_planning_service

            self._planning = await get_mrp_planning_service()
        return self._planning

    async def execute(
        self,
        status: MrpStatus | None = None,
        urgency: MrpUrgency | None = None,
        only_needs_order: bool = False,
        as_of: date | None = None,
    ) -> list[MrpResult]:
        planning = await self._get_planning()
        return await planning.list_results(
            status=status,
            urgency=urgency,
            only_needs_order=only_needs_order,
            as_of=as_of,
        )

    def to_response(self, results: list[MrpResult]) -> MrpResultListResponse:
        return MrpResultListResponse(
            count=len(results),
            summary=MrpSummaryResponse.from_summary(MrpSummary.from_results(results)),
            results=[MrpResultResponse.from_entity(r) for r in results],
        )
