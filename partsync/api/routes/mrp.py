"""MRP endpoints: run the netting engine and read its suggestions."""

from datetime import date

from fastapi import APIRouter, Depends

from partsync.api.dependencies import (
    get_list_mrp_results_use_case,
    get_run_mrp_use_case,
    require_permission,
)
from partsync.application.dto.requests import RunMrpRequest
from partsync.application.dto.responses import (
    ErrorResponse,
    MrpResultListResponse,
    MrpRunResponse,
)
from partsync.application.use_cases import ListMrpResultsUseCase, RunMrpUseCase
from partsync.core.entities.auth import Action, Resource, Session
from partsync.core.entities.mrp import MrpStatus, MrpUrgency

router = APIRouter(prefix="/api/mrp", tags=["mrp"])


@router.get("", response_model=MrpResultListResponse)
async def list_mrp_results(
    status: MrpStatus | None = None,
    urgency: MrpUrgency | None = None,
    only_needs_order: bool = False,
    as_of: date | None = None,
    session: Session = Depends(require_permission(Resource.MRP, Action.VIEW)),
    use_case: ListMrpResultsUseCase = Depends(get_list_mrp_results_use_case),
) -> MrpResultListResponse:
    """Stored MRP rows; urgency is recomputed against today (or ``as_of``)."""
    results = await use_case.execute(
        status=status,
        urgency=urgency,
        only_needs_order=only_needs_order,
        as_of=as_of,
    )
    return use_case.to_response(results)


@router.post(
    "/run",
    response_model=MrpRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def run_mrp(
    request: RunMrpRequest | None = None,
    session: Session = Depends(require_permission(Resource.MRP, Action.CREATE)),
    use_case: RunMrpUseCase = Depends(get_run_mrp_use_case),
) -> MrpRunResponse:
    """
    Recompute net requirements.

    Without ``sales_order_id`` every open sales order contributes demand and
    all PENDING rows are replaced. With it, only that order's rows change.
    """
    outcome = await use_case.execute(request or RunMrpRequest())
    return use_case.to_response(outcome)
