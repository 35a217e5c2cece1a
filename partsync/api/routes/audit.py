"""Stock audit endpoints."""

from fastapi import APIRouter, Depends, status

from partsync.api.dependencies import (
    get_create_audit_use_case,
    get_get_audit_use_case,
    get_record_audit_count_use_case,
    get_revert_audit_use_case,
    get_update_audit_use_case,
    require_permission,
)
from partsync.application.dto.requests import (
    CreateAuditRequest,
    RecordAuditCountRequest,
    UpdateAuditRequest,
)
from partsync.application.dto.responses import (
    AuditResponse,
    AuditUpdateResponse,
    ErrorResponse,
)
from partsync.application.use_cases import (
    CreateAuditUseCase,
    GetAuditUseCase,
    RecordAuditCountUseCase,
    RevertAuditUseCase,
    UpdateAuditUseCase,
)
from partsync.core.entities.auth import Action, Resource, Session

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.post(
    "",
    response_model=AuditResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_audit(
    request: CreateAuditRequest,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.CREATE)),
    use_case: CreateAuditUseCase = Depends(get_create_audit_use_case),
) -> AuditResponse:
    """Plan an audit; system quantities are snapshotted at creation."""
    audit = await use_case.execute(request, performed_by=session.user_id)
    return use_case.to_response(audit)


@router.put(
    "/items/{item_id}",
    response_model=AuditResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_audit_count(
    item_id: int,
    request: RecordAuditCountRequest,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.EDIT)),
    use_case: RecordAuditCountUseCase = Depends(get_record_audit_count_use_case),
) -> AuditResponse:
    audit = await use_case.execute(item_id, request)
    return use_case.to_response(audit)


@router.get(
    "/{audit_id}",
    response_model=AuditResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_audit(
    audit_id: int,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.VIEW)),
    use_case: GetAuditUseCase = Depends(get_get_audit_use_case),
) -> AuditResponse:
    audit = await use_case.execute(audit_id)
    return use_case.to_response(audit)


@router.put(
    "/{audit_id}",
    response_model=AuditUpdateResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_audit(
    audit_id: int,
    request: UpdateAuditRequest,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.EDIT)),
    use_case: UpdateAuditUseCase = Depends(get_update_audit_use_case),
) -> AuditUpdateResponse:
    """
    Start or complete an audit.

    Completing with ``adjust_inventory`` books each discrepancy as an
    ADJUSTMENT; without it the discrepancies are only logged.
    """
    result = await use_case.execute(audit_id, request, performed_by=session.user_id)
    return use_case.to_update_response(result)


@router.post(
    "/{audit_id}/revert",
    response_model=AuditResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def revert_audit(
    audit_id: int,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.DELETE)),
    use_case: RevertAuditUseCase = Depends(get_revert_audit_use_case),
) -> AuditResponse:
    """Reverse the adjustments of a completed audit and reopen it."""
    audit = await use_case.execute(audit_id, performed_by=session.user_id)
    return use_case.to_response(audit)
