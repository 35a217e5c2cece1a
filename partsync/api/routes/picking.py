"""Picking task endpoints."""

from fastapi import APIRouter, Depends, status

from partsync.api.dependencies import (
    get_complete_picking_task_use_case,
    get_create_picking_task_use_case,
    get_get_picking_task_use_case,
    get_revert_picking_task_use_case,
    get_update_picking_item_use_case,
    require_permission,
)
from partsync.application.dto.requests import (
    CreatePickingTaskRequest,
    UpdatePickingItemRequest,
)
from partsync.application.dto.responses import ErrorResponse, PickingTaskResponse
from partsync.application.use_cases import (
    CompletePickingTaskUseCase,
    CreatePickingTaskUseCase,
    GetPickingTaskUseCase,
    RevertPickingTaskUseCase,
    UpdatePickingItemUseCase,
)
from partsync.core.entities.auth import Action, Resource, Session

router = APIRouter(prefix="/api/picking", tags=["picking"])


@router.post(
    "/from-sales-order/{sales_order_id}",
    response_model=PickingTaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_picking_task(
    sales_order_id: int,
    request: CreatePickingTaskRequest | None = None,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.CREATE)),
    use_case: CreatePickingTaskUseCase = Depends(get_create_picking_task_use_case),
) -> PickingTaskResponse:
    """Expand the order's BOMs into a pick list sorted by storage location."""
    assigned_to = request.assigned_to if request else None
    task = await use_case.execute(sales_order_id, assigned_to=assigned_to)
    return use_case.to_response(task)


@router.put(
    "/items/{item_id}",
    response_model=PickingTaskResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_picking_item(
    item_id: int,
    request: UpdatePickingItemRequest,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.EDIT)),
    use_case: UpdatePickingItemUseCase = Depends(get_update_picking_item_use_case),
) -> PickingTaskResponse:
    """
    Advance one item.

    ``pick`` issues the picked quantity as an OUTBOUND movement and
    ``revert`` returns it.
    """
    task = await use_case.execute(item_id, request, performed_by=session.user_id)
    return use_case.to_response(task)


@router.get(
    "/{task_id}",
    response_model=PickingTaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_picking_task(
    task_id: int,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.VIEW)),
    use_case: GetPickingTaskUseCase = Depends(get_get_picking_task_use_case),
) -> PickingTaskResponse:
    task = await use_case.execute(task_id)
    return use_case.to_response(task)


@router.post(
    "/{task_id}/complete",
    response_model=PickingTaskResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def complete_picking_task(
    task_id: int,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.EDIT)),
    use_case: CompletePickingTaskUseCase = Depends(get_complete_picking_task_use_case),
) -> PickingTaskResponse:
    task = await use_case.execute(task_id)
    return use_case.to_response(task)


@router.post(
    "/{task_id}/revert",
    response_model=PickingTaskResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def revert_picking_task(
    task_id: int,
    session: Session = Depends(require_permission(Resource.WAREHOUSE, Action.DELETE)),
    use_case: RevertPickingTaskUseCase = Depends(get_revert_picking_task_use_case),
) -> PickingTaskResponse:
    """Reopen a completed task and put picked stock back."""
    task = await use_case.execute(task_id, performed_by=session.user_id)
    return use_case.to_response(task)
