"""Purchase order endpoints: consolidation from MRP and goods receipt."""

from fastapi import APIRouter, Depends, status

from partsync.api.dependencies import (
    get_create_orders_from_mrp_use_case,
    get_receive_purchase_order_use_case,
    require_permission,
)
from partsync.application.dto.requests import (
    CreateOrdersFromMrpRequest,
    ReceivePurchaseOrderRequest,
)
from partsync.application.dto.responses import (
    CreateOrdersFromMrpResponse,
    ErrorResponse,
    PurchaseOrderResponse,
)
from partsync.application.use_cases import (
    CreateOrdersFromMrpUseCase,
    ReceivePurchaseOrderUseCase,
)
from partsync.core.entities.auth import Action, Resource, Session

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post(
    "/from-mrp",
    response_model=CreateOrdersFromMrpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_orders_from_mrp(
    request: CreateOrdersFromMrpRequest,
    session: Session = Depends(require_permission(Resource.ORDERS, Action.CREATE)),
    use_case: CreateOrdersFromMrpUseCase = Depends(get_create_orders_from_mrp_use_case),
) -> CreateOrdersFromMrpResponse:
    """
    Group selected parts by (supplier, project) and create one purchase
    order per group.

    A group that fails is reported in ``failed_groups`` while the others
    are still created.
    """
    result = await use_case.execute(request, created_by=session.user_id)
    return use_case.to_response(result)


@router.get(
    "/{order_id}",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase_order(
    order_id: int,
    session: Session = Depends(require_permission(Resource.ORDERS, Action.VIEW)),
    use_case: ReceivePurchaseOrderUseCase = Depends(get_receive_purchase_order_use_case),
) -> PurchaseOrderResponse:
    order = await use_case.get_order(order_id)
    return use_case.to_response(order)


@router.post(
    "/{order_id}/receive",
    response_model=PurchaseOrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def receive_purchase_order(
    order_id: int,
    request: ReceivePurchaseOrderRequest,
    session: Session = Depends(require_permission(Resource.ORDERS, Action.EDIT)),
    use_case: ReceivePurchaseOrderUseCase = Depends(get_receive_purchase_order_use_case),
) -> PurchaseOrderResponse:
    """Book delivered quantities as INBOUND ledger movements."""
    order = await use_case.execute(order_id, request, performed_by=session.user_id)
    return use_case.to_response(order)
