"""Inventory endpoints: stock positions, alerts and ledger movements."""

from fastapi import APIRouter, Depends, Query, status

from partsync.api.dependencies import (
    get_query_inventory_use_case,
    get_record_transaction_use_case,
    require_permission,
)
from partsync.application.dto.requests import RecordTransactionRequest
from partsync.application.dto.responses import (
    ErrorResponse,
    InventoryListResponse,
    LowStockListResponse,
    RecordTransactionResponse,
    TransactionListResponse,
)
from partsync.application.use_cases import QueryInventoryUseCase, RecordTransactionUseCase
from partsync.core.entities.auth import Action, Resource, Session

router = APIRouter(prefix="/api", tags=["inventory"])


@router.get("/inventory", response_model=InventoryListResponse)
async def list_inventory(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(require_permission(Resource.INVENTORY, Action.VIEW)),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> InventoryListResponse:
    """Current stock position per part."""
    items = await use_case.list_inventory(limit=limit, offset=offset)
    return use_case.inventory_response(items)


@router.get("/inventory/low-stock", response_model=LowStockListResponse)
async def low_stock(
    session: Session = Depends(require_permission(Resource.INVENTORY, Action.VIEW)),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> LowStockListResponse:
    """Active parts at or below safety stock, largest shortage first."""
    alerts = await use_case.low_stock()
    return use_case.low_stock_response(alerts)


@router.post(
    "/transactions",
    response_model=RecordTransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_transaction(
    request: RecordTransactionRequest,
    session: Session = Depends(require_permission(Resource.INVENTORY, Action.EDIT)),
    use_case: RecordTransactionUseCase = Depends(get_record_transaction_use_case),
) -> RecordTransactionResponse:
    """Apply a manual stock movement and append it to the ledger."""
    entry = await use_case.execute(request, performed_by=session.user_id)
    return use_case.to_response(entry)


@router.get(
    "/parts/{part_id}/transactions",
    response_model=TransactionListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def part_transactions(
    part_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(require_permission(Resource.INVENTORY, Action.VIEW)),
    use_case: QueryInventoryUseCase = Depends(get_query_inventory_use_case),
) -> TransactionListResponse:
    transactions = await use_case.part_transactions(part_id, limit=limit, offset=offset)
    return use_case.transactions_response(transactions)
