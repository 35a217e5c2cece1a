"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from partsync.application.dto.requests import (
    CreateAuditRequest,
    CreateOrdersFromMrpRequest,
    CreatePickingTaskRequest,
    MrpOrderItemRequest,
    ReceiveLineRequest,
    ReceivePurchaseOrderRequest,
    RecordAuditCountRequest,
    RecordTransactionRequest,
    RunMrpRequest,
    UpdateAuditRequest,
    UpdatePickingItemRequest,
)
from partsync.application.dto.responses import (
    AuditResponse,
    AuditUpdateResponse,
    ComponentHealthResponse,
    CreateOrdersFromMrpResponse,
    ErrorResponse,
    HealthResponse,
    InventoryListResponse,
    InventoryResponse,
    LowStockListResponse,
    MrpResultListResponse,
    MrpResultResponse,
    MrpRunResponse,
    MrpSummaryResponse,
    PickingTaskResponse,
    PurchaseOrderResponse,
    RecordTransactionResponse,
    TransactionListResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "CreateAuditRequest",
    "CreateOrdersFromMrpRequest",
    "CreatePickingTaskRequest",
    "MrpOrderItemRequest",
    "ReceiveLineRequest",
    "ReceivePurchaseOrderRequest",
    "RecordAuditCountRequest",
    "RecordTransactionRequest",
    "RunMrpRequest",
    "UpdateAuditRequest",
    "UpdatePickingItemRequest",
    # Responses
    "AuditResponse",
    "AuditUpdateResponse",
    "ComponentHealthResponse",
    "CreateOrdersFromMrpResponse",
    "ErrorResponse",
    "HealthResponse",
    "InventoryListResponse",
    "InventoryResponse",
    "LowStockListResponse",
    "MrpResultListResponse",
    "MrpResultResponse",
    "MrpRunResponse",
    "MrpSummaryResponse",
    "PickingTaskResponse",
    "PurchaseOrderResponse",
    "RecordTransactionResponse",
    "TransactionListResponse",
    "TransactionResponse",
]
