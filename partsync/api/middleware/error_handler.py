"""
Error handling middleware.

Standardizes all API error responses to include:
- error: human-readable description
- code: machine-readable identifier
- details: structured context from the raised error
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from partsync.application.dto.responses import ErrorResponse
from partsync.config import get_logger
from partsync.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    InsufficientStockError,
    MissingSupplierError,
    NotFoundError,
    PartSyncError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    MissingSupplierError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "PART_NOT_FOUND": "Check the part ID against the master data.",
    "SALES_ORDER_NOT_FOUND": "Check the sales order ID.",
    "PURCHASE_ORDER_NOT_FOUND": "Check the purchase order ID.",
    "MRP_RESULT_NOT_FOUND": "Run POST /api/mrp/run and use a current result ID.",
    "AUDIT_NOT_FOUND": "Check the audit ID.",
    "AUDIT_ITEM_NOT_FOUND": "Use an item ID from GET /api/audit/{id}.",
    "PICKING_TASK_NOT_FOUND": "Check the picking task ID.",
    "PICKING_ITEM_NOT_FOUND": "Use an item ID from GET /api/picking/{id}.",
    "INSUFFICIENT_STOCK": "Receive stock or reduce the quantity before issuing.",
    "MISSING_SUPPLIER": "Assign a supplier to the part before ordering it.",
    "INVALID_STATE": "The record is not in a status that allows this action.",
    "PICKING_TASK_EXISTS": "Use the existing picking task for this sales order.",
    "DUPLICATE_AUDIT_ITEM": "List each part only once per audit.",
    "DUPLICATE_PART": "Part codes must be unique.",
    "UNAUTHENTICATED": "Send X-User-Id and X-User-Role headers.",
    "PERMISSION_DENIED": "Ask an administrator for a role with this permission.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "Your role does not allow this action.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with existing data.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert exception to standardized JSON response."""
    status_code = status_for(exc)

    if isinstance(exc, PartSyncError):
        error_code = exc.code
        details = exc.details
    else:
        error_code = exc.__class__.__name__
        details = {}

    request_id = getattr(request.state, "request_id", None)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    # Internal failures do not leak their context
    if status_code >= 500 and not isinstance(exc, PartSyncError):
        message = "Internal server error"
    else:
        message = exc.message if isinstance(exc, PartSyncError) else str(exc)

    error_response = ErrorResponse(
        error=message,
        code=error_code,
        details=details,
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(PartSyncError)
    async def domain_exception_handler(request: Request, exc: PartSyncError) -> JSONResponse:
        """Domain errors raised by services."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed or missing input is a 400 like any other validation error."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error="Request validation failed",
                code="VALIDATION_ERROR",
                details={"errors": errors},
                hint=HINT_MAP["VALIDATION_ERROR"],
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail) if exc.detail else "An error occurred",
                code=error_code,
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHENTICATED",
        403: "PERMISSION_DENIED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
    }.get(status_code, "HTTP_ERROR")
