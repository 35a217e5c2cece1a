"""API middleware."""

from partsync.api.middleware.error_handler import ErrorHandlerMiddleware
from partsync.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
