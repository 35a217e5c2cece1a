"""
Domain exceptions for PartSync.

Every error raised by the core carries a machine-readable code and a details
mapping so the API layer can render it without knowing the concrete type.
"""

from typing import Any


class PartSyncError(Exception):
    """Base exception for all PartSync errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(PartSyncError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidStateError(ValidationError):
    """Operation not allowed in the entity's current status."""

    def __init__(self, entity: str, entity_id: int, status: str, allowed: list[str]):
        super().__init__(
            field="status",
            message=(
                f"{entity} {entity_id} is {status}; "
                f"expected one of {', '.join(allowed)}"
            ),
            value=status,
        )
        self.code = "INVALID_STATE"
        self.details.update(
            {"entity": entity, "entity_id": entity_id, "allowed": allowed}
        )


class InsufficientStockError(PartSyncError):
    """Outbound movement would drive stock below zero."""

    def __init__(self, part_id: int, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for part {part_id}: "
            f"available {available}, requested {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "part_id": part_id,
                "available": available,
                "requested": requested,
            },
        )


class MissingSupplierError(PartSyncError):
    """Part has no supplier, so it cannot be placed on a purchase order."""

    def __init__(self, part_id: int, part_code: str | None = None):
        super().__init__(
            f"Part {part_code or part_id} has no supplier assigned",
            code="MISSING_SUPPLIER",
            details={"part_id": part_id, "part_code": part_code},
        )


# Not Found Exceptions
class NotFoundError(PartSyncError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any, code: str | None = None):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class PartNotFoundError(NotFoundError):
    def __init__(self, part_id: int):
        super().__init__("Part", part_id, code="PART_NOT_FOUND")


class SupplierNotFoundError(NotFoundError):
    def __init__(self, supplier_id: int):
        super().__init__("Supplier", supplier_id, code="SUPPLIER_NOT_FOUND")


class SalesOrderNotFoundError(NotFoundError):
    def __init__(self, sales_order_id: int):
        super().__init__("Sales order", sales_order_id, code="SALES_ORDER_NOT_FOUND")


class PurchaseOrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__("Purchase order", order_id, code="PURCHASE_ORDER_NOT_FOUND")


class PurchaseOrderItemNotFoundError(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__(
            "Purchase order item", item_id, code="PURCHASE_ORDER_ITEM_NOT_FOUND"
        )


class MrpResultNotFoundError(NotFoundError):
    def __init__(self, result_id: int):
        super().__init__("MRP result", result_id, code="MRP_RESULT_NOT_FOUND")


class AuditNotFoundError(NotFoundError):
    def __init__(self, audit_id: int):
        super().__init__("Audit", audit_id, code="AUDIT_NOT_FOUND")


class AuditItemNotFoundError(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__("Audit item", item_id, code="AUDIT_ITEM_NOT_FOUND")


class PickingTaskNotFoundError(NotFoundError):
    def __init__(self, task_id: int):
        super().__init__("Picking task", task_id, code="PICKING_TASK_NOT_FOUND")


class PickingItemNotFoundError(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__("Picking item", item_id, code="PICKING_ITEM_NOT_FOUND")


class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: int):
        super().__init__("Transaction", transaction_id, code="TRANSACTION_NOT_FOUND")


# Conflict Exceptions
class ConflictError(PartSyncError):
    """Uniqueness constraint violated."""

    def __init__(self, message: str, code: str = "CONFLICT", **details: Any):
        super().__init__(message, code=code, details=details)


class DuplicatePickingTaskError(ConflictError):
    """Sales order already has a picking task."""

    def __init__(self, sales_order_id: int, task_id: int | None = None):
        super().__init__(
            f"Picking task already exists for sales order {sales_order_id}",
            code="PICKING_TASK_EXISTS",
            sales_order_id=sales_order_id,
            task_id=task_id,
        )


class DuplicateAuditItemError(ConflictError):
    """Audit already holds an item for the part."""

    def __init__(self, audit_id: int, part_id: int):
        super().__init__(
            f"Audit {audit_id} already has an item for part {part_id}",
            code="DUPLICATE_AUDIT_ITEM",
            audit_id=audit_id,
            part_id=part_id,
        )


# Auth Exceptions
class AuthenticationError(PartSyncError):
    """No authenticated session on the request."""

    def __init__(self, reason: str = "Authentication required"):
        super().__init__(reason, code="UNAUTHENTICATED")


class PermissionDeniedError(PartSyncError):
    """Role lacks the permission for the requested action."""

    def __init__(self, role: str, resource: str, action: str):
        super().__init__(
            f"Role {role} may not {action} {resource}",
            code="PERMISSION_DENIED",
            details={"role": role, "resource": resource, "action": action},
        )


# Storage Exceptions
class StorageError(PartSyncError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(PartSyncError):
    """Configuration error."""

    pass
