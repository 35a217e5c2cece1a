"""
Dependency injection container for FastAPI.

Provides the acting session, permission guards and use case instances to
route handlers. Tests swap any of these through ``app.dependency_overrides``.
"""

from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, Header

from partsync.application.use_cases import (
    CompletePickingTaskUseCase,
    CreateAuditUseCase,
    CreateOrdersFromMrpUseCase,
    CreatePickingTaskUseCase,
    GetAuditUseCase,
    GetPickingTaskUseCase,
    ListMrpResultsUseCase,
    QueryInventoryUseCase,
    ReceivePurchaseOrderUseCase,
    RecordAuditCountUseCase,
    RecordTransactionUseCase,
    RevertAuditUseCase,
    RevertPickingTaskUseCase,
    RunMrpUseCase,
    UpdateAuditUseCase,
    UpdatePickingItemUseCase,
)
from partsync.config import Settings, get_settings
from partsync.core.entities.auth import Action, Resource, Role, Session
from partsync.core.exceptions import AuthenticationError, PermissionDeniedError
from partsync.core.services.permissions import has_permission


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Session and permissions
def get_session(
    x_user_id: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Session:
    """
    Session established by the upstream auth layer.

    The identity arrives in ``X-User-Id``, ``X-User-Name`` and
    ``X-User-Role`` headers.
    """
    if not x_user_id:
        raise AuthenticationError()
    try:
        role = Role((x_user_role or Role.VIEWER.value).upper())
    except ValueError as e:
        raise AuthenticationError(f"Unknown role: {x_user_role}") from e
    return Session(user_id=x_user_id, user_name=x_user_name, role=role)


def require_permission(resource: Resource, action: Action) -> Callable[..., Session]:
    """Dependency that admits only roles allowed to ``action`` on ``resource``."""

    def _check(session: Session = Depends(get_session)) -> Session:
        if not has_permission(session.role, resource, action):
            raise PermissionDeniedError(session.role.value, resource.value, action.value)
        return session

    return _check


# MRP
def get_run_mrp_use_case() -> RunMrpUseCase:
    return RunMrpUseCase()


def get_list_mrp_results_use_case() -> ListMrpResultsUseCase:
    return ListMrpResultsUseCase()


# Purchase orders
def get_create_orders_from_mrp_use_case() -> CreateOrdersFromMrpUseCase:
    return CreateOrdersFromMrpUseCase()


def get_receive_purchase_order_use_case() -> ReceivePurchaseOrderUseCase:
    return ReceivePurchaseOrderUseCase()


# Inventory
def get_record_transaction_use_case() -> RecordTransactionUseCase:
    return RecordTransactionUseCase()


def get_query_inventory_use_case() -> QueryInventoryUseCase:
    return QueryInventoryUseCase()


# Audit
def get_create_audit_use_case() -> CreateAuditUseCase:
    return CreateAuditUseCase()


def get_get_audit_use_case() -> GetAuditUseCase:
    return GetAuditUseCase()


def get_record_audit_count_use_case() -> RecordAuditCountUseCase:
    return RecordAuditCountUseCase()


def get_update_audit_use_case() -> UpdateAuditUseCase:
    return UpdateAuditUseCase()


def get_revert_audit_use_case() -> RevertAuditUseCase:
    return RevertAuditUseCase()


# Picking
def get_create_picking_task_use_case() -> CreatePickingTaskUseCase:
    return CreatePickingTaskUseCase()


def get_get_picking_task_use_case() -> GetPickingTaskUseCase:
    return GetPickingTaskUseCase()


def get_update_picking_item_use_case() -> UpdatePickingItemUseCase:
    return UpdatePickingItemUseCase()


def get_complete_picking_task_use_case() -> CompletePickingTaskUseCase:
    return CompletePickingTaskUseCase()


def get_revert_picking_task_use_case() -> RevertPickingTaskUseCase:
    return RevertPickingTaskUseCase()
