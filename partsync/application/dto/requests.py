"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Fields are snake_case; camelCase names (``orderQty``, ``adjustInventory``)
are accepted too.
"""

from datetime import date
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from partsync.core.entities.audit import AuditType
from partsync.core.entities.inventory import ReferenceType, TransactionType


class RequestModel(BaseModel):
    """Base for request bodies: snake_case or camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# MRP


class RunMrpRequest(RequestModel):
    """Trigger an MRP recomputation."""

    sales_order_id: int | None = Field(
        default=None,
        description="Restrict the run to one sales order; full run when omitted",
    )
    as_of: date | None = Field(
        default=None,
        description="Planning date (default today)",
    )


class MrpOrderItemRequest(RequestModel):
    """One part selected for ordering."""

    part_id: int = Field(..., description="Part to order")
    order_qty: int = Field(..., gt=0, description="Quantity to order")
    sales_order_id: int | None = Field(default=None, description="Originating sales order")
    mrp_result_id: int | None = Field(default=None, description="MRP row being consumed")
    project: str | None = Field(default=None, description="Overrides the project of the originating sales order")


class CreateOrdersFromMrpRequest(RequestModel):
    """Create purchase orders grouped by supplier and project."""

    items: list[MrpOrderItemRequest] = Field(..., min_length=1)
    project: str | None = Field(default=None, description="Project override for all items")
    sales_order_id: int | None = Field(default=None, description="Default sales order for all items")
    order_date: date | None = Field(default=None, description="Order date (default today)")
    expected_date: date | None = Field(
        default=None, description="Expected delivery; supplier lead time when omitted"
    )
    skip_draft: bool = Field(
        default=False, description="Create orders as ORDERED instead of DRAFT"
    )
    notes: str | None = Field(default=None, description="Notes; generated when omitted")


class ReceiveLineRequest(RequestModel):
    item_id: int = Field(
        ...,
        validation_alias=AliasChoices("item_id", "itemId", "order_item_id", "orderItemId"),
        description="Purchase order item ID",
    )
    received_qty: int = Field(..., ge=0, description="Quantity arriving now")


class ReceivePurchaseOrderRequest(RequestModel):
    """Book goods received against a purchase order."""

    items: list[ReceiveLineRequest] = Field(..., min_length=1)
    receipt_date: date | None = Field(default=None, description="Receipt date (default today)")


# Inventory


class RecordTransactionRequest(RequestModel):
    """Manual stock movement."""

    part_id: int = Field(..., description="Part whose stock changes")
    transaction_type: TransactionType = Field(..., description="INBOUND, OUTBOUND, ADJUSTMENT or TRANSFER")
    quantity: int = Field(default=0, ge=0, description="Units moved (ignored for ADJUSTMENT)")
    new_quantity: int | None = Field(
        default=None, ge=0, description="Target on-hand quantity for ADJUSTMENT"
    )
    reference_type: ReferenceType = Field(default=ReferenceType.MANUAL)
    reference_id: str | None = Field(default=None, description="Source document code")
    reason: str | None = Field(default=None, description="Reason for the movement")
    notes: str | None = Field(default=None)


# Audit


class CreateAuditRequest(RequestModel):
    """Plan a stock audit."""

    audit_date: date | None = Field(default=None, description="Audit date (default today)")
    audit_type: AuditType = Field(default=AuditType.SPOT)
    part_ids: list[int] | None = Field(
        default=None, description="Parts to count; all active parts when omitted"
    )
    notes: str | None = Field(default=None)


class UpdateAuditRequest(RequestModel):
    """Start or complete an audit."""

    status: Literal["IN_PROGRESS", "COMPLETED"] = Field(..., description="Target status")
    adjust_inventory: bool = Field(
        default=False,
        description="On completion, book discrepancies as stock adjustments",
    )


class RecordAuditCountRequest(RequestModel):
    """Physical count of one audit line."""

    counted_qty: int = Field(..., ge=0, description="Counted quantity")
    notes: str | None = Field(default=None)


# Picking


class CreatePickingTaskRequest(RequestModel):
    assigned_to: str | None = Field(default=None, description="Picker the task is assigned to")


class UpdatePickingItemRequest(RequestModel):
    """Advance one picking line."""

    action: Literal["scan", "pick", "skip", "revert"] = Field(..., description="Item action")
    picked_qty: int | None = Field(
        default=None, ge=0, description="Picked quantity for 'pick' (default required_qty)"
    )
    notes: str | None = Field(default=None, description="Notes for 'skip'")
