"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Types of ledger movements."""

    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"


class ReferenceType(str, Enum):
    """What caused a ledger movement."""

    MANUAL = "MANUAL"
    ORDER = "ORDER"
    ORDER_REVERT = "ORDER_REVERT"
    SALES_ORDER = "SALES_ORDER"
    SALES_ORDER_REVERT = "SALES_ORDER_REVERT"
    AUDIT = "AUDIT"
    AUDIT_REVERT = "AUDIT_REVERT"
    PICK = "PICK"
    PICK_REVERT = "PICK_REVERT"
    MANUAL_REVERT = "MANUAL_REVERT"

    def reverted(self) -> "ReferenceType":
        """Reference type used when undoing a movement of this type."""
        if self.value.endswith("_REVERT"):
            return ReferenceType(self.value[: -len("_REVERT")])
        return ReferenceType(f"{self.value}_REVERT")


# Transaction code prefix per movement type
TRANSACTION_CODE_PREFIX: dict[TransactionType, str] = {
    TransactionType.INBOUND: "IN",
    TransactionType.OUTBOUND: "OUT",
    TransactionType.ADJUSTMENT: "ADJ",
    TransactionType.TRANSFER: "TRF",
}


class Inventory(BaseModel):
    """Stock position of a single part (1:1 with Part)."""

    id: int | None = None
    part_id: int
    current_qty: int = Field(default=0, ge=0)
    reserved_qty: int = Field(default=0, ge=0)
    incoming_qty: int = Field(default=0, ge=0)  # informational, refreshed by MRP
    last_inbound_date: datetime | None = None
    last_outbound_date: datetime | None = None
    last_audit_date: datetime | None = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def available_qty(self) -> int:
        """On-hand stock not reserved for other orders."""
        return max(0, self.current_qty - self.reserved_qty)


class Transaction(BaseModel):
    """Immutable ledger entry. Never updated or deleted once written."""

    id: int | None = None
    transaction_code: str
    part_id: int
    transaction_type: TransactionType
    quantity: int = Field(ge=0)
    before_qty: int
    after_qty: int
    reference_type: ReferenceType = ReferenceType.MANUAL
    reference_id: str | None = None
    reason: str | None = None
    notes: str | None = None
    performed_by: str | None = None
    transaction_date: datetime = Field(default_factory=datetime.utcnow)

    @property
    def delta(self) -> int:
        return self.after_qty - self.before_qty


class MovementReference(BaseModel):
    """Where a movement came from; carried onto the Transaction row."""

    reference_type: ReferenceType = ReferenceType.MANUAL
    reference_id: str | None = None
    notes: str | None = None


class LowStockAlert(BaseModel):
    """Part whose on-hand stock is at or below its safety stock."""

    part_id: int
    part_code: str
    part_name: str
    current_qty: int
    safety_stock: int
    shortage: int
    last_inbound_date: datetime | None = None
