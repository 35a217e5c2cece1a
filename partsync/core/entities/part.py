"""Master data entities: suppliers, parts, products and their BOM."""

from datetime import datetime
from decimal import ROUND_CEILING, Decimal

from pydantic import BaseModel, Field


class Supplier(BaseModel):
    """Vendor that supplies parts."""

    id: int | None = None
    code: str
    name: str
    lead_time_days: int | None = None  # None -> settings default
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Part(BaseModel):
    """Purchasable component tracked in inventory."""

    id: int | None = None
    part_code: str
    part_name: str
    unit: str = "EA"
    unit_price: float = 0.0
    safety_stock: int = Field(default=0, ge=0)
    reorder_point: int = Field(default=0, ge=0)
    min_order_qty: int = Field(default=1, ge=1)
    lead_time_days: int = Field(default=7, ge=0)
    supplier_id: int | None = None
    storage_location: str | None = None  # "ZONE-ROW-SHELF", e.g. "A-01-02"
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Product(BaseModel):
    """Sellable product built from parts."""

    id: int | None = None
    product_code: str
    product_name: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)


class BomItem(BaseModel):
    """One line of a product's bill of materials."""

    id: int | None = None
    product_id: int
    part_id: int
    quantity_per_unit: float = Field(gt=0)
    loss_rate: float = Field(default=0.0, ge=0)  # fraction: 0.1 == 10% scrap
    is_active: bool = True

    @property
    def effective_quantity_per_unit(self) -> float:
        return self.quantity_per_unit * (1 + self.loss_rate)

    def required_quantity(self, order_qty: int) -> int:
        """
        Parts needed to build ``order_qty`` products, scrap included.

        Decimal arithmetic keeps exact products such as 100 x 1 x 1.1 at
        110 instead of rounding a float artefact up to 111.
        """
        exact = (
            Decimal(order_qty)
            * Decimal(str(self.quantity_per_unit))
            * (Decimal(1) + Decimal(str(self.loss_rate)))
        )
        return int(exact.to_integral_value(rounding=ROUND_CEILING))
