"""Abstract interfaces for sales and purchase order storage."""

from abc import ABC, abstractmethod

from partsync.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderStatus,
)
from partsync.core.entities.sales_order import SalesOrder


class ISalesOrderStore(ABC):
    """Interface for sales order persistence."""

    @abstractmethod
    async def create_sales_order(self, order: SalesOrder) -> SalesOrder:
        """Create a sales order with its items."""
        pass

    @abstractmethod
    async def get_sales_order(self, sales_order_id: int) -> SalesOrder | None:
        """Get sales order with items."""
        pass

    @abstractmethod
    async def get_sales_orders(self, sales_order_ids: list[int]) -> dict[int, SalesOrder]:
        """Sales orders by ID in any status. Unknown IDs are absent."""
        pass

    @abstractmethod
    async def list_sales_orders(
        self,
        statuses: list[str],
        sales_order_ids: list[int] | None = None,
    ) -> list[SalesOrder]:
        """Sales orders (with items) in the given statuses, optionally restricted by ID."""
        pass


class IPurchaseOrderStore(ABC):
    """Interface for purchase order persistence."""

    @abstractmethod
    async def create_order(self, order: PurchaseOrder) -> PurchaseOrder:
        """Create a purchase order with its items."""
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> PurchaseOrder | None:
        """Get purchase order with items."""
        pass

    @abstractmethod
    async def list_orders(
        self,
        status: PurchaseOrderStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        """List purchase orders, newest first."""
        pass

    @abstractmethod
    async def update_order(self, order: PurchaseOrder) -> PurchaseOrder:
        """Update order header (status, dates, total, notes)."""
        pass

    @abstractmethod
    async def update_item(self, item: PurchaseOrderItem) -> PurchaseOrderItem:
        """Update received quantity and status of an order line."""
        pass

    @abstractmethod
    async def incoming_by_part(self, statuses: list[str]) -> dict[int, int]:
        """Sum of (order_qty - received_qty) per part over orders in ``statuses``."""
        pass
