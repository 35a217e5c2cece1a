"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from partsync.core.entities.inventory import Inventory, LowStockAlert, Transaction


class IInventoryStore(ABC):
    """Interface for inventory rows and the transaction ledger."""

    @abstractmethod
    async def get_inventory(self, part_id: int) -> Inventory | None:
        """Get the inventory row of a part."""
        pass

    @abstractmethod
    async def get_inventories(self, part_ids: list[int] | None = None) -> dict[int, Inventory]:
        """Inventory rows keyed by part ID (all rows when part_ids is None)."""
        pass

    @abstractmethod
    async def list_inventory(self, limit: int = 100, offset: int = 0) -> list[Inventory]:
        """List inventory rows with pagination."""
        pass

    @abstractmethod
    async def save_inventory(self, inventory: Inventory) -> Inventory:
        """Insert or update the inventory row of ``inventory.part_id``."""
        pass

    @abstractmethod
    async def set_incoming(self, incoming: dict[int, int]) -> None:
        """Overwrite incoming_qty for every row; parts absent from the map get 0."""
        pass

    @abstractmethod
    async def list_low_stock(self) -> list[LowStockAlert]:
        """Active parts whose current stock is at or below safety stock."""
        pass

    @abstractmethod
    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry."""
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: int) -> Transaction | None:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    async def list_transactions(
        self, part_id: int | None = None, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """Ledger entries, newest first."""
        pass
