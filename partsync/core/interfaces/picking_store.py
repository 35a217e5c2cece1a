"""Abstract interface for picking task storage."""

from abc import ABC, abstractmethod

from partsync.core.entities.picking import PickingItem, PickingTask


class IPickingStore(ABC):
    """Interface for picking tasks and items."""

    @abstractmethod
    async def create_task(self, task: PickingTask) -> PickingTask:
        """Create a task with items. Raises ConflictError if the sales order has one."""
        pass

    @abstractmethod
    async def get_task(self, task_id: int) -> PickingTask | None:
        """Get task with items in sequence order."""
        pass

    @abstractmethod
    async def get_task_by_sales_order(self, sales_order_id: int) -> PickingTask | None:
        """Get the task generated for a sales order."""
        pass

    @abstractmethod
    async def update_task(self, task: PickingTask) -> PickingTask:
        """Update task header."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> PickingItem | None:
        """Get picking item by ID."""
        pass

    @abstractmethod
    async def update_item(self, item: PickingItem) -> PickingItem:
        """Update picked quantity and status."""
        pass
