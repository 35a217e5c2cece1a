"""
Picking use cases.

Generate a pick list from a sales order, advance its items, complete it and
revert a completed task.
"""

from partsync.application.dto.requests import UpdatePickingItemRequest
from partsync.application.dto.responses import PickingTaskResponse
from partsync.config import get_logger
from partsync.core.entities.picking import PickingTask
from partsync.core.services.picking import PickingService

logger = get_logger(__name__)


class _PickingUseCase:
    def __init__(self, picking: PickingService | None = None):
        self._picking = picking

    async def _get_picking(self) -> PickingService:
        if self._picking is None:
            from partsync.application.services import get_picking_service

            self._picking = await get_picking_service()
        return self._picking

    def to_response(self, task: PickingTask) -> PickingTaskResponse:
        return PickingTaskResponse.from_entity(task)


class CreatePickingTaskUseCase(_PickingUseCase):
    """Route-ordered pick list for one sales order."""

    async def execute(self, sales_order_id: int, assigned_to: str | None = None) -> PickingTask:
        picking = await self._get_picking()
        return await picking.create_from_sales_order(sales_order_id, assigned_to=assigned_to)


class GetPickingTaskUseCase(_PickingUseCase):
    async def execute(self, task_id: int) -> PickingTask:
        picking = await self._get_picking()
        return await picking.get_task(task_id)


class UpdatePickingItemUseCase(_PickingUseCase):
    """Dispatch scan, pick, skip and revert actions on one item."""

    async def execute(
        self,
        item_id: int,
        request: UpdatePickingItemRequest,
        performed_by: str | None = None,
    ) -> PickingTask:
        picking = await self._get_picking()
        if request.action == "scan":
            return await picking.scan_item(item_id)
        if request.action == "pick":
            return await picking.pick_item(item_id, request.picked_qty, performed_by)
        if request.action == "skip":
            return await picking.skip_item(item_id, request.notes)
        return await picking.revert_item(item_id, performed_by)


class CompletePickingTaskUseCase(_PickingUseCase):
    async def execute(self, task_id: int) -> PickingTask:
        picking = await self._get_picking()
        return await picking.complete_task(task_id)


class RevertPickingTaskUseCase(_PickingUseCase):
    """Reopen a completed task and return picked stock."""

    async def execute(self, task_id: int, performed_by: str | None = None) -> PickingTask:
        picking = await self._get_picking()
        return await picking.revert_task(task_id, performed_by=performed_by)
