"""SQLite implementation of picking task storage."""

from datetime import datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.picking import (
    PickingItem,
    PickingItemStatus,
    PickingPriority,
    PickingTask,
    PickingTaskStatus,
)
from partsync.core.exceptions import DuplicatePickingTaskError
from partsync.core.interfaces.picking_store import IPickingStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import parse_datetime, to_iso

logger = get_logger(__name__)

_ITEM_SELECT = """
    SELECT pi.*, p.part_code
    FROM picking_items pi
    JOIN parts p ON p.id = pi.part_id
"""


class SQLitePickingStore(IPickingStore):
    """Picking tasks with their route-ordered items."""

    async def create_task(self, task: PickingTask) -> PickingTask:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO picking_tasks (
                        task_code, sales_order_id, priority, status, total_items,
                        picked_items, assigned_to, notes, created_at, completed_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        task.task_code,
                        task.sales_order_id,
                        task.priority.value,
                        task.status.value,
                        task.total_items,
                        task.picked_items,
                        task.assigned_to,
                        task.notes,
                        task.created_at.isoformat(),
                        to_iso(task.completed_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise DuplicatePickingTaskError(task.sales_order_id) from e
            task.id = cursor.lastrowid

            for item in task.items:
                item.picking_task_id = task.id
                cursor = await conn.execute(
                    """
                    INSERT INTO picking_items (
                        picking_task_id, part_id, storage_location, required_qty,
                        picked_qty, sequence, status, notes, picked_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        task.id,
                        item.part_id,
                        item.storage_location,
                        item.required_qty,
                        item.picked_qty,
                        item.sequence,
                        item.status.value,
                        item.notes,
                        to_iso(item.picked_at),
                    ),
                )
                item.id = cursor.lastrowid

            logger.info("picking_task_stored", task_id=task.id, items=len(task.items))
            return task

    async def get_task(self, task_id: int) -> PickingTask | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM picking_tasks WHERE id = ?", (task_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._with_items(conn, self._row_to_task(row))

    async def get_task_by_sales_order(self, sales_order_id: int) -> PickingTask | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM picking_tasks WHERE sales_order_id = ?", (sales_order_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return await self._with_items(conn, self._row_to_task(row))

    async def update_task(self, task: PickingTask) -> PickingTask:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE picking_tasks SET
                    status = ?,
                    total_items = ?,
                    picked_items = ?,
                    assigned_to = ?,
                    notes = ?,
                    completed_at = ?
                WHERE id = ?
                """,
                (
                    task.status.value,
                    task.total_items,
                    task.picked_items,
                    task.assigned_to,
                    task.notes,
                    to_iso(task.completed_at),
                    task.id,
                ),
            )
            return task

    async def get_item(self, item_id: int) -> PickingItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute(_ITEM_SELECT + " WHERE pi.id = ?", (item_id,))
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def update_item(self, item: PickingItem) -> PickingItem:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE picking_items SET picked_qty = ?, status = ?, notes = ?, picked_at = ?
                WHERE id = ?
                """,
                (item.picked_qty, item.status.value, item.notes, to_iso(item.picked_at), item.id),
            )
            return item

    async def _with_items(self, conn: aiosqlite.Connection, task: PickingTask) -> PickingTask:
        cursor = await conn.execute(
            _ITEM_SELECT + " WHERE pi.picking_task_id = ? ORDER BY pi.sequence", (task.id,)
        )
        task.items = [self._row_to_item(row) for row in await cursor.fetchall()]
        return task

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> PickingTask:
        return PickingTask(
            id=row["id"],
            task_code=row["task_code"],
            sales_order_id=row["sales_order_id"],
            priority=PickingPriority(row["priority"]),
            status=PickingTaskStatus(row["status"]),
            total_items=row["total_items"],
            picked_items=row["picked_items"],
            assigned_to=row["assigned_to"],
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
            completed_at=parse_datetime(row["completed_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PickingItem:
        return PickingItem(
            id=row["id"],
            picking_task_id=row["picking_task_id"],
            part_id=row["part_id"],
            part_code=row["part_code"],
            storage_location=row["storage_location"],
            required_qty=row["required_qty"],
            picked_qty=row["picked_qty"],
            sequence=row["sequence"],
            status=PickingItemStatus(row["status"]),
            notes=row["notes"],
            picked_at=parse_datetime(row["picked_at"]),
        )
