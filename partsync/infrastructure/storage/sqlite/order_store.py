"""SQLite implementation of sales and purchase order storage."""

from datetime import date, datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderItemStatus,
    PurchaseOrderStatus,
)
from partsync.core.entities.sales_order import SalesOrder, SalesOrderItem, SalesOrderStatus
from partsync.core.exceptions import ConflictError
from partsync.core.interfaces.order_store import IPurchaseOrderStore, ISalesOrderStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import (
    parse_date,
    parse_datetime,
    placeholders,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteSalesOrderStore(ISalesOrderStore):
    """Sales order headers and lines."""

    async def create_sales_order(self, order: SalesOrder) -> SalesOrder:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO sales_orders (
                        order_code, customer_name, project, order_date,
                        due_date, status, notes, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.order_code,
                        order.customer_name,
                        order.project,
                        order.order_date.isoformat(),
                        to_iso(order.due_date),
                        order.status.value,
                        order.notes,
                        order.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Sales order code already exists: {order.order_code}",
                    code="DUPLICATE_SALES_ORDER",
                    order_code=order.order_code,
                ) from e
            order.id = cursor.lastrowid

            for item in order.items:
                item.sales_order_id = order.id
                cursor = await conn.execute(
                    """
                    INSERT INTO sales_order_items (
                        sales_order_id, product_id, order_qty, produced_qty, status, due_date
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.id,
                        item.product_id,
                        item.order_qty,
                        item.produced_qty,
                        item.status,
                        to_iso(item.due_date),
                    ),
                )
                item.id = cursor.lastrowid

            logger.info(
                "sales_order_created",
                sales_order_id=order.id,
                order_code=order.order_code,
                items=len(order.items),
            )
            return order

    async def get_sales_order(self, sales_order_id: int) -> SalesOrder | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM sales_orders WHERE id = ?", (sales_order_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            order = self._row_to_sales_order(row)
            order.items = (await self._load_items(conn, [sales_order_id])).get(sales_order_id, [])
            return order

    async def get_sales_orders(self, sales_order_ids: list[int]) -> dict[int, SalesOrder]:
        if not sales_order_ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM sales_orders WHERE id IN ({placeholders(sales_order_ids)})",
                tuple(sales_order_ids),
            )
            orders = [self._row_to_sales_order(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [o.id for o in orders if o.id is not None])

        result = {}
        for order in orders:
            order.items = items.get(order.id, [])  # type: ignore[arg-type]
            result[order.id] = order
        return result

    async def list_sales_orders(
        self,
        statuses: list[str],
        sales_order_ids: list[int] | None = None,
    ) -> list[SalesOrder]:
        if not statuses or (sales_order_ids is not None and not sales_order_ids):
            return []
        query = f"SELECT * FROM sales_orders WHERE status IN ({placeholders(statuses)})"
        params: list = list(statuses)
        if sales_order_ids is not None:
            query += f" AND id IN ({placeholders(sales_order_ids)})"
            params.extend(sales_order_ids)
        query += " ORDER BY id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, tuple(params))
            orders = [self._row_to_sales_order(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [o.id for o in orders if o.id is not None])

        for order in orders:
            order.items = items.get(order.id, [])  # type: ignore[arg-type]
        return orders

    @staticmethod
    async def _load_items(
        conn: aiosqlite.Connection, order_ids: list[int]
    ) -> dict[int, list[SalesOrderItem]]:
        if not order_ids:
            return {}
        cursor = await conn.execute(
            f"""
            SELECT * FROM sales_order_items
            WHERE sales_order_id IN ({placeholders(order_ids)})
            ORDER BY sales_order_id, id
            """,
            tuple(order_ids),
        )
        items: dict[int, list[SalesOrderItem]] = {}
        for row in await cursor.fetchall():
            items.setdefault(row["sales_order_id"], []).append(
                SalesOrderItem(
                    id=row["id"],
                    sales_order_id=row["sales_order_id"],
                    product_id=row["product_id"],
                    order_qty=row["order_qty"],
                    produced_qty=row["produced_qty"],
                    status=row["status"],
                    due_date=parse_date(row["due_date"]),
                )
            )
        return items

    @staticmethod
    def _row_to_sales_order(row: aiosqlite.Row) -> SalesOrder:
        return SalesOrder(
            id=row["id"],
            order_code=row["order_code"],
            customer_name=row["customer_name"],
            project=row["project"],
            order_date=parse_date(row["order_date"]) or date.today(),
            due_date=parse_date(row["due_date"]),
            status=SalesOrderStatus(row["status"]),
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )


class SQLitePurchaseOrderStore(IPurchaseOrderStore):
    """Purchase order headers and lines."""

    async def create_order(self, order: PurchaseOrder) -> PurchaseOrder:
        """Create a purchase order with its items."""
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO purchase_orders (
                        order_code, supplier_id, project, sales_order_id, order_date,
                        expected_date, actual_date, status, total_amount, notes,
                        created_by, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.order_code,
                        order.supplier_id,
                        order.project,
                        order.sales_order_id,
                        order.order_date.isoformat(),
                        to_iso(order.expected_date),
                        to_iso(order.actual_date),
                        order.status.value,
                        order.total_amount,
                        order.notes,
                        order.created_by,
                        order.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Purchase order code already exists: {order.order_code}",
                    code="DUPLICATE_PURCHASE_ORDER",
                    order_code=order.order_code,
                ) from e
            order.id = cursor.lastrowid

            for item in order.items:
                item.order_id = order.id
                cursor = await conn.execute(
                    """
                    INSERT INTO purchase_order_items (
                        order_id, part_id, order_qty, received_qty,
                        unit_price, total_price, status, notes
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.id,
                        item.part_id,
                        item.order_qty,
                        item.received_qty,
                        item.unit_price,
                        item.total_price,
                        item.status.value,
                        item.notes,
                    ),
                )
                item.id = cursor.lastrowid

            logger.info(
                "purchase_order_created",
                order_id=order.id,
                order_code=order.order_code,
                supplier_id=order.supplier_id,
                items=len(order.items),
            )
            return order

    async def get_order(self, order_id: int) -> PurchaseOrder | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM purchase_orders WHERE id = ?", (order_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            order = self._row_to_order(row)
            order.items = (await self._load_items(conn, [order_id])).get(order_id, [])
            return order

    async def list_orders(
        self,
        status: PurchaseOrderStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[PurchaseOrder]:
        query = "SELECT * FROM purchase_orders"
        params: list = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(status.value)
        query += " ORDER BY id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, tuple(params))
            orders = [self._row_to_order(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [o.id for o in orders if o.id is not None])

        for order in orders:
            order.items = items.get(order.id, [])  # type: ignore[arg-type]
        return orders

    async def update_order(self, order: PurchaseOrder) -> PurchaseOrder:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE purchase_orders SET
                    status = ?,
                    expected_date = ?,
                    actual_date = ?,
                    total_amount = ?,
                    notes = ?
                WHERE id = ?
                """,
                (
                    order.status.value,
                    to_iso(order.expected_date),
                    to_iso(order.actual_date),
                    order.total_amount,
                    order.notes,
                    order.id,
                ),
            )
            order.items = (await self._load_items(conn, [order.id])).get(order.id, [])  # type: ignore[list-item, arg-type]
            logger.info("purchase_order_updated", order_id=order.id, status=order.status.value)
            return order

    async def update_item(self, item: PurchaseOrderItem) -> PurchaseOrderItem:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE purchase_order_items SET received_qty = ?, status = ?, notes = ?
                WHERE id = ?
                """,
                (item.received_qty, item.status.value, item.notes, item.id),
            )
            return item

    async def incoming_by_part(self, statuses: list[str]) -> dict[int, int]:
        if not statuses:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT poi.part_id, SUM(poi.order_qty - poi.received_qty) AS outstanding
                FROM purchase_order_items poi
                JOIN purchase_orders po ON po.id = poi.order_id
                WHERE po.status IN ({placeholders(statuses)})
                GROUP BY poi.part_id
                """,
                tuple(statuses),
            )
            return {row["part_id"]: int(row["outstanding"]) for row in await cursor.fetchall()}

    @staticmethod
    async def _load_items(
        conn: aiosqlite.Connection, order_ids: list[int]
    ) -> dict[int, list[PurchaseOrderItem]]:
        if not order_ids:
            return {}
        cursor = await conn.execute(
            f"""
            SELECT * FROM purchase_order_items
            WHERE order_id IN ({placeholders(order_ids)})
            ORDER BY order_id, id
            """,
            tuple(order_ids),
        )
        items: dict[int, list[PurchaseOrderItem]] = {}
        for row in await cursor.fetchall():
            items.setdefault(row["order_id"], []).append(
                PurchaseOrderItem(
                    id=row["id"],
                    order_id=row["order_id"],
                    part_id=row["part_id"],
                    order_qty=row["order_qty"],
                    received_qty=row["received_qty"],
                    unit_price=float(row["unit_price"]),
                    total_price=float(row["total_price"]),
                    status=PurchaseOrderItemStatus(row["status"]),
                    notes=row["notes"],
                )
            )
        return items

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> PurchaseOrder:
        return PurchaseOrder(
            id=row["id"],
            order_code=row["order_code"],
            supplier_id=row["supplier_id"],
            project=row["project"],
            sales_order_id=row["sales_order_id"],
            order_date=parse_date(row["order_date"]) or date.today(),
            expected_date=parse_date(row["expected_date"]),
            actual_date=parse_date(row["actual_date"]),
            status=PurchaseOrderStatus(row["status"]),
            total_amount=float(row["total_amount"]),
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )
