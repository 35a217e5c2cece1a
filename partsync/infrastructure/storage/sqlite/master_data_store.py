"""SQLite implementation of master data storage."""

from datetime import datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.part import BomItem, Part, Product, Supplier
from partsync.core.exceptions import ConflictError
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import parse_datetime, placeholders

logger = get_logger(__name__)


class SQLiteMasterDataStore(IMasterDataStore):
    """Suppliers, parts, products and BOM lines."""

    # Suppliers

    async def create_supplier(self, supplier: Supplier) -> Supplier:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO suppliers (code, name, lead_time_days, is_active, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        supplier.code,
                        supplier.name,
                        supplier.lead_time_days,
                        int(supplier.is_active),
                        supplier.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Supplier code already exists: {supplier.code}",
                    code="DUPLICATE_SUPPLIER",
                    supplier_code=supplier.code,
                ) from e
            supplier.id = cursor.lastrowid
            logger.info("supplier_created", supplier_id=supplier.id, code=supplier.code)
            return supplier

    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM suppliers WHERE id = ?", (supplier_id,))
            row = await cursor.fetchone()
            return self._row_to_supplier(row) if row else None

    async def get_suppliers(self, supplier_ids: list[int]) -> dict[int, Supplier]:
        if not supplier_ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM suppliers WHERE id IN ({placeholders(supplier_ids)})",
                tuple(supplier_ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_supplier(row) for row in rows}

    # Parts

    async def create_part(self, part: Part) -> Part:
        now = datetime.utcnow()
        part.created_at = now
        part.updated_at = now
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO parts (
                        part_code, part_name, unit, unit_price, safety_stock,
                        reorder_point, min_order_qty, lead_time_days, supplier_id,
                        storage_location, is_active, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        part.part_code,
                        part.part_name,
                        part.unit,
                        part.unit_price,
                        part.safety_stock,
                        part.reorder_point,
                        part.min_order_qty,
                        part.lead_time_days,
                        part.supplier_id,
                        part.storage_location,
                        int(part.is_active),
                        part.created_at.isoformat(),
                        part.updated_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Part code already exists: {part.part_code}",
                    code="DUPLICATE_PART",
                    part_code=part.part_code,
                ) from e
            part.id = cursor.lastrowid
            logger.info("part_created", part_id=part.id, part_code=part.part_code)
            return part

    async def get_part(self, part_id: int) -> Part | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM parts WHERE id = ?", (part_id,))
            row = await cursor.fetchone()
            return self._row_to_part(row) if row else None

    async def get_parts(self, part_ids: list[int]) -> dict[int, Part]:
        if not part_ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM parts WHERE id IN ({placeholders(part_ids)})",
                tuple(part_ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_part(row) for row in rows}

    async def list_parts(self, active_only: bool = True) -> list[Part]:
        query = "SELECT * FROM parts"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY part_code"
        async with get_connection() as conn:
            cursor = await conn.execute(query)
            rows = await cursor.fetchall()
            return [self._row_to_part(row) for row in rows]

    # Products and BOM

    async def create_product(self, product: Product) -> Product:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO products (product_code, product_name, is_active, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        product.product_code,
                        product.product_name,
                        int(product.is_active),
                        product.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Product code already exists: {product.product_code}",
                    code="DUPLICATE_PRODUCT",
                    product_code=product.product_code,
                ) from e
            product.id = cursor.lastrowid
            logger.info("product_created", product_id=product.id, code=product.product_code)
            return product

    async def get_product(self, product_id: int) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return Product(
                id=row["id"],
                product_code=row["product_code"],
                product_name=row["product_name"],
                is_active=bool(row["is_active"]),
                created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
            )

    async def add_bom_item(self, item: BomItem) -> BomItem:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO bom_items (
                        product_id, part_id, quantity_per_unit, loss_rate, is_active
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        item.product_id,
                        item.part_id,
                        item.quantity_per_unit,
                        item.loss_rate,
                        int(item.is_active),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Part {item.part_id} is already on the BOM of product {item.product_id}",
                    code="DUPLICATE_BOM_ITEM",
                    product_id=item.product_id,
                    part_id=item.part_id,
                ) from e
            item.id = cursor.lastrowid
            return item

    async def get_boms(self, product_ids: list[int]) -> dict[int, list[BomItem]]:
        if not product_ids:
            return {}
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM bom_items
                WHERE is_active = 1 AND product_id IN ({placeholders(product_ids)})
                ORDER BY product_id, part_id
                """,
                tuple(product_ids),
            )
            rows = await cursor.fetchall()

        boms: dict[int, list[BomItem]] = {}
        for row in rows:
            boms.setdefault(row["product_id"], []).append(
                BomItem(
                    id=row["id"],
                    product_id=row["product_id"],
                    part_id=row["part_id"],
                    quantity_per_unit=float(row["quantity_per_unit"]),
                    loss_rate=float(row["loss_rate"]),
                    is_active=bool(row["is_active"]),
                )
            )
        return boms

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            lead_time_days=row["lead_time_days"],
            is_active=bool(row["is_active"]),
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )

    @staticmethod
    def _row_to_part(row: aiosqlite.Row) -> Part:
        return Part(
            id=row["id"],
            part_code=row["part_code"],
            part_name=row["part_name"],
            unit=row["unit"],
            unit_price=float(row["unit_price"]),
            safety_stock=row["safety_stock"],
            reorder_point=row["reorder_point"],
            min_order_qty=row["min_order_qty"],
            lead_time_days=row["lead_time_days"],
            supplier_id=row["supplier_id"],
            storage_location=row["storage_location"],
            is_active=bool(row["is_active"]),
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
            updated_at=parse_datetime(row["updated_at"]) or datetime.utcnow(),
        )
