"""SQLite implementation of inventory and ledger storage."""

from datetime import datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.inventory import (
    Inventory,
    LowStockAlert,
    ReferenceType,
    Transaction,
    TransactionType,
)
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import parse_datetime, placeholders, to_iso

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory rows and the transaction ledger."""

    async def get_inventory(self, part_id: int) -> Inventory | None:
        """Get the inventory row of a part."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM inventory WHERE part_id = ?", (part_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_inventory(row)

    async def get_inventories(self, part_ids: list[int] | None = None) -> dict[int, Inventory]:
        if part_ids is not None and not part_ids:
            return {}
        query = "SELECT * FROM inventory"
        params: tuple = ()
        if part_ids is not None:
            query += f" WHERE part_id IN ({placeholders(part_ids)})"
            params = tuple(part_ids)
        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return {row["part_id"]: self._row_to_inventory(row) for row in rows}

    async def list_inventory(self, limit: int = 100, offset: int = 0) -> list[Inventory]:
        """List inventory rows with pagination."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT i.* FROM inventory i
                JOIN parts p ON p.id = i.part_id
                ORDER BY p.part_code
                LIMIT ? OFFSET ?
                """,
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_inventory(row) for row in rows]

    async def save_inventory(self, inventory: Inventory) -> Inventory:
        """Upsert keyed on part_id."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory (
                    part_id, current_qty, reserved_qty, incoming_qty,
                    last_inbound_date, last_outbound_date, last_audit_date, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (part_id) DO UPDATE SET
                    current_qty = excluded.current_qty,
                    reserved_qty = excluded.reserved_qty,
                    incoming_qty = excluded.incoming_qty,
                    last_inbound_date = excluded.last_inbound_date,
                    last_outbound_date = excluded.last_outbound_date,
                    last_audit_date = excluded.last_audit_date,
                    updated_at = excluded.updated_at
                RETURNING id
                """,
                (
                    inventory.part_id,
                    inventory.current_qty,
                    inventory.reserved_qty,
                    inventory.incoming_qty,
                    to_iso(inventory.last_inbound_date),
                    to_iso(inventory.last_outbound_date),
                    to_iso(inventory.last_audit_date),
                    inventory.updated_at.isoformat(),
                ),
            )
            row = await cursor.fetchone()
            await cursor.close()
            inventory.id = row[0]
            return inventory

    async def set_incoming(self, incoming: dict[int, int]) -> None:
        async with get_transaction() as conn:
            await conn.execute("UPDATE inventory SET incoming_qty = 0 WHERE incoming_qty != 0")
            if incoming:
                await conn.executemany(
                    """
                    INSERT INTO inventory (part_id, incoming_qty, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT (part_id) DO UPDATE SET incoming_qty = excluded.incoming_qty
                    """,
                    [
                        (part_id, qty, datetime.utcnow().isoformat())
                        for part_id, qty in incoming.items()
                    ],
                )

    async def list_low_stock(self) -> list[LowStockAlert]:
        """Active parts with a safety stock whose on-hand is at or below it."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT p.id AS part_id, p.part_code, p.part_name, p.safety_stock,
                       COALESCE(i.current_qty, 0) AS current_qty,
                       i.last_inbound_date
                FROM parts p
                LEFT JOIN inventory i ON i.part_id = p.id
                WHERE p.is_active = 1
                  AND p.safety_stock > 0
                  AND COALESCE(i.current_qty, 0) <= p.safety_stock
                ORDER BY (p.safety_stock - COALESCE(i.current_qty, 0)) DESC, p.part_code
                """
            )
            rows = await cursor.fetchall()
            return [
                LowStockAlert(
                    part_id=row["part_id"],
                    part_code=row["part_code"],
                    part_name=row["part_name"],
                    current_qty=row["current_qty"],
                    safety_stock=row["safety_stock"],
                    shortage=row["safety_stock"] - row["current_qty"],
                    last_inbound_date=parse_datetime(row["last_inbound_date"]),
                )
                for row in rows
            ]

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a ledger entry."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO transactions (
                    transaction_code, part_id, transaction_type, quantity,
                    before_qty, after_qty, reference_type, reference_id,
                    reason, notes, performed_by, transaction_date
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.transaction_code,
                    transaction.part_id,
                    transaction.transaction_type.value,
                    transaction.quantity,
                    transaction.before_qty,
                    transaction.after_qty,
                    transaction.reference_type.value,
                    transaction.reference_id,
                    transaction.reason,
                    transaction.notes,
                    transaction.performed_by,
                    transaction.transaction_date.isoformat(),
                ),
            )
            transaction.id = cursor.lastrowid
            return transaction

    async def get_transaction(self, transaction_id: int) -> Transaction | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM transactions WHERE id = ?", (transaction_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_transaction(row)

    async def list_transactions(
        self, part_id: int | None = None, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """Ledger entries, newest first."""
        query = "SELECT * FROM transactions"
        params: list = []
        if part_id is not None:
            query += " WHERE part_id = ?"
            params.append(part_id)
        query += " ORDER BY id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, tuple(params))
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    @staticmethod
    def _row_to_inventory(row: aiosqlite.Row) -> Inventory:
        """Convert a database row to an Inventory entity."""
        return Inventory(
            id=row["id"],
            part_id=row["part_id"],
            current_qty=row["current_qty"],
            reserved_qty=row["reserved_qty"],
            incoming_qty=row["incoming_qty"],
            last_inbound_date=parse_datetime(row["last_inbound_date"]),
            last_outbound_date=parse_datetime(row["last_outbound_date"]),
            last_audit_date=parse_datetime(row["last_audit_date"]),
            updated_at=parse_datetime(row["updated_at"]) or datetime.utcnow(),
        )

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> Transaction:
        """Convert a database row to a Transaction entity."""
        return Transaction(
            id=row["id"],
            transaction_code=row["transaction_code"],
            part_id=row["part_id"],
            transaction_type=TransactionType(row["transaction_type"]),
            quantity=row["quantity"],
            before_qty=row["before_qty"],
            after_qty=row["after_qty"],
            reference_type=ReferenceType(row["reference_type"]),
            reference_id=row["reference_id"],
            reason=row["reason"],
            notes=row["notes"],
            performed_by=row["performed_by"],
            transaction_date=parse_datetime(row["transaction_date"]) or datetime.utcnow(),
        )
