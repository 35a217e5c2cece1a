"""SQLite implementation of stock audit storage."""

from datetime import date, datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.audit import (
    AuditItem,
    AuditRecord,
    AuditStatus,
    AuditType,
    DiscrepancyLog,
    DiscrepancyStatus,
    DiscrepancyType,
)
from partsync.core.exceptions import ConflictError, DuplicateAuditItemError
from partsync.core.interfaces.audit_store import IAuditStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import parse_date, parse_datetime, to_iso

logger = get_logger(__name__)


class SQLiteAuditStore(IAuditStore):
    """Audit headers, counted lines and discrepancy logs."""

    async def create_audit(self, audit: AuditRecord) -> AuditRecord:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO audit_records (
                        audit_code, audit_date, audit_type, status, notes, performed_by,
                        total_items, matched_items, discrepancy_items,
                        inventory_adjusted, completed_at, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        audit.audit_code,
                        audit.audit_date.isoformat(),
                        audit.audit_type.value,
                        audit.status.value,
                        audit.notes,
                        audit.performed_by,
                        audit.total_items,
                        audit.matched_items,
                        audit.discrepancy_items,
                        int(audit.inventory_adjusted),
                        to_iso(audit.completed_at),
                        audit.created_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ConflictError(
                    f"Audit code already exists: {audit.audit_code}",
                    code="DUPLICATE_AUDIT",
                    audit_code=audit.audit_code,
                ) from e
            audit.id = cursor.lastrowid

            for item in audit.items:
                item.audit_id = audit.id
                try:
                    cursor = await conn.execute(
                        """
                        INSERT INTO audit_items (
                            audit_id, part_id, system_qty, counted_qty, notes,
                            counted_at, adjustment_transaction_id
                        ) VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            audit.id,
                            item.part_id,
                            item.system_qty,
                            item.counted_qty,
                            item.notes,
                            to_iso(item.counted_at),
                            item.adjustment_transaction_id,
                        ),
                    )
                except aiosqlite.IntegrityError as e:
                    raise DuplicateAuditItemError(audit.id, item.part_id) from e  # type: ignore[arg-type]
                item.id = cursor.lastrowid

            logger.info("audit_stored", audit_id=audit.id, items=len(audit.items))
            return audit

    async def get_audit(self, audit_id: int) -> AuditRecord | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM audit_records WHERE id = ?", (audit_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            audit = self._row_to_audit(row)

            cursor = await conn.execute(
                "SELECT * FROM audit_items WHERE audit_id = ? ORDER BY id", (audit_id,)
            )
            audit.items = [self._row_to_item(r) for r in await cursor.fetchall()]
            return audit

    async def list_audits(self, limit: int = 100, offset: int = 0) -> list[AuditRecord]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM audit_records ORDER BY id DESC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            return [self._row_to_audit(row) for row in await cursor.fetchall()]

    async def update_audit(self, audit: AuditRecord) -> AuditRecord:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE audit_records SET
                    status = ?,
                    notes = ?,
                    performed_by = ?,
                    total_items = ?,
                    matched_items = ?,
                    discrepancy_items = ?,
                    inventory_adjusted = ?,
                    completed_at = ?
                WHERE id = ?
                """,
                (
                    audit.status.value,
                    audit.notes,
                    audit.performed_by,
                    audit.total_items,
                    audit.matched_items,
                    audit.discrepancy_items,
                    int(audit.inventory_adjusted),
                    to_iso(audit.completed_at),
                    audit.id,
                ),
            )
            return audit

    async def get_item(self, item_id: int) -> AuditItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM audit_items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def update_item(self, item: AuditItem) -> AuditItem:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE audit_items SET
                    counted_qty = ?,
                    notes = ?,
                    counted_at = ?,
                    adjustment_transaction_id = ?
                WHERE id = ?
                """,
                (
                    item.counted_qty,
                    item.notes,
                    to_iso(item.counted_at),
                    item.adjustment_transaction_id,
                    item.id,
                ),
            )
            return item

    async def add_discrepancy_log(self, log: DiscrepancyLog) -> DiscrepancyLog:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO discrepancy_logs (
                    audit_id, audit_item_id, part_id, discrepancy_type, system_qty,
                    counted_qty, discrepancy, status, resolution, resolved_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.audit_id,
                    log.audit_item_id,
                    log.part_id,
                    log.discrepancy_type.value,
                    log.system_qty,
                    log.counted_qty,
                    log.discrepancy,
                    log.status.value,
                    log.resolution,
                    to_iso(log.resolved_at),
                    log.created_at.isoformat(),
                ),
            )
            log.id = cursor.lastrowid
            return log

    async def list_discrepancy_logs(self, audit_id: int) -> list[DiscrepancyLog]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM discrepancy_logs WHERE audit_id = ? ORDER BY id", (audit_id,)
            )
            return [self._row_to_log(row) for row in await cursor.fetchall()]

    async def update_discrepancy_log(self, log: DiscrepancyLog) -> DiscrepancyLog:
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE discrepancy_logs SET
                    discrepancy_type = ?,
                    system_qty = ?,
                    counted_qty = ?,
                    discrepancy = ?,
                    status = ?,
                    resolution = ?,
                    resolved_at = ?
                WHERE id = ?
                """,
                (
                    log.discrepancy_type.value,
                    log.system_qty,
                    log.counted_qty,
                    log.discrepancy,
                    log.status.value,
                    log.resolution,
                    to_iso(log.resolved_at),
                    log.id,
                ),
            )
            return log

    @staticmethod
    def _row_to_audit(row: aiosqlite.Row) -> AuditRecord:
        return AuditRecord(
            id=row["id"],
            audit_code=row["audit_code"],
            audit_date=parse_date(row["audit_date"]) or date.today(),
            audit_type=AuditType(row["audit_type"]),
            status=AuditStatus(row["status"]),
            notes=row["notes"],
            performed_by=row["performed_by"],
            total_items=row["total_items"],
            matched_items=row["matched_items"],
            discrepancy_items=row["discrepancy_items"],
            inventory_adjusted=bool(row["inventory_adjusted"]),
            completed_at=parse_datetime(row["completed_at"]),
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> AuditItem:
        return AuditItem(
            id=row["id"],
            audit_id=row["audit_id"],
            part_id=row["part_id"],
            system_qty=row["system_qty"],
            counted_qty=row["counted_qty"],
            notes=row["notes"],
            counted_at=parse_datetime(row["counted_at"]),
            adjustment_transaction_id=row["adjustment_transaction_id"],
        )

    @staticmethod
    def _row_to_log(row: aiosqlite.Row) -> DiscrepancyLog:
        return DiscrepancyLog(
            id=row["id"],
            audit_id=row["audit_id"],
            audit_item_id=row["audit_item_id"],
            part_id=row["part_id"],
            discrepancy_type=DiscrepancyType(row["discrepancy_type"]),
            system_qty=row["system_qty"],
            counted_qty=row["counted_qty"],
            discrepancy=row["discrepancy"],
            status=DiscrepancyStatus(row["status"]),
            resolution=row["resolution"],
            resolved_at=parse_datetime(row["resolved_at"]),
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )
