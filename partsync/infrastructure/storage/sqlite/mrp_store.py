"""SQLite implementation of MRP result storage."""

import json
from datetime import date, datetime

import aiosqlite

from partsync.config import get_logger
from partsync.core.entities.mrp import MrpResult, MrpStatus, MrpUrgency
from partsync.core.interfaces.mrp_store import IMrpResultStore
from partsync.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from partsync.infrastructure.storage.sqlite.rows import (
    parse_date,
    parse_datetime,
    placeholders,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteMrpResultStore(IMrpResultStore):
    """MRP rows; PENDING rows are replaced on every run, ORDERED rows are kept."""

    async def replace_pending(
        self,
        results: list[MrpResult],
        sales_order_id: int | None = None,
    ) -> list[MrpResult]:
        async with get_transaction() as conn:
            if sales_order_id is None:
                cursor = await conn.execute("DELETE FROM mrp_results WHERE status = ?", ("PENDING",))
            else:
                cursor = await conn.execute(
                    "DELETE FROM mrp_results WHERE status = ? AND sales_order_id = ?",
                    ("PENDING", sales_order_id),
                )
            deleted = cursor.rowcount

            for result in results:
                cursor = await conn.execute(
                    """
                    INSERT INTO mrp_results (
                        part_id, sales_order_id, contributing_sales_order_ids,
                        calculation_date, gross_requirement, current_stock,
                        reserved_qty, incoming_qty, safety_stock, net_requirement,
                        suggested_order_qty, suggested_order_date, earliest_due_date,
                        urgency, status, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        result.part_id,
                        result.sales_order_id,
                        json.dumps(result.contributing_sales_order_ids),
                        result.calculation_date.isoformat(),
                        result.gross_requirement,
                        result.current_stock,
                        result.reserved_qty,
                        result.incoming_qty,
                        result.safety_stock,
                        result.net_requirement,
                        result.suggested_order_qty,
                        to_iso(result.suggested_order_date),
                        to_iso(result.earliest_due_date),
                        result.urgency.value,
                        result.status.value,
                        result.created_at.isoformat(),
                    ),
                )
                result.id = cursor.lastrowid

            logger.info(
                "mrp_results_replaced",
                deleted=deleted,
                inserted=len(results),
                sales_order_id=sales_order_id,
            )
            return results

    async def get_result(self, result_id: int) -> MrpResult | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM mrp_results WHERE id = ?", (result_id,))
            row = await cursor.fetchone()
            return self._row_to_result(row) if row else None

    async def list_results(
        self,
        status: MrpStatus | None = None,
        urgency: MrpUrgency | None = None,
    ) -> list[MrpResult]:
        conditions = []
        params: list = []
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if urgency is not None:
            conditions.append("urgency = ?")
            params.append(urgency.value)

        query = "SELECT * FROM mrp_results"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        # Rows without a date (reorder-point rows) sort last
        query += " ORDER BY suggested_order_date IS NULL, suggested_order_date, part_id, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, tuple(params))
            return [self._row_to_result(row) for row in await cursor.fetchall()]

    async def find_by_part(
        self, part_id: int, sales_order_id: int | None = None
    ) -> list[MrpResult]:
        """
        A sales order matches when it is the row's order or one of its contributors.

        Without a sales order only unattributed rows (reorder-point triggers) match.
        """
        query = "SELECT * FROM mrp_results WHERE part_id = ?"
        params: list = [part_id]
        if sales_order_id is not None:
            query += """
                AND (
                    sales_order_id = ?
                    OR EXISTS (
                        SELECT 1 FROM json_each(mrp_results.contributing_sales_order_ids)
                        WHERE value = ?
                    )
                )
            """
            params.extend([sales_order_id, sales_order_id])
        else:
            query += " AND sales_order_id IS NULL"
        query += " ORDER BY id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, tuple(params))
            return [self._row_to_result(row) for row in await cursor.fetchall()]

    async def mark_ordered(self, result_ids: list[int]) -> int:
        if not result_ids:
            return 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"""
                UPDATE mrp_results SET status = ?
                WHERE status = ? AND id IN ({placeholders(result_ids)})
                """,
                ("ORDERED", "PENDING", *result_ids),
            )
            logger.info("mrp_results_marked_ordered", count=cursor.rowcount)
            return cursor.rowcount

    @staticmethod
    def _row_to_result(row: aiosqlite.Row) -> MrpResult:
        try:
            contributors = json.loads(row["contributing_sales_order_ids"] or "[]")
        except (ValueError, TypeError):
            contributors = []

        return MrpResult(
            id=row["id"],
            part_id=row["part_id"],
            sales_order_id=row["sales_order_id"],
            contributing_sales_order_ids=contributors,
            calculation_date=parse_date(row["calculation_date"]) or date.today(),
            gross_requirement=row["gross_requirement"],
            current_stock=row["current_stock"],
            reserved_qty=row["reserved_qty"],
            incoming_qty=row["incoming_qty"],
            safety_stock=row["safety_stock"],
            net_requirement=row["net_requirement"],
            suggested_order_qty=row["suggested_order_qty"],
            suggested_order_date=parse_date(row["suggested_order_date"]),
            earliest_due_date=parse_date(row["earliest_due_date"]),
            urgency=MrpUrgency(row["urgency"]),
            status=MrpStatus(row["status"]),
            created_at=parse_datetime(row["created_at"]) or datetime.utcnow(),
        )
