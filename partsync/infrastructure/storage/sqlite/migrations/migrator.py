"""
Schema migrations for the PartSync database.

Migrations are ``vNNN_name.sql`` files beside this module. They are applied
in version order and recorded with a checksum in ``schema_migrations``; an
applied file whose checksum changed stops the run.
"""

import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from partsync.config import get_logger, get_settings
from partsync.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILE_RE = re.compile(r"^v(\d{3})_(\w+)\.sql$")

REQUIRED_TABLES = [
    "suppliers",
    "parts",
    "products",
    "bom_items",
    "inventory",
    "transactions",
    "sales_orders",
    "sales_order_items",
    "purchase_orders",
    "purchase_order_items",
    "mrp_results",
    "audit_records",
    "audit_items",
    "discrepancy_logs",
    "picking_tasks",
    "picking_items",
    "code_sequences",
    "schema_migrations",
]

LEDGER_TRIGGERS = ("trg_transactions_no_update", "trg_transactions_no_delete")
MRP_STATUS_CHECK = "status IN ('PENDING', 'ORDERED')"


@dataclass(frozen=True)
class Migration:
    version: str
    name: str
    path: Path

    @property
    def sql(self) -> str:
        return self.path.read_text(encoding="utf-8")

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration files in version order; other ``v*.sql`` names are ignored."""
    migrations = []
    for path in sorted(directory.glob("v*.sql")):
        match = _FILE_RE.match(path.name)
        if match is None:
            logger.warning("migration_file_ignored", file=path.name)
            continue
        migrations.append(Migration(version=match.group(1), name=match.group(2), path=path))
    return migrations


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database, nothing recorded yet
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.sql)
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def run_migrations(
    db_path: Path | None = None,
    directory: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply pending migrations.

    Returns one result per migration attempted; the run stops at the first
    failure.

    Raises:
        DatabaseError: An applied migration file was edited afterwards.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        applied = await _applied_checksums(conn)

        for migration in discover_migrations(directory):
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    raise DatabaseError(
                        "migrate",
                        f"v{migration.version}_{migration.name} changed after it was applied",
                    )
                continue

            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break

    logger.info("migrations_complete", db_path=str(db_path), applied=len(results))
    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = sorted(await _applied_checksums(conn))

    return {
        "exists": True,
        "current_version": applied[-1] if applied else None,
        "applied_migrations": applied,
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Check the database against the invariants the application relies on.

    Besides SQLite's own integrity and foreign key checks: every table
    exists, the ledger is still append-only, MRP rows are constrained to
    PENDING/ORDERED, no stock is negative and each part's stock equals the
    replay of its ledger.
    """
    db_path = db_path or get_settings().storage.db_path
    checks = []

    def check(name: str, passed: bool, **details) -> None:
        checks.append({"check": name, "status": "PASS" if passed else "FAIL", **details})

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]
        check("integrity", integrity == "ok", result=integrity)

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())
        check("foreign_keys", violations == 0, violations=violations)

        cursor = await conn.execute("SELECT type, name, sql FROM sqlite_master")
        objects = {(row[0], row[1]): row[2] or "" for row in await cursor.fetchall()}

        missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in objects]
        check("required_tables", not missing_tables, missing=missing_tables)

        missing_triggers = [t for t in LEDGER_TRIGGERS if ("trigger", t) not in objects]
        check("ledger_append_only", not missing_triggers, missing=missing_triggers)

        mrp_sql = " ".join(objects.get(("table", "mrp_results"), "").split())
        check("mrp_status_constraint", MRP_STATUS_CHECK in mrp_sql)

        if missing_tables:
            return checks

        cursor = await conn.execute(
            "SELECT part_id FROM inventory WHERE current_qty < 0 ORDER BY part_id"
        )
        negative = [row[0] for row in await cursor.fetchall()]
        check("non_negative_stock", not negative, part_ids=negative)

        cursor = await conn.execute(
            """
            SELECT i.part_id
            FROM inventory i
            LEFT JOIN (
                SELECT part_id, SUM(after_qty - before_qty) AS net
                FROM transactions
                GROUP BY part_id
            ) t ON t.part_id = i.part_id
            WHERE i.current_qty != COALESCE(t.net, 0)
            ORDER BY i.part_id
            """
        )
        unbalanced = [row[0] for row in await cursor.fetchall()]
        check("ledger_balance", not unbalanced, part_ids=unbalanced)

    return checks
