"""Database migrations module."""

from partsync.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    Migration,
    MigrationResult,
    discover_migrations,
    get_migration_status,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "REQUIRED_TABLES",
    "Migration",
    "MigrationResult",
    "discover_migrations",
    "get_migration_status",
    "run_migrations",
    "verify_schema_integrity",
]
