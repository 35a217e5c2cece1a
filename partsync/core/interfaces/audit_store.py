"""Abstract interface for stock audit storage."""

from abc import ABC, abstractmethod

from partsync.core.entities.audit import AuditItem, AuditRecord, DiscrepancyLog


class IAuditStore(ABC):
    """Interface for audit records, items and discrepancy logs."""

    @abstractmethod
    async def create_audit(self, audit: AuditRecord) -> AuditRecord:
        """Create an audit with its items. Raises ConflictError on a duplicate part."""
        pass

    @abstractmethod
    async def get_audit(self, audit_id: int) -> AuditRecord | None:
        """Get audit with items."""
        pass

    @abstractmethod
    async def list_audits(self, limit: int = 100, offset: int = 0) -> list[AuditRecord]:
        """List audit headers, newest first."""
        pass

    @abstractmethod
    async def update_audit(self, audit: AuditRecord) -> AuditRecord:
        """Update audit header (status, counters, flags)."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> AuditItem | None:
        """Get audit item by ID."""
        pass

    @abstractmethod
    async def update_item(self, item: AuditItem) -> AuditItem:
        """Update counted quantity, notes and adjustment link."""
        pass

    @abstractmethod
    async def add_discrepancy_log(self, log: DiscrepancyLog) -> DiscrepancyLog:
        """Record a discrepancy."""
        pass

    @abstractmethod
    async def list_discrepancy_logs(self, audit_id: int) -> list[DiscrepancyLog]:
        """Discrepancy logs of an audit."""
        pass

    @abstractmethod
    async def update_discrepancy_log(self, log: DiscrepancyLog) -> DiscrepancyLog:
        """Update status and resolution of a discrepancy log."""
        pass
