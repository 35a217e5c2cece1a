"""
Audit use cases.

Create an audit, record counts, start or complete it, and revert a
completed audit.
"""

from partsync.application.dto.requests import (
    CreateAuditRequest,
    RecordAuditCountRequest,
    UpdateAuditRequest,
)
from partsync.application.dto.responses import (
    AuditAdjustmentResponse,
    AuditResponse,
    AuditUpdateResponse,
    DiscrepancyLogResponse,
)
from partsync.config import get_logger
from partsync.core.entities.audit import AuditRecord
from partsync.core.services.audit_reconciliation import (
    AuditCompletion,
    AuditReconciliationService,
)

logger = get_logger(__name__)


class _AuditUseCase:
    def __init__(self, audits: AuditReconciliationService | None = None):
        self._audits = audits

    async def _get_audits(self) -> AuditReconciliationService:
        if self._audits is None:
            from partsync.application.services import get_audit_service

            self._audits = await get_audit_service()
        return self._audits

    def to_response(self, audit: AuditRecord) -> AuditResponse:
        return AuditResponse.from_entity(audit)


class CreateAuditUseCase(_AuditUseCase):
    """Plan an audit with system quantities snapshotted now."""

    async def execute(
        self, request: CreateAuditRequest, performed_by: str | None = None
    ) -> AuditRecord:
        audits = await self._get_audits()
        return await audits.create_audit(
            audit_date=request.audit_date,
            audit_type=request.audit_type,
            part_ids=request.part_ids,
            notes=request.notes,
            performed_by=performed_by,
        )


class GetAuditUseCase(_AuditUseCase):
    async def execute(self, audit_id: int) -> AuditRecord:
        audits = await self._get_audits()
        return await audits.get_audit(audit_id)


class RecordAuditCountUseCase(_AuditUseCase):
    """Store the physical count of one audit line."""

    async def execute(self, item_id: int, request: RecordAuditCountRequest) -> AuditRecord:
        audits = await self._get_audits()
        return await audits.record_count(item_id, request.counted_qty, request.notes)


class UpdateAuditUseCase(_AuditUseCase):
    """Move an audit to IN_PROGRESS or COMPLETED."""

    async def execute(
        self,
        audit_id: int,
        request: UpdateAuditRequest,
        performed_by: str | None = None,
    ) -> AuditCompletion | AuditRecord:
        audits = await self._get_audits()
        if request.status == "IN_PROGRESS":
            return await audits.start_audit(audit_id)
        return await audits.complete_audit(
            audit_id,
            adjust_inventory=request.adjust_inventory,
            performed_by=performed_by,
        )

    def to_update_response(self, result: AuditCompletion | AuditRecord) -> AuditUpdateResponse:
        if isinstance(result, AuditRecord):
            return AuditUpdateResponse(audit=AuditResponse.from_entity(result))
        return AuditUpdateResponse(
            audit=AuditResponse.from_entity(result.audit),
            mode=result.mode,
            adjustments=[
                AuditAdjustmentResponse(
                    audit_item_id=a.audit_item_id,
                    part_id=a.part_id,
                    system_qty=a.system_qty,
                    counted_qty=a.counted_qty,
                    discrepancy=a.discrepancy,
                    transaction_id=a.transaction_id,
                )
                for a in result.adjustments
            ],
            discrepancy_logs=[DiscrepancyLogResponse.from_entity(d) for d in result.discrepancy_logs],
        )


class RevertAuditUseCase(_AuditUseCase):
    """Undo the stock adjustments of a completed audit."""

    async def execute(self, audit_id: int, performed_by: str | None = None) -> AuditRecord:
        audits = await self._get_audits()
        return await audits.revert_completed_audit(audit_id, performed_by=performed_by)
