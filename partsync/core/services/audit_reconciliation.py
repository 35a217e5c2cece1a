"""
Audit Reconciliation.

Physical stock counts against the system quantity snapshotted when the audit
was created. Completion either books ADJUSTMENT movements through the ledger
or only records the discrepancies (report-only). A completed audit can be
reverted, which undoes its adjustments with compensating movements.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

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
from partsync.core.entities.inventory import MovementReference, ReferenceType, TransactionType
from partsync.core.exceptions import (
    AuditItemNotFoundError,
    AuditNotFoundError,
    InvalidStateError,
    PartNotFoundError,
    TransactionNotFoundError,
    ValidationError,
)
from partsync.core.interfaces.audit_store import IAuditStore
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.core.interfaces.master_data_store import IMasterDataStore
from partsync.core.interfaces.unit_of_work import IUnitOfWork
from partsync.core.services.codes import AUDIT_PREFIX, CodeGenerator
from partsync.core.services.ledger import InventoryLedger

logger = get_logger(__name__)

MODE_ADJUSTED = "ADJUSTED"
MODE_REPORT_ONLY = "REPORT_ONLY"

_OPEN_STATUSES = [AuditStatus.PLANNED.value, AuditStatus.IN_PROGRESS.value]


@dataclass
class AuditAdjustment:
    audit_item_id: int
    part_id: int
    system_qty: int
    counted_qty: int
    discrepancy: int
    transaction_id: int | None = None


@dataclass
class AuditCompletion:
    audit: AuditRecord
    mode: str
    adjustments: list[AuditAdjustment] = field(default_factory=list)
    discrepancy_logs: list[DiscrepancyLog] = field(default_factory=list)


class AuditReconciliationService:
    def __init__(
        self,
        audit_store: IAuditStore,
        inventory_store: IInventoryStore,
        master_store: IMasterDataStore,
        ledger: InventoryLedger,
        unit_of_work: IUnitOfWork,
        codes: CodeGenerator,
    ) -> None:
        self._audits = audit_store
        self._inventory = inventory_store
        self._master = master_store
        self._ledger = ledger
        self._uow = unit_of_work
        self._codes = codes

    async def create_audit(
        self,
        audit_date: date | None = None,
        audit_type: AuditType = AuditType.SPOT,
        part_ids: list[int] | None = None,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> AuditRecord:
        """
        Create a PLANNED audit with system quantities snapshotted now.

        Args:
            part_ids: Parts to count; all active parts when omitted.
        """
        audit_date = audit_date or date.today()

        if part_ids:
            unique_ids = list(dict.fromkeys(part_ids))
            parts = await self._master.get_parts(unique_ids)
            for part_id in unique_ids:
                if part_id not in parts:
                    raise PartNotFoundError(part_id)
        else:
            unique_ids = [p.id for p in await self._master.list_parts(active_only=True) if p.id]

        async with self._uow.transaction():
            inventories = await self._inventory.get_inventories(unique_ids)
            code = await self._codes.next_code(AUDIT_PREFIX, audit_date)
            audit = await self._audits.create_audit(
                AuditRecord(
                    audit_code=code,
                    audit_date=audit_date,
                    audit_type=audit_type,
                    notes=notes,
                    performed_by=performed_by,
                    items=[
                        AuditItem(
                            part_id=part_id,
                            system_qty=(
                                inventories[part_id].current_qty if part_id in inventories else 0
                            ),
                        )
                        for part_id in unique_ids
                    ],
                )
            )

        logger.info("audit_created", audit_code=audit.audit_code, items=len(audit.items))
        return audit

    async def get_audit(self, audit_id: int) -> AuditRecord:
        audit = await self._audits.get_audit(audit_id)
        if audit is None:
            raise AuditNotFoundError(audit_id)
        return audit

    async def start_audit(self, audit_id: int) -> AuditRecord:
        audit = await self.get_audit(audit_id)
        if audit.status == AuditStatus.IN_PROGRESS:
            return audit
        if audit.status != AuditStatus.PLANNED:
            raise InvalidStateError("Audit", audit_id, audit.status.value, [AuditStatus.PLANNED.value])
        audit.status = AuditStatus.IN_PROGRESS
        return await self._audits.update_audit(audit)

    async def record_count(
        self, item_id: int, counted_qty: int, notes: str | None = None
    ) -> AuditRecord:
        """Store a physical count; the first count moves the audit to IN_PROGRESS."""
        if counted_qty < 0:
            raise ValidationError("counted_qty", "must be >= 0", counted_qty)

        async with self._uow.transaction():
            item = await self._audits.get_item(item_id)
            if item is None:
                raise AuditItemNotFoundError(item_id)
            audit = await self.get_audit(item.audit_id)  # type: ignore[arg-type]
            if audit.status.value not in _OPEN_STATUSES:
                raise InvalidStateError("Audit", audit.id, audit.status.value, _OPEN_STATUSES)  # type: ignore[arg-type]

            item.counted_qty = counted_qty
            item.counted_at = datetime.utcnow()
            if notes is not None:
                item.notes = notes
            await self._audits.update_item(item)

            audit.items = [item if i.id == item.id else i for i in audit.items]
            if audit.status == AuditStatus.PLANNED:
                audit.status = AuditStatus.IN_PROGRESS
            audit.recount()
            audit = await self._audits.update_audit(audit)

        logger.info(
            "audit_item_counted",
            audit_code=audit.audit_code,
            part_id=item.part_id,
            system_qty=item.system_qty,
            counted_qty=counted_qty,
            discrepancy=item.discrepancy,
        )
        return audit

    async def complete_audit(
        self,
        audit_id: int,
        adjust_inventory: bool,
        performed_by: str | None = None,
    ) -> AuditCompletion:
        """
        Finalize an audit.

        With ``adjust_inventory`` every counted line with a discrepancy gets an
        ADJUSTMENT to its counted quantity and a RESOLVED discrepancy log.
        Without it the discrepancies are logged OPEN and stock is untouched.
        Any failure rolls back the whole completion.
        """
        completion: AuditCompletion
        async with self._uow.transaction():
            audit = await self.get_audit(audit_id)
            if audit.status.value not in _OPEN_STATUSES:
                raise InvalidStateError("Audit", audit_id, audit.status.value, _OPEN_STATUSES)

            existing_logs = {
                log.audit_item_id: log for log in await self._audits.list_discrepancy_logs(audit_id)
            }
            completion = AuditCompletion(
                audit=audit,
                mode=MODE_ADJUSTED if adjust_inventory else MODE_REPORT_ONLY,
            )
            now = datetime.utcnow()

            for item in audit.items:
                discrepancy = item.discrepancy
                if not discrepancy:
                    continue

                adjustment = AuditAdjustment(
                    audit_item_id=item.id,  # type: ignore[arg-type]
                    part_id=item.part_id,
                    system_qty=item.system_qty,
                    counted_qty=item.counted_qty,  # type: ignore[arg-type]
                    discrepancy=discrepancy,
                )
                if adjust_inventory:
                    entry = await self._ledger.apply_movement(
                        item.part_id,
                        TransactionType.ADJUSTMENT,
                        reference=MovementReference(
                            reference_type=ReferenceType.AUDIT,
                            reference_id=audit.audit_code,
                        ),
                        reason=f"Stock audit adjustment ({audit.audit_code})",
                        performed_by=performed_by,
                        new_quantity=item.counted_qty,
                    )
                    adjustment.transaction_id = entry.transaction.id
                    item.adjustment_transaction_id = entry.transaction.id
                    await self._audits.update_item(item)

                completion.adjustments.append(adjustment)
                completion.discrepancy_logs.append(
                    await self._log_discrepancy(
                        existing_logs.get(item.id),  # type: ignore[arg-type]
                        audit_id,
                        item,
                        resolved=adjust_inventory,
                        now=now,
                    )
                )

            audit.recount()
            audit.status = AuditStatus.COMPLETED
            audit.inventory_adjusted = adjust_inventory
            audit.completed_at = now
            completion.audit = await self._audits.update_audit(audit)

        logger.info(
            "audit_completed",
            audit_code=completion.audit.audit_code,
            mode=completion.mode,
            discrepancies=len(completion.adjustments),
        )
        return completion

    async def _log_discrepancy(
        self,
        existing: DiscrepancyLog | None,
        audit_id: int,
        item: AuditItem,
        resolved: bool,
        now: datetime,
    ) -> DiscrepancyLog:
        discrepancy = item.discrepancy or 0
        status = DiscrepancyStatus.RESOLVED if resolved else DiscrepancyStatus.OPEN
        resolution = "Inventory adjusted" if resolved else None
        resolved_at = now if resolved else None

        if existing is not None:
            existing.system_qty = item.system_qty
            existing.counted_qty = item.counted_qty  # type: ignore[assignment]
            existing.discrepancy = discrepancy
            existing.discrepancy_type = (
                DiscrepancyType.OVERAGE if discrepancy > 0 else DiscrepancyType.SHORTAGE
            )
            existing.status = status
            existing.resolution = resolution
            existing.resolved_at = resolved_at
            return await self._audits.update_discrepancy_log(existing)

        return await self._audits.add_discrepancy_log(
            DiscrepancyLog(
                audit_id=audit_id,
                audit_item_id=item.id,  # type: ignore[arg-type]
                part_id=item.part_id,
                discrepancy_type=(
                    DiscrepancyType.OVERAGE if discrepancy > 0 else DiscrepancyType.SHORTAGE
                ),
                system_qty=item.system_qty,
                counted_qty=item.counted_qty,  # type: ignore[arg-type]
                discrepancy=discrepancy,
                status=status,
                resolution=resolution,
                resolved_at=resolved_at,
            )
        )

    async def revert_completed_audit(
        self, audit_id: int, performed_by: str | None = None
    ) -> AuditRecord:
        """
        Undo a completed audit.

        Each ledger adjustment is compensated with the inverse delta (reference
        AUDIT_REVERT); counts are kept, discrepancy logs reopen and the audit
        returns to IN_PROGRESS.
        """
        async with self._uow.transaction():
            audit = await self.get_audit(audit_id)
            if audit.status != AuditStatus.COMPLETED:
                raise InvalidStateError(
                    "Audit", audit_id, audit.status.value, [AuditStatus.COMPLETED.value]
                )

            reverted = 0
            for item in audit.items:
                if item.adjustment_transaction_id is None:
                    continue
                transaction = await self._inventory.get_transaction(item.adjustment_transaction_id)
                if transaction is None:
                    raise TransactionNotFoundError(item.adjustment_transaction_id)
                await self._ledger.revert(
                    transaction,
                    performed_by=performed_by,
                    reason=f"Stock audit revert ({audit.audit_code})",
                )
                item.adjustment_transaction_id = None
                await self._audits.update_item(item)
                reverted += 1

            for log in await self._audits.list_discrepancy_logs(audit_id):
                log.status = DiscrepancyStatus.OPEN
                log.resolution = None
                log.resolved_at = None
                await self._audits.update_discrepancy_log(log)

            audit.status = AuditStatus.IN_PROGRESS
            audit.inventory_adjusted = False
            audit.completed_at = None
            audit = await self._audits.update_audit(audit)

        logger.info("audit_reverted", audit_code=audit.audit_code, reverted=reverted)
        return audit
