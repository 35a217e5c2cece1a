"""Abstract interface for MRP result storage."""

from abc import ABC, abstractmethod

from partsync.core.entities.mrp import MrpResult, MrpStatus, MrpUrgency


class IMrpResultStore(ABC):
    """Interface for MRP result persistence."""

    @abstractmethod
    async def replace_pending(
        self,
        results: list[MrpResult],
        sales_order_id: int | None = None,
    ) -> list[MrpResult]:
        """
        Delete PENDING results and insert ``results``.

        With ``sales_order_id`` only that order's PENDING rows are deleted.
        ORDERED rows are never touched.
        """
        pass

    @abstractmethod
    async def get_result(self, result_id: int) -> MrpResult | None:
        """Get MRP result by ID."""
        pass

    @abstractmethod
    async def list_results(
        self,
        status: MrpStatus | None = None,
        urgency: MrpUrgency | None = None,
    ) -> list[MrpResult]:
        """List MRP results ordered by suggested order date."""
        pass

    @abstractmethod
    async def find_by_part(
        self, part_id: int, sales_order_id: int | None = None
    ) -> list[MrpResult]:
        """Results for a part planned for one sales order, or unattributed rows when None."""
        pass

    @abstractmethod
    async def mark_ordered(self, result_ids: list[int]) -> int:
        """Set status ORDERED. Returns number of rows changed."""
        pass
