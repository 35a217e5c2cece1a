"""Inventory queries: stock positions, low-stock alerts and ledger history."""

from partsync.application.dto.responses import (
    InventoryListResponse,
    InventoryResponse,
    LowStockAlertResponse,
    LowStockListResponse,
    TransactionListResponse,
    TransactionResponse,
)
from partsync.core.entities.inventory import Inventory, LowStockAlert, Transaction
from partsync.core.interfaces.inventory_store import IInventoryStore
from partsync.core.services.ledger import InventoryLedger


class QueryInventoryUseCase:
    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: InventoryLedger | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from partsync.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_ledger(self) -> InventoryLedger:
        if self._ledger is None:
            from partsync.application.services import get_inventory_ledger

            self._ledger = await get_inventory_ledger()
        return self._ledger

    async def list_inventory(self, limit: int = 100, offset: int = 0) -> list[Inventory]:
        store = await self._get_inventory_store()
        return await store.list_inventory(limit=limit, offset=offset)

    async def low_stock(self) -> list[LowStockAlert]:
        ledger = await self._get_ledger()
        return await ledger.low_stock_alerts()

    async def part_transactions(
        self, part_id: int, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """Ledger history of a part, newest first. Unknown parts raise PartNotFoundError."""
        ledger = await self._get_ledger()
        await ledger.get_inventory(part_id)
        return await ledger.list_transactions(part_id, limit=limit, offset=offset)

    @staticmethod
    def inventory_response(items: list[Inventory]) -> InventoryListResponse:
        return InventoryListResponse(
            items=[InventoryResponse.from_entity(i) for i in items],
            count=len(items),
        )

    @staticmethod
    def low_stock_response(alerts: list[LowStockAlert]) -> LowStockListResponse:
        return LowStockListResponse(
            items=[LowStockAlertResponse.from_entity(a) for a in alerts],
            count=len(alerts),
        )

    @staticmethod
    def transactions_response(transactions: list[Transaction]) -> TransactionListResponse:
        return TransactionListResponse(
            transactions=[TransactionResponse.from_entity(t) for t in transactions],
            count=len(transactions),
        )
