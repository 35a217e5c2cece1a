"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import pytest

from partsync.core.entities.part import BomItem, Part, Product, Supplier
from partsync.core.entities.sales_order import SalesOrder, SalesOrderItem, SalesOrderStatus
from partsync.core.interfaces.unit_of_work import IUnitOfWork


class FakeUnitOfWork(IUnitOfWork):
    """Counts commits and rollbacks instead of touching a database."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
        except BaseException:
            self.rollbacks += 1
            raise
        else:
            self.commits += 1


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
async def db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Path, None]:
    """Migrated SQLite database in a temp dir, wired as the global pool."""
    import partsync.infrastructure.storage.sqlite.connection as conn_module
    from partsync.config import reset_settings
    from partsync.infrastructure.notifications import reset_notifier
    from partsync.infrastructure.storage.sqlite.migrations import run_migrations

    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STORAGE_DB_NAME", "test.db")
    monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
    monkeypatch.delenv("NOTIFY_WEBHOOK_URL", raising=False)
    reset_settings()
    reset_notifier()
    conn_module._pool = None

    db_path = tmp_path / "test.db"
    results = await run_migrations(db_path=db_path)
    assert all(r.success for r in results)

    try:
        yield db_path
    finally:
        await conn_module.close_pool()
        reset_notifier()
        reset_settings()


@dataclass
class Catalog:
    """Master data seeded for SQLite-backed tests."""

    supplier: Supplier
    other_supplier: Supplier
    bolt: Part
    panel: Part
    cable: Part
    orphan: Part
    product: Product


@pytest.fixture
async def catalog(db: Path) -> Catalog:
    """
    One product built from three parts.

    Per unit: 2 x BOLT (10% loss), 1 x PANEL, 3 x CABLE. ORPHAN has no
    supplier and is not on any BOM.
    """
    from partsync.infrastructure.storage.sqlite import SQLiteMasterDataStore

    master = SQLiteMasterDataStore()
    supplier = await master.create_supplier(
        Supplier(code="SUP-A", name="Acme Components", lead_time_days=5)
    )
    other = await master.create_supplier(
        Supplier(code="SUP-B", name="Bolt & Co", lead_time_days=None)
    )
    bolt = await master.create_part(
        Part(
            part_code="BOLT-M6",
            part_name="Bolt M6",
            unit_price=0.5,
            min_order_qty=100,
            lead_time_days=3,
            supplier_id=other.id,
            storage_location="B-02-01",
        )
    )
    panel = await master.create_part(
        Part(
            part_code="PANEL-01",
            part_name="Front panel",
            unit_price=12.0,
            safety_stock=5,
            lead_time_days=10,
            supplier_id=supplier.id,
            storage_location="A-10-03",
        )
    )
    cable = await master.create_part(
        Part(
            part_code="CABLE-2M",
            part_name="Cable 2m",
            unit_price=2.0,
            lead_time_days=7,
            supplier_id=supplier.id,
            storage_location="A-02-05",
        )
    )
    orphan = await master.create_part(
        Part(part_code="ORPHAN-1", part_name="Unsourced part", storage_location="Z-01-01")
    )
    product = await master.create_product(Product(product_code="CTRL-100", product_name="Controller"))
    await master.add_bom_item(
        BomItem(product_id=product.id, part_id=bolt.id, quantity_per_unit=2, loss_rate=0.1)
    )
    await master.add_bom_item(BomItem(product_id=product.id, part_id=panel.id, quantity_per_unit=1))
    await master.add_bom_item(BomItem(product_id=product.id, part_id=cable.id, quantity_per_unit=3))

    return Catalog(
        supplier=supplier,
        other_supplier=other,
        bolt=bolt,
        panel=panel,
        cable=cable,
        orphan=orphan,
        product=product,
    )


async def create_sales_order(
    catalog: Catalog,
    order_code: str,
    quantity: int,
    due_date: date | None,
    status: SalesOrderStatus = SalesOrderStatus.CONFIRMED,
    project: str | None = None,
) -> SalesOrder:
    from partsync.infrastructure.storage.sqlite import SQLiteSalesOrderStore

    return await SQLiteSalesOrderStore().create_sales_order(
        SalesOrder(
            order_code=order_code,
            customer_name="Northwind",
            project=project,
            due_date=due_date,
            status=status,
            items=[SalesOrderItem(product_id=catalog.product.id, order_qty=quantity)],
        )
    )


@pytest.fixture
def make_sales_order(catalog: Catalog):
    """Factory for sales orders of the catalog product."""

    async def make(
        order_code: str,
        quantity: int,
        due_date: date | None,
        status: SalesOrderStatus = SalesOrderStatus.CONFIRMED,
        project: str | None = None,
    ) -> SalesOrder:
        return await create_sales_order(catalog, order_code, quantity, due_date, status, project)

    return make
