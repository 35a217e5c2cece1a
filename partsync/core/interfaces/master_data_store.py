"""Abstract interface for master data (parts, suppliers, products, BOM)."""

from abc import ABC, abstractmethod

from partsync.core.entities.part import BomItem, Part, Product, Supplier


class IMasterDataStore(ABC):
    """Interface for master data persistence."""

    @abstractmethod
    async def create_supplier(self, supplier: Supplier) -> Supplier:
        """Create a supplier."""
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: int) -> Supplier | None:
        """Get supplier by ID."""
        pass

    @abstractmethod
    async def get_suppliers(self, supplier_ids: list[int]) -> dict[int, Supplier]:
        """Get suppliers keyed by ID. Unknown IDs are absent from the result."""
        pass

    @abstractmethod
    async def create_part(self, part: Part) -> Part:
        """Create a part. Raises ConflictError on duplicate part_code."""
        pass

    @abstractmethod
    async def get_part(self, part_id: int) -> Part | None:
        """Get part by ID."""
        pass

    @abstractmethod
    async def get_parts(self, part_ids: list[int]) -> dict[int, Part]:
        """Get parts keyed by ID. Unknown IDs are absent from the result."""
        pass

    @abstractmethod
    async def list_parts(self, active_only: bool = True) -> list[Part]:
        """List parts ordered by part_code."""
        pass

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Create a product."""
        pass

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def add_bom_item(self, item: BomItem) -> BomItem:
        """Add a BOM line. Raises ConflictError if the part is already on the BOM."""
        pass

    @abstractmethod
    async def get_boms(self, product_ids: list[int]) -> dict[int, list[BomItem]]:
        """Active BOM lines per product ID."""
        pass
