"""API route modules."""

from partsync.api.routes.audit import router as audit_router
from partsync.api.routes.health import router as health_router
from partsync.api.routes.inventory import router as inventory_router
from partsync.api.routes.mrp import router as mrp_router
from partsync.api.routes.orders import router as orders_router
from partsync.api.routes.picking import router as picking_router

__all__ = [
    "health_router",
    "mrp_router",
    "orders_router",
    "inventory_router",
    "audit_router",
    "picking_router",
]
