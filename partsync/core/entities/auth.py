"""Roles, resources and the authenticated session."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    OPERATOR = "OPERATOR"
    VIEWER = "VIEWER"


class Resource(str, Enum):
    DASHBOARD = "dashboard"
    SALES_ORDERS = "sales-orders"
    ORDERS = "orders"
    INVENTORY = "inventory"
    MRP = "mrp"
    MASTER_DATA = "master-data"
    WAREHOUSE = "warehouse"
    REPORTS = "reports"
    SETTINGS = "settings"
    USERS = "users"
    BACKUP = "backup"


class Action(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EXPORT = "export"
    IMPORT = "import"


class Session(BaseModel):
    """Identity supplied by the external auth layer."""

    user_id: str
    user_name: str | None = None
    role: Role = Role.VIEWER
