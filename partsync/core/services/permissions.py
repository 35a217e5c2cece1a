"""
Role-based permission matrix.

Pure lookups; the API layer turns a denied check into PermissionDeniedError.
"""

from partsync.core.entities.auth import Action, Resource, Role

_ALL = frozenset(Action)
_VIEW = frozenset({Action.VIEW})
_NONE: frozenset[Action] = frozenset()

_V, _C, _E, _D, _X, _I = (
    Action.VIEW,
    Action.CREATE,
    Action.EDIT,
    Action.DELETE,
    Action.EXPORT,
    Action.IMPORT,
)

ROLE_PERMISSIONS: dict[Role, dict[Resource, frozenset[Action]]] = {
    Role.ADMIN: {
        Resource.DASHBOARD: _VIEW,
        Resource.SALES_ORDERS: _ALL,
        Resource.ORDERS: _ALL,
        Resource.INVENTORY: _ALL,
        Resource.MRP: frozenset({_V, _C, _E, _D, _X}),
        Resource.MASTER_DATA: _ALL,
        Resource.WAREHOUSE: frozenset({_V, _C, _E, _D, _X}),
        Resource.REPORTS: frozenset({_V, _X}),
        Resource.SETTINGS: frozenset({_V, _E}),
        Resource.USERS: frozenset({_V, _C, _E, _D}),
        Resource.BACKUP: frozenset({_V, _C, _D}),
    },
    Role.MANAGER: {
        Resource.DASHBOARD: _VIEW,
        Resource.SALES_ORDERS: _ALL,
        Resource.ORDERS: _ALL,
        Resource.INVENTORY: _ALL,
        Resource.MRP: frozenset({_V, _C, _E, _X}),
        Resource.MASTER_DATA: _ALL,
        Resource.WAREHOUSE: frozenset({_V, _C, _E, _D, _X}),
        Resource.REPORTS: frozenset({_V, _X}),
        Resource.SETTINGS: frozenset({_V, _E}),
        Resource.USERS: _VIEW,
        Resource.BACKUP: frozenset({_V, _C}),
    },
    Role.OPERATOR: {
        Resource.DASHBOARD: _VIEW,
        Resource.SALES_ORDERS: frozenset({_V, _C, _E, _X}),
        Resource.ORDERS: frozenset({_V, _C, _E, _X}),
        Resource.INVENTORY: frozenset({_V, _E, _X}),
        Resource.MRP: frozenset({_V, _X}),
        Resource.MASTER_DATA: frozenset({_V, _X}),
        Resource.WAREHOUSE: frozenset({_V, _E}),
        Resource.REPORTS: frozenset({_V, _X}),
        Resource.SETTINGS: _VIEW,
        Resource.USERS: _NONE,
        Resource.BACKUP: _NONE,
    },
    Role.VIEWER: {
        **{resource: _VIEW for resource in Resource},
        Resource.USERS: _NONE,
        Resource.BACKUP: _NONE,
    },
}

ROLE_LEVELS: dict[Role, int] = {
    Role.ADMIN: 4,
    Role.MANAGER: 3,
    Role.OPERATOR: 2,
    Role.VIEWER: 1,
}


def has_permission(role: Role, resource: Resource, action: Action) -> bool:
    """Whether ``role`` may perform ``action`` on ``resource``."""
    return action in ROLE_PERMISSIONS.get(role, {}).get(resource, _NONE)


def get_permissions(role: Role, resource: Resource) -> list[Action]:
    """Allowed actions in matrix column order."""
    allowed = ROLE_PERMISSIONS.get(role, {}).get(resource, _NONE)
    return [action for action in Action if action in allowed]


def has_min_role(role: Role, min_role: Role) -> bool:
    return ROLE_LEVELS[role] >= ROLE_LEVELS[min_role]
