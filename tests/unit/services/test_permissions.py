"""Unit tests for the role permission matrix."""

import pytest

from partsync.core.entities.auth import Action, Resource, Role
from partsync.core.services.permissions import get_permissions, has_min_role, has_permission


class TestHasPermission:
    @pytest.mark.parametrize("resource", list(Resource))
    def test_admin_can_view_everything(self, resource):
        assert has_permission(Role.ADMIN, resource, Action.VIEW)

    @pytest.mark.parametrize(
        "resource",
        [r for r in Resource if r not in (Resource.USERS, Resource.BACKUP)],
    )
    def test_viewer_views_everything_but_users_and_backup(self, resource):
        assert has_permission(Role.VIEWER, resource, Action.VIEW)
        assert not has_permission(Role.VIEWER, resource, Action.EDIT)

    def test_viewer_cannot_see_users_or_backup(self):
        assert not has_permission(Role.VIEWER, Resource.USERS, Action.VIEW)
        assert not has_permission(Role.VIEWER, Resource.BACKUP, Action.VIEW)

    def test_operator_inventory(self):
        assert get_permissions(Role.OPERATOR, Resource.INVENTORY) == [
            Action.VIEW,
            Action.EDIT,
            Action.EXPORT,
        ]

    def test_operator_cannot_run_mrp(self):
        assert has_permission(Role.OPERATOR, Resource.MRP, Action.VIEW)
        assert not has_permission(Role.OPERATOR, Resource.MRP, Action.CREATE)

    def test_operator_can_create_orders(self):
        assert has_permission(Role.OPERATOR, Resource.ORDERS, Action.CREATE)
        assert not has_permission(Role.OPERATOR, Resource.ORDERS, Action.DELETE)

    def test_operator_warehouse(self):
        assert has_permission(Role.OPERATOR, Resource.WAREHOUSE, Action.EDIT)
        assert not has_permission(Role.OPERATOR, Resource.WAREHOUSE, Action.CREATE)
        assert not has_permission(Role.OPERATOR, Resource.WAREHOUSE, Action.DELETE)

    def test_operator_has_no_user_access(self):
        assert get_permissions(Role.OPERATOR, Resource.USERS) == []

    def test_manager_cannot_delete_mrp(self):
        assert has_permission(Role.MANAGER, Resource.MRP, Action.CREATE)
        assert not has_permission(Role.MANAGER, Resource.MRP, Action.DELETE)
        assert has_permission(Role.ADMIN, Resource.MRP, Action.DELETE)

    def test_manager_users_view_only(self):
        assert get_permissions(Role.MANAGER, Resource.USERS) == [Action.VIEW]

    def test_nobody_imports_mrp(self):
        for role in Role:
            assert not has_permission(role, Resource.MRP, Action.IMPORT)


class TestRoleLevels:
    def test_ordering(self):
        assert has_min_role(Role.ADMIN, Role.MANAGER)
        assert has_min_role(Role.OPERATOR, Role.OPERATOR)
        assert not has_min_role(Role.VIEWER, Role.OPERATOR)
