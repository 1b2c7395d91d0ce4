import pytest
from fastapi import HTTPException
from app.auth.permissions import PermissionChecker, format_permission_name


class TestPermissionChecker:

    def test_exact_permission_grants_action(self):
        """Test a listed permission grants only that action"""
        checker = PermissionChecker(["categories.create", "categories.view"])

        assert checker.can("categories", "create")
        assert checker.cannot("categories", "delete")
        assert checker.cannot("brands", "create")

    def test_all_grants_everything(self):
        """Test the ALL permission grants every section"""
        checker = PermissionChecker(["ALL"])

        assert checker.is_admin
        assert checker.can("audit", "view")
        assert checker.can("categories", "delete")

    def test_require_raises_forbidden(self):
        """Test a missing permission raises 403"""
        checker = PermissionChecker(["brands.view"])

        with pytest.raises(HTTPException) as exc_info:
            checker.require("brands", "delete")

        assert exc_info.value.status_code == 403

    def test_require_custom_message(self):
        """Test require passes a custom message through"""
        with pytest.raises(HTTPException) as exc_info:
            PermissionChecker([]).require("audit", "view", custom_message="Audit trail is restricted")

        assert exc_info.value.detail == "Audit trail is restricted"

    def test_empty_and_none_permissions(self):
        """Test missing permission lists deny everything"""
        assert PermissionChecker(None).cannot("categories", "view")
        assert PermissionChecker(["", None]).permissions == []

    def test_format_permission_name(self):
        """Test permission strings use section.action"""
        assert format_permission_name("categories", "create") == "categories.create"
