# app/auth/permissions.py
# Permission strings follow the "<section>.<action>" layout stored on employees,
# e.g. "categories.create"; "ALL" grants every permission.

from typing import Iterable, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)

ALL_PERMISSIONS = "ALL"

class PermissionChecker:
    """
    Check employee permissions
    """

    def __init__(self, employee_permissions: Optional[Iterable[str]]):
        self.permissions = [p for p in (employee_permissions or []) if p]
        self._permission_set = set(self.permissions)

        logger.debug(f"PermissionChecker initialized with {len(self.permissions)} permissions")

    @property
    def is_admin(self) -> bool:
        return ALL_PERMISSIONS in self._permission_set

    def can(self, section: str, action: str) -> bool:
        """
        Check if employee can perform action on section

        Examples:
            can("categories", "create")
        """
        permission_key = format_permission_name(section, action)
        if permission_key in self._permission_set:
            logger.debug(f"Permission granted: {permission_key}")
            return True

        if self.is_admin:
            logger.debug(f"Permission granted: {permission_key} (via {ALL_PERMISSIONS})")
            return True

        logger.debug(f"Permission denied: {permission_key}")
        return False

    def cannot(self, section: str, action: str) -> bool:
        return not self.can(section, action)

    def require(
        self,
        section: str,
        action: str,
        custom_message: Optional[str] = None
    ):
        """
        Require permission or raise HTTPException
        """
        if self.cannot(section, action):
            message = custom_message or f"Insufficient permissions to {action} {section}"
            logger.warning(f"Permission check failed: {message}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=message
            )


def format_permission_name(section: str, action: str) -> str:
    """
    Format permission as string
    """
    return f"{section}.{action}"
