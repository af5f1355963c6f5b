"""
Permission-based authorization dependencies for API endpoints.

Authentication happens upstream: the auth gateway in front of this service
forwards the caller's identity and community role as the X-User-Id and
X-User-Role headers. Roles (resident, guard, admin, super_admin) are mapped
to permissions via ROLE_PERMISSIONS.

Usage:
    from visitor_access.server.auth.authorization import (
        Permission,
        require_permission,
    )

    @router.post('/validate')
    async def validate(
        org_id: UUID,
        user_id: str = Depends(require_permission(Permission.SCAN_ACCESS)),
    ):
        # Only guards and admins can validate codes
        ...
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from visitor_access.core.logger import visitor_access_logger as logger


class Permission(str, Enum):
    """Permissions that can be assigned to roles."""

    # Invitations
    CREATE_INVITATIONS = 'invitations.create'
    VIEW_OWN_INVITATIONS = 'invitations.view.own'
    CANCEL_INVITATIONS = 'invitations.cancel'
    MANAGE_ALL_INVITATIONS = 'invitations.manage.all'

    # Access control
    SCAN_ACCESS = 'access.scan'
    MANUAL_ACCESS = 'access.manual'
    VIEW_ACCESS_LOGS = 'access.logs.view'


class RoleName(str, Enum):
    """Role names used in the system."""

    RESIDENT = 'resident'
    GUARD = 'guard'
    ADMIN = 'admin'
    SUPER_ADMIN = 'super_admin'


_INVITATION_PERMISSIONS = [
    Permission.CREATE_INVITATIONS,
    Permission.VIEW_OWN_INVITATIONS,
    Permission.CANCEL_INVITATIONS,
]

_MANAGEMENT_PERMISSIONS = [Permission.MANAGE_ALL_INVITATIONS]

_ACCESS_PERMISSIONS = [
    Permission.SCAN_ACCESS,
    Permission.MANUAL_ACCESS,
    Permission.VIEW_ACCESS_LOGS,
]

# Permission mappings for each role
ROLE_PERMISSIONS: dict[RoleName, frozenset[Permission]] = {
    RoleName.RESIDENT: frozenset(_INVITATION_PERMISSIONS),
    RoleName.GUARD: frozenset(_ACCESS_PERMISSIONS),
    RoleName.ADMIN: frozenset(
        _INVITATION_PERMISSIONS + _MANAGEMENT_PERMISSIONS + _ACCESS_PERMISSIONS
    ),
    RoleName.SUPER_ADMIN: frozenset(
        _INVITATION_PERMISSIONS + _MANAGEMENT_PERMISSIONS + _ACCESS_PERMISSIONS
    ),
}


async def get_user_id(
    x_user_id: Optional[str] = Header(default=None),
) -> Optional[str]:
    """Caller identity forwarded by the auth gateway, or None."""
    if not x_user_id or not x_user_id.strip():
        return None
    return x_user_id.strip()


async def get_user_role(
    x_user_role: Optional[str] = Header(default=None),
) -> Optional[str]:
    if not x_user_role:
        return None
    return x_user_role.strip().lower()


def get_role_permissions(role_name: str) -> frozenset[Permission]:
    """
    Get the permissions for a role.

    Args:
        role_name: Name of the role

    Returns:
        Set of permissions for the role
    """
    try:
        role_enum = RoleName(role_name)
        return ROLE_PERMISSIONS.get(role_enum, frozenset())
    except ValueError:
        return frozenset()


def has_permission(role_name: Optional[str], permission: Permission) -> bool:
    """
    Check if a role has a specific permission.

    Args:
        role_name: The caller's role name
        permission: Permission to check

    Returns:
        True if the role has the permission
    """
    if not role_name:
        return False
    return permission in get_role_permissions(role_name)


def parse_user_id(user_id: str) -> UUID:
    """Parse a caller identity, rejecting malformed ones with 401."""
    try:
        return UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Invalid user identity',
        )


def invitation_owner_scope(user_id: str, role_name: Optional[str]) -> Optional[UUID]:
    """Creator whose invitations the caller is limited to.

    None when the role manages every invitation of the organization.
    """
    if has_permission(role_name, Permission.MANAGE_ALL_INVITATIONS):
        return None
    return parse_user_id(user_id)


def require_permission(permission: Permission):
    """
    Factory function that creates a dependency to require a specific permission.

    This creates a FastAPI dependency that:
    1. Gets the authenticated user_id and role
    2. Checks if the role grants the required permission
    3. Returns the user_id if authorized, raises HTTPException otherwise

    Args:
        permission: The permission required to access the endpoint

    Returns:
        Dependency function that validates permission and returns user_id
    """

    async def permission_checker(
        user_id: Optional[str] = Depends(get_user_id),
        role_name: Optional[str] = Depends(get_user_role),
    ) -> str:
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail='User not authenticated',
            )

        if not has_permission(role_name, permission):
            logger.warning(
                'Insufficient permissions',
                extra={
                    'user_id': user_id,
                    'user_role': role_name,
                    'required_permission': permission.value,
                },
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f'Requires {permission.value} permission',
            )

        return user_id

    return permission_checker
