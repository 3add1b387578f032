"""RBAC permission helpers."""
from typing import List
from timedesk.models.user import User
from timedesk.core.security import Permission


def get_user_permissions(user: User) -> List[str]:
    """Get all permissions for a user."""
    permissions = set()
    for role in user.roles:
        if role.permissions:
            permissions.update(role.permissions)
    return sorted(permissions)


def has_permission(user: User, permission: Permission) -> bool:
    """Check if user has a specific permission."""
    if not user.is_active:
        return False
    return permission.value in get_user_permissions(user)
