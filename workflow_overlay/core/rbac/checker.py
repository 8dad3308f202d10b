"""Permission checking for the workflow overlay.

Permission string format: "resource:action", e.g. ``workflows:apply``.
Actors may hold ``resource:*`` or ``*:*`` grants.
"""

from typing import Iterable, Optional


class PermissionChecker:
    """Checks if an actor holds a permission."""

    def __init__(self, permissions: Iterable[str]):
        self.permissions = set(permissions)

    def has_permission(self, permission: str) -> bool:
        if permission in self.permissions:
            return True

        if "*:*" in self.permissions:
            return True

        resource, sep, _ = permission.partition(":")
        return bool(sep) and f"{resource}:*" in self.permissions


def has_permission(actor, permission: str) -> bool:
    """
    Check if an actor has a specific permission.

    Args:
        actor: Actor exposing a ``permissions`` list, or None
        permission: Permission string such as ``workflows:apply``

    Returns:
        True if the actor has the permission; False for no actor
    """
    if actor is None:
        return False

    permissions: Optional[Iterable[str]] = getattr(actor, "permissions", None)
    return PermissionChecker(permissions or []).has_permission(permission)
