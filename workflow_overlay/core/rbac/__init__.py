"""Permission checks for the workflow overlay."""

from .checker import PermissionChecker, has_permission

__all__ = [
    "PermissionChecker",
    "has_permission",
]
