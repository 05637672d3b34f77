"""Role based DRF permissions."""

from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from modules.accounts.models import Role


def _is_admin(user) -> bool:
    return bool(
        user
        and user.is_authenticated
        and getattr(user, "role", None) == Role.ADMIN
    )


class IsAdminRole(BasePermission):
    """Only users with the ``admin`` role."""

    message = "Admin privileges required."

    def has_permission(self, request, view) -> bool:
        return _is_admin(request.user)


class IsAdminOrReadOnly(BasePermission):
    """Any authenticated user may read; only admins may write."""

    message = "Admin privileges required."

    def has_permission(self, request, view) -> bool:
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return _is_admin(request.user)
