# shared/common/permissions.py
"""
Permission Classes

Two kinds of caller exist: players, who book and cancel their own
reservations, and facility administrators carrying the ``admin`` role.
"""

import logging
from typing import List

from rest_framework import permissions
from rest_framework.request import Request

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'


def get_user_roles(request: Request) -> List[str]:
    """Roles from the token user, falling back to the raw JWT payload."""
    roles = getattr(request.user, 'roles', None)
    if roles is not None:
        return roles
    if isinstance(getattr(request, 'auth', None), dict):
        return request.auth.get('roles', [])
    return []


class IsAuthenticated(permissions.BasePermission):
    message = 'Authentication credentials were not provided.'

    def has_permission(self, request: Request, view) -> bool:
        return bool(request.user and getattr(request.user, 'is_authenticated', False))


class IsAdmin(IsAuthenticated):
    """Facility administrators"""
    message = 'Only facility administrators can perform this action.'

    def has_permission(self, request: Request, view) -> bool:
        return (
            super().has_permission(request, view)
            and ADMIN_ROLE in get_user_roles(request)
        )


class IsAdminOrReadOnly(IsAuthenticated):
    """
    Facility data is readable by every authenticated user; changes to
    facilities, opening hours and maintenance are for administrators.
    """

    def has_permission(self, request: Request, view) -> bool:
        if not super().has_permission(request, view):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return ADMIN_ROLE in get_user_roles(request)


def is_admin(request: Request) -> bool:
    return IsAdmin().has_permission(request, None)
