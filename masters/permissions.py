from rest_framework import permissions

from .models import is_admin


class IsAdminRole(permissions.BasePermission):
    """Allow superusers and users holding the ``admin`` role."""

    message = "Admin role required."

    def has_permission(self, request, view):
        return is_admin(request.user)
