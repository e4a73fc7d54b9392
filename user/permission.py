from rest_framework.permissions import BasePermission

from .models import Role, get_role, MEMBER_ROLES


class RolePermission(BasePermission):
    """
    Grants access when the authenticated user's role is in `allowed_roles`.
    Anonymous users are refused before the role is looked at, so DRF answers 401.
    """
    allowed_roles = frozenset()
    message = 'You do not have the required role.'

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or user.is_anonymous:
            return False
        return get_role(user) in self.allowed_roles


class IsAdminRole(RolePermission):
    allowed_roles = frozenset({Role.ADMIN})
    message = 'Admin role required.'


class IsMemberOrAdmin(RolePermission):
    allowed_roles = MEMBER_ROLES
    message = 'Member or admin role required.'
