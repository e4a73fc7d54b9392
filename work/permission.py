from rest_framework.permissions import BasePermission

from user.models import is_admin


class IsWorkOwnerOrAdmin(BasePermission):
    """
    Object permission for works and comments: the author (or comment
    writer) may act on it, and so may any admin.
    """
    message = 'You do not have permission to modify this work.'
    owner_field = 'author_id'

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if is_admin(request.user):
            return True
        return getattr(obj, self.owner_field, None) == request.user.id


class IsCommentOwnerOrAdmin(IsWorkOwnerOrAdmin):
    message = 'You do not have permission to delete this comment.'
    owner_field = 'user_id'
