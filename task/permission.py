from rest_framework.permissions import BasePermission

from . import services


class TaskAccessPermission(BasePermission):
    """
    Object permission for task detail.

    admin: every task
    member: tasks they are assigned to, or public tasks
    """
    message = 'You do not have permission to view this task.'

    def has_object_permission(self, request, view, obj):
        return services.can_view(request.user, obj)
