from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from task.adapters.serializers.task_serializer import TaskSerializer
from task.models import Status, Task
from user.permission import IsAdminRole
from utils.response import envelope


class DueTasksView(APIView):
    """
    Published tasks whose deadline has already passed, oldest deadline first
    """
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        due_tasks = (
            Task.objects.filter(status=Status.PUBLISHED, deadline__lte=timezone.now())
            .select_related('creator__profile')
            .prefetch_related('assignments__user__profile', 'assignments__submitted_work')
            .order_by('deadline')
        )

        serializer = TaskSerializer(due_tasks, many=True, context={'request': request})

        return envelope(data={'due_tasks': serializer.data})
