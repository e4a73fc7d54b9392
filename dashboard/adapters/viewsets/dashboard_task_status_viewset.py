from django.db.models import CharField, Case, Count, F, Q, Value, When
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from task.models import Status, Task
from user.permission import IsAdminRole
from utils.response import envelope


class TaskStatusDistribution(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        now = timezone.now()

        # Published tasks past their deadline are reported as overdue
        tasks = Task.objects.annotate(
            display_status=Case(
                When(Q(status=Status.PUBLISHED) & Q(deadline__lt=now), then=Value('overdue')),
                default=F('status'),
                output_field=CharField()
            )
        )

        # Group by computed display_status and count
        status_distribution = (
            tasks.values('display_status')
            .annotate(count=Count('id'))
            .order_by('display_status')
        )

        return envelope(data={'status_distribution': list(status_distribution)})


class TaskPriorityDistribution(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request):
        tasks = Task.objects.exclude(status=Status.CANCELLED)

        priority_distribution = (
            tasks.values('priority')
            .annotate(count=Count('id'))
            .order_by('priority')
        )

        return envelope(data={'priority_distribution': list(priority_distribution)})
