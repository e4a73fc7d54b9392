import logging

from django.db.models import Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from task import services
from task.filters import TaskFilter
from task.models import Status, Task, TaskAssignment
from task.permission import TaskAccessPermission
from user.permission import IsAdminRole, IsMemberOrAdmin
from utils.response import envelope
from ..serializers.task_serializer import (
    AssignmentStatusSerializer,
    AssignSerializer,
    SubmitSerializer,
    TaskSerializer,
    TaskStatsSerializer,
    TaskWriteSerializer,
)

logger = logging.getLogger(__name__)


class TaskViewset(viewsets.ModelViewSet):
    """Task workflow API.

    Admins manage tasks and assignments. Members list and read the tasks
    visible to them and submit their own works against tasks they hold.
    """
    # Keep a class-level queryset so DRF's router can infer a basename when registering
    queryset = Task.objects.all()
    serializer_class = TaskSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TaskFilter
    results_key = 'tasks'

    def get_permissions(self):
        if self.action in ('list', 'submit'):
            return [IsAuthenticated(), IsMemberOrAdmin()]
        if self.action == 'retrieve':
            return [IsAuthenticated(), IsMemberOrAdmin(), TaskAccessPermission()]
        return [IsAuthenticated(), IsAdminRole()]

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return TaskWriteSerializer
        return TaskSerializer

    def get_queryset(self):
        if self.action == 'list':
            qs = services.visible_tasks(self.request.user)
        else:
            qs = Task.objects.all()
        return qs.select_related('creator__profile').prefetch_related(
            Prefetch(
                'assignments',
                queryset=TaskAssignment.objects.select_related('user__profile', 'submitted_work'),
            )
        )

    def _read(self, task):
        """Re-read a task with its assignments for the response body."""
        task = self.get_queryset().get(pk=task.pk)
        return TaskSerializer(task, context=self.get_serializer_context()).data

    def retrieve(self, request, *args, **kwargs):
        task = self.get_object()
        return envelope(data={'task': TaskSerializer(task, context=self.get_serializer_context()).data})

    @extend_schema(
        request=TaskWriteSerializer,
        responses={201: TaskSerializer}
    )
    def create(self, request, *args, **kwargs):
        # Use write serializer for validation and saving
        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        task = write_serializer.save()

        return envelope(data={'task': self._read(task)}, message='Task created', status=status.HTTP_201_CREATED)

    @extend_schema(
        request=TaskWriteSerializer,
        responses={200: TaskSerializer}
    )
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        task = write_serializer.save()
        logger.info(f"Admin {request.user.id} updated task {task.id}")

        return envelope(data={'task': self._read(task)}, message='Task updated')

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        task_id = task.id
        # Linked works survive; their related_task is nulled by the foreign key
        task.delete()
        logger.info(f"Admin {request.user.id} deleted task {task_id}")
        return envelope(message='Task deleted')

    @extend_schema(request=AssignSerializer, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        task = self.get_object()
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = services.assign_users(task, serializer.validated_data['user_ids'])
        return envelope(data={'task': self._read(task)}, message='Task assigned')

    @extend_schema(request=SubmitSerializer, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        task = self.get_object()
        serializer = SubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = services.submit_work(task, request.user, serializer.validated_data['work_id'])
        return envelope(data={'task': self._read(task)}, message='Work submitted')

    @extend_schema(methods=['PATCH'], request=AssignmentStatusSerializer, responses={200: TaskSerializer})
    @extend_schema(methods=['DELETE'], request=None, responses={200: TaskSerializer})
    @action(detail=True, methods=['patch', 'delete'], url_path=r'assignments/(?P<user_id>\d+)')
    def assignment(self, request, pk=None, user_id=None):
        task = self.get_object()
        user_id = int(user_id)

        if request.method == 'DELETE':
            task = services.remove_assignment(task, user_id)
            return envelope(data={'task': self._read(task)}, message='Assignment removed')

        serializer = AssignmentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        task = services.update_assignment_status(
            task,
            user_id,
            serializer.validated_data['status'],
            work_id=serializer.validated_data.get('work_id'),
            feedback=serializer.validated_data['feedback'],
        )
        return envelope(data={'task': self._read(task)}, message='Assignment updated')

    def _change_status(self, status_value, message):
        task = services.change_status(self.get_object(), status_value)
        return envelope(data={'task': self._read(task)}, message=message)

    @extend_schema(request=None, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        return self._change_status(Status.PUBLISHED, 'Task published')

    @extend_schema(request=None, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        return self._change_status(Status.COMPLETED, 'Task completed')

    @extend_schema(request=None, responses={200: TaskSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        return self._change_status(Status.CANCELLED, 'Task cancelled')

    @extend_schema(responses={200: TaskStatsSerializer})
    @action(detail=False, methods=['get'], url_path='stats/overview')
    def stats_overview(self, request):
        return envelope(data={'stats': TaskStatsSerializer(services.stats_overview()).data})
