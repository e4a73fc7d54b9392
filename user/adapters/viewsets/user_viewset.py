import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Count, Q, Sum
from django_filters import rest_framework as django_filters
from drf_spectacular.utils import extend_schema
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated

from task import services as task_services
from user.models import Role
from user.permission import IsAdminRole
from utils.exceptions import DomainRuleViolation
from utils.response import envelope
from work.models import ReviewStatus, Work
from work.adapters.serializers.work_serializer import WorkListSerializer
from ..serializers.user_serializers import (
    AdminUserCreateSerializer,
    PublicUserSerializer,
    UserRoleSerializer,
    UserSerializer,
    UserStatusSerializer,
)

logger = logging.getLogger(__name__)


class UserFilter(django_filters.FilterSet):
    role = django_filters.ChoiceFilter(field_name='profile__role', choices=Role.choices)
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = User
        fields = ['role', 'is_active']


class UserViewSet(mixins.CreateModelMixin,
                  mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  mixins.DestroyModelMixin,
                  viewsets.GenericViewSet):
    """
    User management. Listing, creating and deleting are admin-only; the
    public profile, works and stats actions are open to anyone.
    """
    queryset = User.objects.select_related('profile').order_by('-date_joined')
    serializer_class = UserSerializer
    filter_backends = [django_filters.DjangoFilterBackend, filters.SearchFilter]
    filterset_class = UserFilter
    search_fields = ['username', 'email', 'profile__real_name']
    results_key = 'users'

    def get_permissions(self):
        if self.action in ('profile', 'works', 'stats'):
            return [AllowAny()]
        if self.action == 'retrieve':
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminRole()]

    def get_serializer_class(self):
        if self.action == 'create':
            return AdminUserCreateSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Admin {request.user.id} created user {user.id} with role {user.profile.role}")
        return envelope(
            data={'user': UserSerializer(user, context={'request': request}).data},
            message='User created',
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, *args, **kwargs):
        user = self.get_object()
        return envelope(data={'user': UserSerializer(user, context={'request': request}).data})

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise DomainRuleViolation('You cannot delete your own account.')

        with transaction.atomic():
            affected_tasks = task_services.lock_tasks_assigned_to(user)
            works = Work.objects.filter(author=user)
            deleted_works_count = works.count()
            for work in works:
                work.delete_files()
            works.delete()
            username = user.username
            # Assignments cascade with the user; created tasks keep a null creator
            user.delete()
            task_services.recompute_completion_rates(affected_tasks)

        logger.info(f"Admin {request.user.id} deleted user {username} and {deleted_works_count} works")
        return envelope(
            data={'deleted_works_count': deleted_works_count},
            message=f'User {username} and all of their works were deleted',
        )

    @extend_schema(responses={200: PublicUserSerializer})
    @action(detail=True, methods=['get'])
    def profile(self, request, pk=None):
        user = self.get_object()
        return envelope(data={'user': PublicUserSerializer(user, context={'request': request}).data})

    @action(detail=True, methods=['get'])
    def works(self, request, pk=None):
        user = self.get_object()
        queryset = (
            Work.objects.filter(author=user, status=ReviewStatus.APPROVED, is_public=True)
            .select_related('author__profile')
            .prefetch_related('files')
            .order_by('-created_at')
        )
        self.results_key = 'works'
        self.page_size = 12
        page = self.paginate_queryset(queryset)
        serializer = WorkListSerializer(page, many=True, context={'request': request})
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=['get'])
    def stats(self, request, pk=None):
        user = self.get_object()
        counts = Work.objects.filter(author=user).aggregate(
            total_works=Count('id'),
            approved_works=Count('id', filter=Q(status=ReviewStatus.APPROVED)),
            pending_works=Count('id', filter=Q(status=ReviewStatus.PENDING)),
            rejected_works=Count('id', filter=Q(status=ReviewStatus.REJECTED)),
            total_views=Sum('views'),
            total_likes=Sum('likes'),
        )
        counts['total_views'] = counts['total_views'] or 0
        counts['total_likes'] = counts['total_likes'] or 0
        return envelope(data={
            'user': {'username': user.username, 'real_name': user.profile.real_name},
            'stats': counts,
        })

    @extend_schema(request=UserStatusSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=['put'], url_path='status')
    def set_status(self, request, pk=None):
        user = self.get_object()
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        is_active = serializer.validated_data['is_active']

        if user.pk == request.user.pk and not is_active:
            raise DomainRuleViolation('You cannot disable your own account.')

        user.is_active = is_active
        user.save(update_fields=['is_active'])
        logger.info(f"Admin {request.user.id} set user {user.id} is_active={is_active}")
        return envelope(
            data={'user': UserSerializer(user, context={'request': request}).data},
            message='User account enabled' if is_active else 'User account disabled',
        )

    @extend_schema(request=UserRoleSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=['put'], url_path='role')
    def set_role(self, request, pk=None):
        user = self.get_object()
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if user.pk == request.user.pk:
            raise DomainRuleViolation('You cannot change your own role.')

        role = serializer.validated_data['role']
        user.profile.role = role
        user.profile.save(update_fields=['role'])
        logger.info(f"Admin {request.user.id} set user {user.id} role={role}")
        return envelope(
            data={'user': UserSerializer(user, context={'request': request}).data},
            message=f'User role updated to {Role(role).label}',
        )
