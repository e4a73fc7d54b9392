import logging

from django.shortcuts import get_object_or_404
from django_filters import rest_framework as django_filters
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated

from user.models import is_admin
from user.permission import IsAdminRole, IsMemberOrAdmin
from utils.response import envelope
from ...models import ReviewStatus, Work, WorkCategory, WorkComment, WorkType
from ...permission import IsCommentOwnerOrAdmin, IsWorkOwnerOrAdmin
from ..serializers.work_serializer import (
    CommentSerializer,
    ReviewSerializer,
    WorkCreateSerializer,
    WorkListSerializer,
    WorkSerializer,
    WorkUpdateSerializer,
)

logger = logging.getLogger(__name__)

SORT_ORDERINGS = {
    'newest': ('-created_at',),
    'oldest': ('created_at',),
    'popular': ('-likes', '-views'),
    'views': ('-views',),
}


class WorkFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=WorkType.choices)
    category = django_filters.ChoiceFilter(choices=WorkCategory.choices)
    status = django_filters.ChoiceFilter(choices=ReviewStatus.choices, method='filter_status')
    author = django_filters.NumberFilter(field_name='author_id')
    is_task_submission = django_filters.BooleanFilter()

    class Meta:
        model = Work
        fields = ['type', 'category', 'status', 'author', 'is_task_submission']

    def filter_status(self, queryset, name, value):
        # Only admins choose the review status; everyone else sees approved works
        if is_admin(self.request.user):
            return queryset.filter(status=value)
        return queryset


class WorkViewSet(viewsets.ModelViewSet):
    """Gallery works: public browsing, member uploads, admin review."""
    queryset = (
        Work.objects.select_related('author__profile', 'approved_by__profile')
        .prefetch_related('files')
    )
    serializer_class = WorkSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [django_filters.DjangoFilterBackend, filters.SearchFilter]
    filterset_class = WorkFilter
    search_fields = ['title', 'description', 'author_name']
    results_key = 'works'
    page_size = 12

    def get_permissions(self):
        if self.action in ('list', 'retrieve'):
            return [AllowAny()]
        if self.action == 'create':
            return [IsAuthenticated(), IsMemberOrAdmin()]
        if self.action in ('update', 'partial_update', 'destroy'):
            return [IsAuthenticated(), IsWorkOwnerOrAdmin()]
        if self.action == 'review':
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'list':
            return WorkListSerializer
        if self.action == 'create':
            return WorkCreateSerializer
        if self.action in ('update', 'partial_update'):
            return WorkUpdateSerializer
        return WorkSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != 'list':
            return qs

        if not is_admin(self.request.user):
            qs = qs.filter(status=ReviewStatus.APPROVED, is_public=True)

        sort = self.request.query_params.get('sort', 'newest')
        if sort not in SORT_ORDERINGS:
            raise ValidationError({'sort': [f"Sort must be one of: {', '.join(SORT_ORDERINGS)}."]})
        return qs.order_by(*SORT_ORDERINGS[sort], '-id')

    @extend_schema(parameters=[
        OpenApiParameter('sort', str, enum=list(SORT_ORDERINGS)),
        OpenApiParameter('limit', int),
    ])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def retrieve(self, request, *args, **kwargs):
        work = self.get_object()
        user = request.user
        is_author = user.is_authenticated and work.author_id == user.id

        if work.status != ReviewStatus.APPROVED and not (is_author or is_admin(user)):
            raise PermissionDenied('You do not have permission to view this work.')

        if not is_author:
            work.increment_views()

        return envelope(data={'work': WorkSerializer(work, context=self.get_serializer_context()).data})

    @extend_schema(request=WorkCreateSerializer, responses={201: WorkSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        work = serializer.save(author=request.user)
        logger.info(f"User {request.user.id} uploaded work {work.id} with {work.file_count} files")
        return envelope(
            data={'work': WorkSerializer(work, context=self.get_serializer_context()).data},
            message='Work uploaded, awaiting review',
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=WorkUpdateSerializer, responses={200: WorkSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        work = self.get_object()
        serializer = self.get_serializer(work, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        work = serializer.save()
        return envelope(
            data={'work': WorkSerializer(work, context=self.get_serializer_context()).data},
            message='Work updated',
        )

    def destroy(self, request, *args, **kwargs):
        work = self.get_object()
        work.delete_files()
        work_id = work.id
        work.delete()
        logger.info(f"User {request.user.id} deleted work {work_id}")
        return envelope(message='Work deleted')

    def _get_approved_work(self, verb):
        work = self.get_object()
        if work.status != ReviewStatus.APPROVED:
            raise PermissionDenied(f'Only approved works can be {verb}.')
        return work

    @action(detail=True, methods=['post'])
    def like(self, request, pk=None):
        work = self._get_approved_work('liked')
        liked = work.toggle_like(request.user)
        return envelope(
            data={'is_liked': liked, 'likes': work.likes},
            message='Liked' if liked else 'Like removed',
        )

    @extend_schema(request=CommentSerializer, responses={201: CommentSerializer})
    @action(detail=True, methods=['post'])
    def comments(self, request, pk=None):
        work = self._get_approved_work('commented on')
        serializer = CommentSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(work=work, user=request.user)
        return envelope(
            data={'comment': CommentSerializer(comment, context=self.get_serializer_context()).data},
            message='Comment added',
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['delete'], url_path=r'comments/(?P<comment_id>\d+)')
    def delete_comment(self, request, pk=None, comment_id=None):
        work = self.get_object()
        comment = get_object_or_404(WorkComment, pk=comment_id, work=work)
        permission = IsCommentOwnerOrAdmin()
        if not permission.has_object_permission(request, self, comment):
            raise PermissionDenied(permission.message)
        comment.delete()
        return envelope(message='Comment deleted')

    @extend_schema(request=ReviewSerializer, responses={200: WorkSerializer})
    @action(detail=True, methods=['put'])
    def review(self, request, pk=None):
        work = self.get_object()
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data['action'] == 'approve':
            work.approve(request.user)
            message = 'Work approved'
        else:
            work.reject(serializer.validated_data['reason'])
            message = 'Work rejected'

        logger.info(f"Admin {request.user.id} reviewed work {work.id}: {work.status}")
        return envelope(
            data={'work': WorkSerializer(work, context=self.get_serializer_context()).data},
            message=message,
        )
