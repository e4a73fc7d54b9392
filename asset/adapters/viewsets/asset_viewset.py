import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Count, Q
from django_filters import rest_framework as django_filters
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from user.permission import IsAdminRole
from utils.exceptions import DomainRuleViolation, ResourceNotFound
from utils.response import envelope
from ...models import Asset, AssetCategory, AssetStatus
from ..serializers.asset_serializer import (
    AssetAssignSerializer,
    AssetListSerializer,
    AssetMaintenanceCreateSerializer,
    AssetReturnSerializer,
    AssetSerializer,
    AssetWriteSerializer,
)

logger = logging.getLogger(__name__)

SORT_ORDERINGS = {
    'newest': ('-created_at',),
    'oldest': ('created_at',),
    'name': ('name',),
    'category': ('category', 'name'),
}


class AssetFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=AssetCategory.choices)
    status = django_filters.ChoiceFilter(choices=AssetStatus.choices)
    holder = django_filters.NumberFilter(field_name='current_holder_id')

    class Meta:
        model = Asset
        fields = ['category', 'status', 'holder']


class AssetViewSet(viewsets.ModelViewSet):
    """
    Equipment ledger, admin only.

    Checkout and return keep the usage history in step with the holder
    fields; maintenance appends to the maintenance history.
    """
    queryset = Asset.objects.select_related(
        'current_holder__profile', 'created_by__profile', 'last_updated_by__profile'
    ).prefetch_related('images')
    serializer_class = AssetSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [django_filters.DjangoFilterBackend, filters.SearchFilter]
    filterset_class = AssetFilter
    search_fields = ['name', 'description', 'brand', 'model', 'serial_number']
    results_key = 'assets'
    max_page_size = 100

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == 'list':
            sort = self.request.query_params.get('sort', 'newest')
            if sort not in SORT_ORDERINGS:
                raise ValidationError({'sort': [f"Sort must be one of: {', '.join(SORT_ORDERINGS)}."]})
            return qs.order_by(*SORT_ORDERINGS[sort], '-id')
        return qs.prefetch_related('usage_history__user__profile', 'maintenance_history')

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return AssetWriteSerializer
        if self.action == 'list':
            return AssetListSerializer
        return AssetSerializer

    def _read(self, asset):
        asset = self.get_queryset().get(pk=asset.pk)
        return AssetSerializer(asset, context=self.get_serializer_context()).data

    def _lock(self):
        return Asset.objects.select_for_update().get(pk=self.get_object().pk)

    def retrieve(self, request, *args, **kwargs):
        return envelope(data={'asset': self._read(self.get_object())})

    @extend_schema(request=AssetWriteSerializer, responses={201: AssetSerializer})
    def create(self, request, *args, **kwargs):
        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        asset = write_serializer.save(created_by=request.user)
        logger.info(f"Admin {request.user.id} created asset {asset.id} ({asset.serial_number})")
        return envelope(data={'asset': self._read(asset)}, message='Asset created', status=status.HTTP_201_CREATED)

    @extend_schema(request=AssetWriteSerializer, responses={200: AssetSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        asset = write_serializer.save(last_updated_by=request.user)
        return envelope(data={'asset': self._read(asset)}, message='Asset updated')

    def destroy(self, request, *args, **kwargs):
        asset = self.get_object()
        if asset.status == AssetStatus.IN_USE:
            raise DomainRuleViolation('Asset is in use and cannot be deleted.')

        for image in asset.images.all():
            image.image.delete(save=False)
        asset_id = asset.id
        asset.delete()
        logger.info(f"Admin {request.user.id} deleted asset {asset_id}")
        return envelope(message='Asset deleted')

    @extend_schema(request=AssetAssignSerializer, responses={200: AssetSerializer})
    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        serializer = AssetAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            asset = self._lock()
            if asset.status != AssetStatus.AVAILABLE:
                raise DomainRuleViolation('Asset is not available.')

            user = User.objects.select_related('profile').filter(pk=serializer.validated_data['user_id']).first()
            if user is None:
                raise ResourceNotFound('User not found.')

            asset.assign_to(
                user,
                purpose=serializer.validated_data['purpose'],
                expected_return_date=serializer.validated_data['expected_return_date'],
            )

        logger.info(f"Asset {asset.id} checked out to user {user.id}")
        return envelope(data={'asset': self._read(asset)}, message='Asset assigned')

    @extend_schema(request=AssetReturnSerializer, responses={200: AssetSerializer})
    @action(detail=True, methods=['post'], url_path='return')
    def return_asset(self, request, pk=None):
        serializer = AssetReturnSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            asset = self._lock()
            if asset.status != AssetStatus.IN_USE:
                raise DomainRuleViolation('Asset is not currently in use.')
            asset.return_from_holder(
                serializer.validated_data['condition'],
                notes=serializer.validated_data['notes'],
            )

        logger.info(f"Asset {asset.id} returned in condition {asset.condition}")
        return envelope(data={'asset': self._read(asset)}, message='Asset returned')

    @extend_schema(request=AssetMaintenanceCreateSerializer, responses={200: AssetSerializer})
    @action(detail=True, methods=['post'])
    def maintenance(self, request, pk=None):
        serializer = AssetMaintenanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            asset = self._lock()
            asset.add_maintenance(**serializer.validated_data)

        return envelope(data={'asset': self._read(asset)}, message='Maintenance record added')

    @action(detail=False, methods=['get'], url_path='stats/overview')
    def stats_overview(self, request):
        status_counts = {
            key: Count('id', filter=Q(status=value))
            for key, value in (
                ('available', AssetStatus.AVAILABLE),
                ('in_use', AssetStatus.IN_USE),
                ('maintenance', AssetStatus.MAINTENANCE),
                ('retired', AssetStatus.RETIRED),
            )
        }
        overview = Asset.objects.aggregate(total=Count('id'), **status_counts)
        category_stats = list(
            Asset.objects.order_by()
            .values('category')
            .annotate(
                count=Count('id'),
                available=Count('id', filter=Q(status=AssetStatus.AVAILABLE)),
                in_use=Count('id', filter=Q(status=AssetStatus.IN_USE)),
            )
            .order_by('-count', 'category')
        )
        return envelope(data={'overview': overview, 'category_stats': category_stats})
