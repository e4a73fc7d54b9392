from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from user.adapters.serializers.user_serializers import UserSummarySerializer
from ...models import (
    RETURN_CONDITIONS,
    Asset,
    AssetCategory,
    AssetImage,
    AssetMaintenance,
    AssetUsage,
    MaintenanceType,
)

MAX_IMAGES = 5


class AssetImageSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = AssetImage
        fields = ('id', 'url', 'original_name')

    def get_url(self, obj):
        request = self.context.get('request')
        if request is not None:
            return request.build_absolute_uri(obj.image.url)
        return obj.image.url


class AssetUsageSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = AssetUsage
        fields = ('id', 'user', 'user_name', 'assigned_date', 'returned_date', 'purpose', 'condition', 'notes')


class AssetMaintenanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = AssetMaintenance
        fields = ('id', 'date', 'type', 'description', 'cost', 'technician', 'notes')
        read_only_fields = ('id', 'date')
        extra_kwargs = {'description': {'min_length': 1}}


class AssetListSerializer(serializers.ModelSerializer):
    current_holder = UserSummarySerializer(read_only=True)
    created_by = UserSummarySerializer(read_only=True)
    images = AssetImageSerializer(many=True, read_only=True)
    is_in_use = serializers.BooleanField(read_only=True)
    days_in_use = serializers.IntegerField(read_only=True)
    is_overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Asset
        fields = (
            'id', 'name', 'category', 'brand', 'model', 'serial_number', 'description',
            'status', 'condition', 'current_holder', 'holder_name', 'assigned_date',
            'expected_return_date', 'purchase_date', 'purchase_price', 'vendor',
            'warranty_expiry', 'created_by', 'tags', 'location', 'images',
            'is_loanable', 'priority', 'is_in_use', 'days_in_use', 'is_overdue',
            'created_at', 'updated_at',
        )


class AssetSerializer(AssetListSerializer):
    last_updated_by = UserSummarySerializer(read_only=True)
    usage_history = AssetUsageSerializer(many=True, read_only=True)
    maintenance_history = AssetMaintenanceSerializer(many=True, read_only=True)

    class Meta(AssetListSerializer.Meta):
        fields = AssetListSerializer.Meta.fields + ('last_updated_by', 'usage_history', 'maintenance_history')


class AssetWriteSerializer(serializers.ModelSerializer):
    serial_number = serializers.CharField(
        min_length=1,
        max_length=50,
        validators=[UniqueValidator(Asset.objects.all(), message='Serial number already exists.')],
    )
    category = serializers.ChoiceField(choices=AssetCategory.choices)
    tags = serializers.ListField(child=serializers.CharField(max_length=20), required=False)
    images = serializers.ListField(
        child=serializers.ImageField(),
        required=False,
        max_length=MAX_IMAGES,
        write_only=True,
    )

    class Meta:
        model = Asset
        fields = (
            'name',
            'category',
            'brand',
            'model',
            'serial_number',
            'description',
            'status',
            'condition',
            'expected_return_date',
            'purchase_date',
            'purchase_price',
            'vendor',
            'warranty_expiry',
            'tags',
            'location',
            'is_loanable',
            'priority',
            'images',
        )
        extra_kwargs = {'name': {'min_length': 1}}

    @transaction.atomic
    def create(self, validated_data):
        uploads = validated_data.pop('images', [])
        asset = Asset.objects.create(**validated_data)
        self._save_images(asset, uploads)
        return asset

    @transaction.atomic
    def update(self, instance, validated_data):
        uploads = validated_data.pop('images', [])
        instance = super().update(instance, validated_data)
        self._save_images(instance, uploads)
        return instance

    def _save_images(self, asset, uploads):
        for upload in uploads:
            AssetImage.objects.create(asset=asset, image=upload, original_name=upload.name)


class AssetAssignSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    purpose = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    expected_return_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class AssetReturnSerializer(serializers.Serializer):
    condition = serializers.ChoiceField(choices=RETURN_CONDITIONS)
    notes = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')


class AssetMaintenanceCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=MaintenanceType.choices)
    description = serializers.CharField(min_length=1, max_length=300)
    cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    technician = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
