import math

from django.core.validators import MinValueValidator
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

from user.models import display_name


class AssetCategory(models.TextChoices):
    CAMERA = 'camera', 'Camera'
    LENS = 'lens', 'Lens'
    TRIPOD = 'tripod', 'Tripod'
    STABILIZER = 'stabilizer', 'Stabilizer'
    LIGHTING = 'lighting', 'Lighting'
    AUDIO = 'audio', 'Audio'
    STORAGE = 'storage', 'Storage'
    COMPUTER = 'computer', 'Computer'
    OTHER = 'other', 'Other'


class AssetStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    IN_USE = 'in_use', 'In Use'
    MAINTENANCE = 'maintenance', 'Maintenance'
    RETIRED = 'retired', 'Retired'


class AssetCondition(models.TextChoices):
    NEW = 'new', 'New'
    GOOD = 'good', 'Good'
    FAIR = 'fair', 'Fair'
    NEEDS_REPAIR = 'needs_repair', 'Needs Repair'


# Conditions an asset can come back in
RETURN_CONDITIONS = [
    (AssetCondition.GOOD, AssetCondition.GOOD.label),
    (AssetCondition.FAIR, AssetCondition.FAIR.label),
    (AssetCondition.NEEDS_REPAIR, AssetCondition.NEEDS_REPAIR.label),
]


class MaintenanceType(models.TextChoices):
    UPKEEP = 'upkeep', 'Upkeep'
    REPAIR = 'repair', 'Repair'
    INSPECTION = 'inspection', 'Inspection'


class AssetPriority(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'


class Asset(models.Model):
    name = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=AssetCategory.choices, db_index=True)
    brand = models.CharField(max_length=50, blank=True, default='')
    model = models.CharField(max_length=100, blank=True, default='')
    serial_number = models.CharField(max_length=50, unique=True)
    description = models.TextField(max_length=500, blank=True, default='')
    status = models.CharField(max_length=20, choices=AssetStatus.choices, default=AssetStatus.AVAILABLE, db_index=True)
    condition = models.CharField(max_length=20, choices=AssetCondition.choices, default=AssetCondition.GOOD)
    current_holder = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='held_assets'
    )
    holder_name = models.CharField(max_length=150, blank=True, default='')
    assigned_date = models.DateTimeField(null=True, blank=True)
    expected_return_date = models.DateTimeField(null=True, blank=True)
    purchase_date = models.DateField(null=True, blank=True)
    purchase_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    vendor = models.CharField(max_length=100, blank=True, default='')
    warranty_expiry = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, related_name='created_assets'
    )
    last_updated_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='updated_assets'
    )
    tags = models.JSONField(default=list, blank=True)
    location = models.CharField(max_length=100, blank=True, default='')
    is_loanable = models.BooleanField(default=True)
    priority = models.CharField(max_length=10, choices=AssetPriority.choices, default=AssetPriority.MEDIUM)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f'{self.name} ({self.serial_number})'

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'status'], name='asset_category_status_idx'),
        ]

    @property
    def is_in_use(self):
        return self.status == AssetStatus.IN_USE and self.current_holder_id is not None

    @property
    def days_in_use(self):
        if self.assigned_date and self.status == AssetStatus.IN_USE:
            elapsed = abs((timezone.now() - self.assigned_date).total_seconds())
            return math.ceil(elapsed / 86400)
        return 0

    @property
    def is_overdue(self):
        if self.expected_return_date and self.status == AssetStatus.IN_USE:
            return timezone.now() > self.expected_return_date
        return False

    def assign_to(self, user, purpose='', expected_return_date=None):
        now = timezone.now()
        self.current_holder = user
        self.holder_name = display_name(user)
        self.assigned_date = now
        self.expected_return_date = expected_return_date
        self.status = AssetStatus.IN_USE
        self.save()
        return AssetUsage.objects.create(
            asset=self,
            user=user,
            user_name=self.holder_name,
            assigned_date=now,
            purpose=purpose,
        )

    def return_from_holder(self, condition, notes=''):
        """Close the open usage record, if any, and make the asset available again."""
        last_usage = self.usage_history.order_by('-assigned_date', '-id').first()
        if last_usage is not None and last_usage.returned_date is None:
            last_usage.returned_date = timezone.now()
            last_usage.condition = condition
            last_usage.notes = notes
            last_usage.save()

        self.current_holder = None
        self.holder_name = ''
        self.assigned_date = None
        self.expected_return_date = None
        self.status = AssetStatus.AVAILABLE
        self.condition = condition
        self.save()
        return last_usage

    def add_maintenance(self, type, description, cost=None, technician='', notes=''):
        record = AssetMaintenance.objects.create(
            asset=self,
            type=type,
            description=description,
            cost=cost,
            technician=technician,
            notes=notes,
        )
        if type == MaintenanceType.REPAIR:
            self.status = AssetStatus.MAINTENANCE
            self.save(update_fields=['status', 'updated_at'])
        return record


class AssetImage(models.Model):
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='images')
    image = models.ImageField(upload_to='assets/', max_length=255)
    original_name = models.CharField(max_length=255, blank=True, default='')

    def __str__(self):
        return self.original_name or self.image.name


class AssetUsage(models.Model):
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='usage_history')
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='asset_usages')
    user_name = models.CharField(max_length=150)
    assigned_date = models.DateTimeField()
    returned_date = models.DateTimeField(null=True, blank=True)
    purpose = models.CharField(max_length=200, blank=True, default='')
    condition = models.CharField(max_length=20, choices=RETURN_CONDITIONS, blank=True, default='')
    notes = models.CharField(max_length=300, blank=True, default='')

    def __str__(self):
        return f'{self.user_name} - {self.asset}'

    class Meta:
        ordering = ['assigned_date', 'id']
        verbose_name_plural = 'Asset usage history'


class AssetMaintenance(models.Model):
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='maintenance_history')
    date = models.DateTimeField(default=timezone.now)
    type = models.CharField(max_length=20, choices=MaintenanceType.choices)
    description = models.CharField(max_length=300)
    cost = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    technician = models.CharField(max_length=50, blank=True, default='')
    notes = models.CharField(max_length=300, blank=True, default='')

    def __str__(self):
        return f'{self.get_type_display()} - {self.asset}'

    class Meta:
        ordering = ['date', 'id']
        verbose_name_plural = 'Asset maintenance history'
