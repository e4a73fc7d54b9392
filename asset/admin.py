from django.contrib import admin

from .models import Asset, AssetImage, AssetMaintenance, AssetUsage


class AssetImageInline(admin.TabularInline):
    model = AssetImage
    extra = 0


class AssetUsageInline(admin.TabularInline):
    model = AssetUsage
    extra = 0
    raw_id_fields = ('user',)


class AssetMaintenanceInline(admin.TabularInline):
    model = AssetMaintenance
    extra = 0


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ('name', 'serial_number', 'category', 'status', 'condition', 'holder_name', 'expected_return_date')
    list_filter = ('category', 'status', 'condition', 'is_loanable')
    search_fields = ('name', 'serial_number', 'brand', 'model')
    raw_id_fields = ('current_holder', 'created_by', 'last_updated_by')
    inlines = [AssetImageInline, AssetUsageInline, AssetMaintenanceInline]
