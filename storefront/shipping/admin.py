from django.contrib import admin
from .models import ShippingZone, ShippingRate


class ShippingRateInline(admin.TabularInline):
    model = ShippingRate
    extra = 0
    fields = ['name', 'rate_type', 'base_rate', 'additional_fee', 'free_shipping_threshold',
              'estimated_days_min', 'estimated_days_max', 'is_active']


@admin.register(ShippingZone)
class ShippingZoneAdmin(admin.ModelAdmin):
    list_display = ['name', 'countries', 'is_active', 'order', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']
    inlines = [ShippingRateInline]


@admin.register(ShippingRate)
class ShippingRateAdmin(admin.ModelAdmin):
    list_display = ['name', 'zone', 'rate_type', 'base_rate', 'additional_fee', 'is_active']
    list_filter = ['rate_type', 'is_active', 'zone']
    search_fields = ['name', 'zone__name']
