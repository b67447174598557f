from django.contrib import admin
from .models import InventoryItem, InventoryHistory


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['product', 'size', 'color', 'quantity', 'status', 'location', 'updated_at']
    list_filter = ['status', 'location']
    search_fields = ['product__name', 'size', 'color']
    readonly_fields = ['status']


@admin.register(InventoryHistory)
class InventoryHistoryAdmin(admin.ModelAdmin):
    list_display = ['product', 'change_type', 'quantity', 'previous_quantity', 'reason', 'user', 'created_at']
    list_filter = ['change_type']
    search_fields = ['product__name', 'reason']
    readonly_fields = ['product', 'item', 'change_type', 'quantity', 'previous_quantity', 'reason', 'user', 'created_at']
