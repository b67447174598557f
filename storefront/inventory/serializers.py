from rest_framework import serializers
from .models import InventoryItem, InventoryHistory


class InventoryItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'product', 'product_name', 'size', 'color', 'quantity', 'status', 'status_display',
                  'location', 'low_stock_threshold', 'created_at', 'updated_at']
        read_only_fields = fields


class InventoryHistorySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True, allow_null=True)

    class Meta:
        model = InventoryHistory
        fields = ['id', 'product', 'product_name', 'item', 'change_type', 'quantity', 'previous_quantity',
                  'reason', 'username', 'created_at']
