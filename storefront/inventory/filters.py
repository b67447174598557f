import django_filters
from .models import InventoryItem


class InventoryFilter(django_filters.FilterSet):
    """Filter set for InventoryItem model"""
    status = django_filters.ChoiceFilter(field_name='status', choices=InventoryItem.STATUS_CHOICES)
    location = django_filters.CharFilter(field_name='location', lookup_expr='icontains')
    product = django_filters.NumberFilter(field_name='product_id')
    size = django_filters.CharFilter(field_name='size', lookup_expr='iexact')
    color = django_filters.CharFilter(field_name='color', lookup_expr='iexact')

    class Meta:
        model = InventoryItem
        fields = ['status', 'location', 'product', 'size', 'color']
