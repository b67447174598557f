import django_filters
from .models import ShippingZone, ShippingRate


class ShippingZoneFilter(django_filters.FilterSet):
    """Filter zones by activity or by a country they cover"""
    is_active = django_filters.BooleanFilter(field_name='is_active')
    country = django_filters.CharFilter(method='filter_country', label='Country code')

    class Meta:
        model = ShippingZone
        fields = ['is_active', 'country']

    def filter_country(self, queryset, name, value):
        code = (value or '').strip().upper()
        if not code:
            return queryset
        # JSON list containment is not portable across backends; filter in Python
        ids = [zone.id for zone in queryset if code in [c.upper() for c in zone.countries]]
        return queryset.filter(id__in=ids)


class ShippingRateFilter(django_filters.FilterSet):
    zone = django_filters.NumberFilter(field_name='zone_id')
    type = django_filters.ChoiceFilter(field_name='rate_type', choices=ShippingRate.RATE_TYPE_CHOICES)
    is_active = django_filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = ShippingRate
        fields = ['zone', 'type', 'is_active']
