from decimal import Decimal
from rest_framework import serializers
from .models import ShippingZone, ShippingRate
from .validation import validate_shipping_zone, validate_shipping_rate, build_condition_set
from .formatting import format_delivery_time


class ShippingZoneSerializer(serializers.ModelSerializer):
    countries = serializers.ListField(child=serializers.CharField(), allow_empty=True)
    regions = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)
    rate_count = serializers.SerializerMethodField()

    class Meta:
        model = ShippingZone
        fields = ['id', 'name', 'countries', 'regions', 'is_active', 'order', 'rate_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            # blank names are reported by validate_shipping_zone
            'name': {'allow_blank': True},
        }

    def get_rate_count(self, obj):
        return obj.rates.count()

    def validate(self, attrs):
        merged = {
            'name': attrs.get('name', getattr(self.instance, 'name', None)),
            'countries': attrs.get('countries', getattr(self.instance, 'countries', None)),
            'regions': attrs.get('regions', getattr(self.instance, 'regions', [])),
        }
        errors = validate_shipping_zone(merged)
        if errors:
            raise serializers.ValidationError({'errors': errors})

        if 'name' in attrs:
            attrs['name'] = attrs['name'].strip()
        if 'countries' in attrs:
            # keep first occurrence order, drop duplicates
            countries = []
            for country in attrs['countries']:
                code = country.strip().upper()
                if code not in countries:
                    countries.append(code)
            attrs['countries'] = countries
        if 'regions' in attrs:
            attrs['regions'] = [r.strip() for r in attrs['regions'] if r and r.strip()]
        return attrs


class EstimatedDaysSerializer(serializers.Serializer):
    min = serializers.IntegerField(source='estimated_days_min')
    max = serializers.IntegerField(source='estimated_days_max')


class RateConditionSerializer(serializers.Serializer):
    type = serializers.CharField()
    value = serializers.FloatField()


class ShippingRateSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(source='rate_type', choices=ShippingRate.RATE_TYPE_CHOICES)
    zone_name = serializers.CharField(source='zone.name', read_only=True)
    conditions = RateConditionSerializer(many=True, required=False)
    estimated_days = EstimatedDaysSerializer(source='*')
    delivery_estimate = serializers.SerializerMethodField()

    class Meta:
        model = ShippingRate
        fields = ['id', 'zone', 'zone_name', 'name', 'type', 'base_rate', 'conditions', 'additional_fee',
                  'free_shipping_threshold', 'is_active', 'estimated_days', 'delivery_estimate',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': True},
        }

    def get_delivery_estimate(self, obj):
        return format_delivery_time(obj.estimated_days_min, obj.estimated_days_max)

    def validate(self, attrs):
        rate_type = attrs.get('rate_type')
        conditions = [dict(c) for c in attrs.get('conditions', [])]
        document = {
            'name': attrs.get('name'),
            'rate_type': rate_type,
            'base_rate': attrs.get('base_rate'),
            'additional_fee': attrs.get('additional_fee'),
            'free_shipping_threshold': attrs.get('free_shipping_threshold'),
            'estimated_days': {
                'min': attrs.get('estimated_days_min'),
                'max': attrs.get('estimated_days_max'),
            },
            'conditions': conditions,
        }
        errors = validate_shipping_rate(document)
        if errors:
            raise serializers.ValidationError({'errors': errors})

        attrs['name'] = attrs['name'].strip()
        if rate_type == 'flat':
            attrs['conditions'] = []
        else:
            condition_set, _ = build_condition_set(conditions)
            attrs['conditions'] = condition_set.to_list()
        return attrs


class ShippingQuoteSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    weight = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=Decimal('0'), required=False, default=Decimal('0'))
    country = serializers.CharField(max_length=2, min_length=2)
    region = serializers.CharField(required=False, allow_blank=True)
    currency = serializers.CharField(required=False, allow_blank=True, max_length=3)
