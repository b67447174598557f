"""
Shipping fee calculation and delivery estimates
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from .conditions import DIMENSIONS
from .formatting import format_currency, format_delivery_time
from .models import ShippingZone, ShippingRate

logger = logging.getLogger(__name__)


def _measure_for(rate_type, subtotal, weight):
    if rate_type == 'weight':
        return weight
    if rate_type == 'price':
        return subtotal
    return None


def rate_applies(rate, subtotal, weight):
    """Check every min/max condition of the rate; bounds are inclusive"""
    subtotal = Decimal(str(subtotal))
    weight = Decimal(str(weight))
    for condition in rate.get_condition_set():
        measure = weight if condition['type'].endswith('_weight') else subtotal
        if condition['type'].startswith('min_') and measure < condition['value']:
            return False
        if condition['type'].startswith('max_') and measure > condition['value']:
            return False
    return True


def calculate_shipping_fee(rate, subtotal, weight):
    """
    Fee for an order under ``rate``.

    Free when the rate has a free shipping threshold and the subtotal reaches
    it. Otherwise the base rate, plus ``additional_fee`` per unit of weight
    (or price) above the first condition of the rate's dimension. Never
    negative.
    """
    subtotal = Decimal(str(subtotal))
    weight = Decimal(str(weight))

    if rate.free_shipping_threshold and subtotal >= rate.free_shipping_threshold:
        return Decimal('0.00')

    fee = Decimal(rate.base_rate)

    kinds = DIMENSIONS.get(rate.rate_type)
    if kinds:
        measure = _measure_for(rate.rate_type, subtotal, weight)
        threshold = next((c for c in rate.get_condition_set() if c['type'] in kinds), None)
        if threshold is not None and measure > threshold['value']:
            fee += (measure - threshold['value']) * Decimal(rate.additional_fee)

    return max(Decimal('0.00'), fee).quantize(Decimal('0.01'))


def add_business_days(start, days):
    current = start
    remaining = int(days)
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() < 5:
            remaining -= 1
    return current


def get_estimated_delivery_dates(rate, start=None):
    """Earliest and latest delivery dates, counting business days from ``start``"""
    start = start or timezone.localdate()
    return {
        'min': add_business_days(start, rate.estimated_days_min),
        'max': add_business_days(start, rate.estimated_days_max),
    }


def find_shipping_options(subtotal, weight, country, region=None, currency=None):
    """
    Applicable active rates of the active zones covering the destination,
    cheapest first.
    """
    options = []
    zones = ShippingZone.objects.filter(is_active=True)
    matching_zones = [zone for zone in zones if zone.covers(country, region)]
    if not matching_zones:
        logger.info(f"No shipping zone covers country={country} region={region}")
        return options

    rates = ShippingRate.objects.filter(zone__in=matching_zones, is_active=True).select_related('zone')
    for rate in rates:
        if not rate_applies(rate, subtotal, weight):
            continue
        fee = calculate_shipping_fee(rate, subtotal, weight)
        dates = get_estimated_delivery_dates(rate)
        options.append({
            'rate_id': rate.id,
            'zone_id': rate.zone_id,
            'zone_name': rate.zone.name,
            'name': rate.name,
            'rate_type': rate.rate_type,
            'fee': fee,
            'fee_display': format_currency(fee, currency),
            'is_free': fee == 0,
            'estimated_days': {'min': rate.estimated_days_min, 'max': rate.estimated_days_max},
            'delivery_estimate': format_delivery_time(rate.estimated_days_min, rate.estimated_days_max),
            'estimated_delivery': {'min': dates['min'].isoformat(), 'max': dates['max'].isoformat()},
        })

    options.sort(key=lambda option: (option['fee'], option['estimated_days']['max']))
    return options
