from django.db import models
from decimal import Decimal

from .conditions import RateConditionSet, DIMENSIONS


class ShippingZone(models.Model):
    """A named group of countries/regions sharing shipping rates"""
    name = models.CharField(max_length=120)
    countries = models.JSONField(default=list, help_text='ISO-3166 alpha-2 country codes, e.g. ["US", "CA"]')
    regions = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def covers(self, country, region=None):
        """True when the zone ships to the country (and region, if the zone lists regions)"""
        if not country or country.upper() not in [c.upper() for c in self.countries]:
            return False
        if region and self.regions:
            return region.strip().lower() in [r.strip().lower() for r in self.regions]
        return True

    class Meta:
        db_table = 'shipping_zones'
        ordering = ['order', 'name']


class ShippingRate(models.Model):
    """Shipping rate of a zone; persisted as a whole document on edit"""
    RATE_TYPE_CHOICES = [
        ('flat', 'Flat Rate'),
        ('weight', 'Weight Based'),
        ('price', 'Price Based'),
    ]

    zone = models.ForeignKey(ShippingZone, on_delete=models.CASCADE, related_name='rates')
    name = models.CharField(max_length=120)
    rate_type = models.CharField(max_length=10, choices=RATE_TYPE_CHOICES, default='flat')
    base_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    conditions = models.JSONField(default=list, blank=True)
    additional_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    free_shipping_threshold = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    estimated_days_min = models.PositiveIntegerField(default=0)
    estimated_days_max = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.zone.name} - {self.name} ({self.rate_type})"

    def get_condition_set(self):
        return RateConditionSet(self.conditions)

    def get_condition(self, condition_type):
        condition = self.get_condition_set().find(condition_type)
        return condition['value'] if condition else None

    @property
    def dimension_conditions(self):
        """Condition kinds that apply to this rate type ('flat' has none)"""
        return DIMENSIONS.get(self.rate_type, ())

    class Meta:
        db_table = 'shipping_rates'
        ordering = ['zone', 'base_rate', 'name']
        indexes = [
            models.Index(fields=['zone', 'is_active'], name='idx_rate_zone_active'),
        ]
