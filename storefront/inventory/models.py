from django.conf import settings
from django.db import models
from storefront.catalog.models import Product
from .utils import get_inventory_status


def default_low_stock_threshold():
    return settings.INVENTORY_LOW_STOCK_THRESHOLD


class InventoryItem(models.Model):
    """Stock of one product size/color combination at a location"""
    STATUS_CHOICES = [
        ('in_stock', 'In Stock'),
        ('low_stock', 'Low Stock'),
        ('out_of_stock', 'Out of Stock'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='inventory_items')
    size = models.CharField(max_length=50)
    color = models.CharField(max_length=50)
    quantity = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='out_of_stock', editable=False)
    location = models.CharField(max_length=100)
    low_stock_threshold = models.PositiveIntegerField(default=default_low_stock_threshold)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product.name} ({self.size}, {self.color}): {self.quantity}"

    def save(self, *args, **kwargs):
        # status always follows quantity
        self.status = get_inventory_status(self.quantity, self.low_stock_threshold)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'quantity' in update_fields and 'status' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['status']
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['product__name', 'size', 'color']
        constraints = [
            models.UniqueConstraint(fields=['product', 'size', 'color'], name='uniq_inventory_product_size_color'),
        ]
        indexes = [
            models.Index(fields=['status'], name='idx_inventory_status'),
            models.Index(fields=['location'], name='idx_inventory_location'),
        ]


class InventoryHistory(models.Model):
    """Audit trail of stock changes"""
    CHANGE_TYPE_CHOICES = [
        ('increase', 'Increase'),
        ('decrease', 'Decrease'),
        ('update', 'Update'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='inventory_history')
    item = models.ForeignKey(InventoryItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='history')
    change_type = models.CharField(max_length=10, choices=CHANGE_TYPE_CHOICES)
    quantity = models.IntegerField()
    previous_quantity = models.IntegerField(null=True, blank=True)
    reason = models.CharField(max_length=200, blank=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                             related_name='inventory_changes')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.change_type} {self.product.name}: {self.quantity}"

    class Meta:
        db_table = 'inventory_history'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'inventory history'
