"""
Inventory operations: adding stock records, quantity updates and low stock alerts.

Every quantity change writes an InventoryHistory row and keeps the matching
catalog size stock in sync with the sum of its inventory records.
"""
import logging
import math
from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from storefront.catalog.models import Product, ProductSize
from .models import InventoryItem, InventoryHistory

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ('product', 'Product is required'),
    ('size', 'Size is required'),
    ('color', 'Color is required'),
    ('location', 'Location is required'),
)


class InventoryError(Exception):
    """Inventory operation rejected; ``status_code`` is the HTTP status to report"""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def parse_quantity(value):
    """Whole, non-negative quantity or InventoryError"""
    if value is None or value == '' or isinstance(value, bool):
        raise InventoryError('Valid quantity is required')
    try:
        number = float(str(value).strip())
    except ValueError:
        raise InventoryError('Valid quantity is required')
    if not math.isfinite(number) or number < 0 or number != int(number):
        raise InventoryError('Valid quantity is required')
    return int(number)


def _sync_size_stock(product, size):
    total = InventoryItem.objects.filter(product=product, size=size).aggregate(total=Sum('quantity'))['total'] or 0
    updated = ProductSize.objects.filter(product=product, name=size).update(stock=total)
    if updated:
        logger.debug(f"Synced stock of {product.name} size {size} to {total}")


def _record_history(item, change_type, quantity, reason, user=None, previous_quantity=None):
    return InventoryHistory.objects.create(
        product=item.product,
        item=item,
        change_type=change_type,
        quantity=quantity,
        previous_quantity=previous_quantity,
        reason=reason,
        user=user if user is not None and user.is_authenticated else None,
    )


def check_low_stock_alert(item):
    """
    Log an alert when an item runs low.

    Returns the alert dict (message, severity, product_id, current_stock)
    or None when stock is healthy.
    """
    label = f"{item.product.name} ({item.size}, {item.color})"
    if item.quantity <= 0:
        message, severity = f"Out of stock: {label}", 'critical'
    elif item.quantity <= settings.INVENTORY_CRITICAL_STOCK_THRESHOLD:
        message, severity = f"Critical low stock: {label} - Only {item.quantity} remaining", 'high'
    elif item.quantity <= settings.INVENTORY_LOW_STOCK_THRESHOLD:
        message, severity = f"Low stock alert: {label} running low - {item.quantity} remaining", 'medium'
    else:
        return None

    logger.warning(f"[{severity}] {message}")
    return {
        'message': message,
        'severity': severity,
        'product_id': item.product_id,
        'current_stock': item.quantity,
    }


def add_inventory(data, user=None):
    """
    Create the inventory record of a product/size/color combination.

    Raises:
        InventoryError: missing fields, bad quantity, unknown product or an
            existing record for the same combination
    """
    for field, message in REQUIRED_FIELDS:
        value = data.get(field)
        if value in (None, '') or (isinstance(value, str) and not value.strip()):
            raise InventoryError(message)
    quantity = parse_quantity(data.get('quantity'))

    product = data['product']
    if not isinstance(product, Product):
        try:
            product = Product.objects.get(pk=product)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise InventoryError('Product not found', status_code=404)

    size = str(data['size']).strip()
    color = str(data['color']).strip()
    if InventoryItem.objects.filter(product=product, size=size, color=color).exists():
        raise InventoryError(
            f'Inventory already exists for this product, size ({size}), and color ({color}) combination. '
            f'Please update the existing inventory instead.'
        )

    fields = {
        'product': product,
        'size': size,
        'color': color,
        'quantity': quantity,
        'location': str(data['location']).strip(),
    }
    if data.get('low_stock_threshold') not in (None, ''):
        fields['low_stock_threshold'] = parse_quantity(data['low_stock_threshold'])

    with transaction.atomic():
        item = InventoryItem.objects.create(**fields)
        _record_history(item, 'increase', quantity, data.get('reason') or 'Initial stock', user)
        _sync_size_stock(product, size)

    logger.info(f"Added inventory {item.id}: {product.name} ({size}, {color}) x{quantity} at {item.location}")
    check_low_stock_alert(item)
    return item


def update_inventory(item, quantity, user=None, reason='Manual update', location=None):
    """Set an item's quantity (and optionally its location) and record the change"""
    quantity = parse_quantity(quantity)
    previous = item.quantity
    location = str(location).strip() if location is not None else ''

    with transaction.atomic():
        item.quantity = quantity
        if location:
            item.location = location
        item.save()
        _record_history(item, 'update', quantity, reason, user, previous_quantity=previous)
        _sync_size_stock(item.product, item.size)

    logger.info(f"Inventory {item.id} quantity {previous} -> {quantity} ({reason})")
    check_low_stock_alert(item)
    return item


def bulk_update_inventory(items, user=None):
    """
    Apply ``[{'id': ..., 'quantity': ...}, ...]`` in one transaction.

    Every entry is checked before anything is written.
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise InventoryError('At least one item is required')

    parsed = []
    for entry in items:
        if not isinstance(entry, dict) or entry.get('id') in (None, ''):
            raise InventoryError('Each item needs an id and a quantity')
        try:
            item_id = int(entry['id'])
        except (TypeError, ValueError):
            raise InventoryError(f"Invalid inventory id: {entry['id']}")
        parsed.append((item_id, parse_quantity(entry.get('quantity'))))

    records = InventoryItem.objects.select_related('product').in_bulk([item_id for item_id, _ in parsed])
    missing = [str(item_id) for item_id, _ in parsed if item_id not in records]
    if missing:
        raise InventoryError(f"Inventory record(s) not found: {', '.join(missing)}", status_code=404)

    updated = []
    with transaction.atomic():
        for item_id, quantity in parsed:
            updated.append(update_inventory(records[item_id], quantity, user, reason='Bulk update'))

    logger.info(f"Bulk inventory update of {len(updated)} item(s)")
    return updated


def get_low_stock_items(include_out_of_stock=False):
    statuses = ['low_stock', 'out_of_stock'] if include_out_of_stock else ['low_stock']
    return InventoryItem.objects.filter(status__in=statuses).select_related('product').order_by('quantity')
