"""
Display formatting for shipping prices, weights and delivery windows
"""
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

# symbol, placed before the amount
CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'AED': 'AED ',
    'SAR': 'SAR ',
    'QAR': 'QAR ',
    'KWD': 'KWD ',
    'BHD': 'BHD ',
    'OMR': 'OMR ',
    'JOD': 'JOD ',
    'LBP': 'LBP ',
    'EGP': 'EGP ',
    'IQD': 'IQD ',
    'ILS': '₪',
}

TWO_PLACES = Decimal('0.01')


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_currency(amount, currency=None):
    """
    Format an amount with two decimals and thousands separators.

    >>> format_currency(1234.5)
    '$1,234.50'
    """
    currency = (currency or settings.STORE_CURRENCY).upper()
    symbol = CURRENCY_SYMBOLS.get(currency, f'{currency} ')
    value = _to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f'{sign}{symbol}{abs(value):,.2f}'


def format_weight(weight, unit=None):
    unit = unit or settings.STORE_WEIGHT_UNIT
    value = _to_decimal(weight).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f'{value:.2f} {unit}'


def format_delivery_time(min_days, max_days):
    """
    '1 business day', '3 business days' when the window is a single day,
    otherwise the inclusive range '2-5 business days'.
    """
    if min_days == max_days:
        suffix = '' if min_days == 1 else 's'
        return f'{min_days} business day{suffix}'
    return f'{min_days}-{max_days} business days'
