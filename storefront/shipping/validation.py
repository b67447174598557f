"""
Whole-document validation for shipping zones and rates.

Both validators take plain dicts (request payload shape) and return a list
of user-facing messages, empty when the document is valid.
"""
import re
from decimal import Decimal, InvalidOperation

from .conditions import RateConditionSet, ConditionError, DIMENSIONS, condition_dimension

COUNTRY_CODE_RE = re.compile(r'^[A-Za-z]{2}$')
RATE_TYPES = ('flat', 'weight', 'price')


def _number(value):
    if value is None or value == '' or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return number if number.is_finite() else None


def validate_shipping_zone(data):
    errors = []

    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        errors.append('Zone name is required')

    countries = data.get('countries')
    if not isinstance(countries, (list, tuple)) or len(countries) == 0:
        errors.append('At least one country is required')
    else:
        for country in countries:
            if not isinstance(country, str) or not COUNTRY_CODE_RE.match(country.strip()):
                errors.append(f'Invalid country code: {country}')

    regions = data.get('regions')
    if regions is not None and not isinstance(regions, (list, tuple)):
        errors.append('Regions must be a list')

    return errors


def build_condition_set(conditions):
    """
    Replay ``conditions`` through ``RateConditionSet.add`` in order.

    Returns ``(condition_set, errors)``; a condition rejected by ``add`` is
    reported and left out of the set.
    """
    condition_set = RateConditionSet()
    errors = []
    for condition in conditions:
        try:
            condition_set.add(condition)
        except ConditionError as e:
            errors.append(str(e))
    return condition_set, errors


def validate_shipping_rate(data):
    errors = []

    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        errors.append('Rate name is required')

    rate_type = data.get('rate_type')
    if rate_type not in RATE_TYPES:
        errors.append('Rate type must be one of: flat, weight, price')

    base_rate = _number(data.get('base_rate'))
    if base_rate is None or base_rate < 0:
        errors.append('Base rate must be a non-negative number')

    if data.get('additional_fee') not in (None, ''):
        additional_fee = _number(data.get('additional_fee'))
        if additional_fee is None or additional_fee < 0:
            errors.append('Additional fee must be a non-negative number')

    if data.get('free_shipping_threshold') not in (None, ''):
        threshold = _number(data.get('free_shipping_threshold'))
        if threshold is None or threshold < 0:
            errors.append('Free shipping threshold must be a non-negative number')

    estimated_days = data.get('estimated_days') or {}
    min_days = _number(estimated_days.get('min'))
    max_days = _number(estimated_days.get('max'))
    if min_days is None or max_days is None:
        errors.append('Estimated delivery days are required')
    else:
        if min_days < 0:
            errors.append('Minimum delivery days must be non-negative')
        if max_days < 0:
            errors.append('Maximum delivery days must be non-negative')
        if max_days < min_days:
            errors.append('Maximum delivery days must be greater than or equal to minimum days')

    conditions = data.get('conditions') or []
    if not isinstance(conditions, (list, tuple)):
        errors.append('Conditions must be a list')
        return errors

    if rate_type in DIMENSIONS:
        if len(conditions) == 0:
            errors.append(f'At least one condition is required for {rate_type} based rates')

        for condition in conditions:
            condition_type = condition.get('type') if isinstance(condition, dict) else None
            dimension = condition_dimension(condition_type)
            if dimension is not None and dimension != rate_type:
                errors.append(f'{condition_type} condition is not allowed for {rate_type} based rates')

        condition_set, add_errors = build_condition_set(conditions)
        errors.extend(add_errors)
        for message in condition_set.validate_all():
            if message not in errors:
                errors.append(message)

    return errors
