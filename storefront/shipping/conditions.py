"""
Rate conditions for weight and price based shipping rates.

A condition is a plain dict ``{'type': <kind>, 'value': <number>}``, the same
shape the rate document stores in its ``conditions`` list.
"""
from decimal import Decimal, InvalidOperation

MIN_WEIGHT = 'min_weight'
MAX_WEIGHT = 'max_weight'
MIN_PRICE = 'min_price'
MAX_PRICE = 'max_price'

CONDITION_TYPE_CHOICES = [
    (MIN_WEIGHT, 'Minimum Weight'),
    (MAX_WEIGHT, 'Maximum Weight'),
    (MIN_PRICE, 'Minimum Price'),
    (MAX_PRICE, 'Maximum Price'),
]
CONDITION_TYPES = [value for value, _ in CONDITION_TYPE_CHOICES]

# dimension -> (min kind, max kind)
DIMENSIONS = {
    'weight': (MIN_WEIGHT, MAX_WEIGHT),
    'price': (MIN_PRICE, MAX_PRICE),
}


class ConditionError(ValueError):
    """Raised when a condition cannot be added to a condition set"""


def condition_dimension(condition_type):
    """Return 'weight' or 'price' for a condition kind"""
    for dimension, kinds in DIMENSIONS.items():
        if condition_type in kinds:
            return dimension
    return None


def normalize_condition(condition):
    """Coerce a condition dict to ``{'type': str, 'value': Decimal}``"""
    if not isinstance(condition, dict):
        raise ConditionError('Condition must be an object with type and value')
    condition_type = condition.get('type')
    if condition_type not in CONDITION_TYPES:
        raise ConditionError(f'Unknown condition type: {condition_type}')
    try:
        value = Decimal(str(condition.get('value')))
    except (InvalidOperation, ValueError, TypeError):
        raise ConditionError(f'{condition_type} value must be a number')
    if not value.is_finite():
        raise ConditionError(f'{condition_type} value must be a number')
    return {'type': condition_type, 'value': value}


class RateConditionSet:
    """
    Ordered collection of the conditions of one rate being edited.

    ``add`` guards against duplicate kinds and, when a max condition is
    added, against a max that does not exceed the existing min of the same
    dimension. Adding a min after a max is only caught by ``validate_all``.
    ``update`` does not validate either; callers run ``validate_all`` before
    persisting.
    """

    def __init__(self, conditions=None):
        self._conditions = []
        for condition in conditions or []:
            self._conditions.append(normalize_condition(condition))

    def __len__(self):
        return len(self._conditions)

    def __iter__(self):
        return iter(self._conditions)

    @property
    def conditions(self):
        return list(self._conditions)

    def find(self, condition_type):
        for condition in self._conditions:
            if condition['type'] == condition_type:
                return condition
        return None

    def add(self, condition):
        condition = normalize_condition(condition)
        condition_type = condition['type']

        if self.find(condition_type) is not None:
            raise ConditionError(f'A {condition_type} condition already exists')

        if condition_type == MAX_WEIGHT:
            min_weight = self.find(MIN_WEIGHT)
            if min_weight and condition['value'] <= min_weight['value']:
                raise ConditionError('Maximum weight must be greater than minimum weight')

        if condition_type == MAX_PRICE:
            min_price = self.find(MIN_PRICE)
            if min_price and condition['value'] <= min_price['value']:
                raise ConditionError('Maximum price must be greater than minimum price')

        self._conditions.append(condition)
        return condition

    def remove(self, index):
        self._conditions = [c for i, c in enumerate(self._conditions) if i != index]

    def update(self, index, condition):
        condition = normalize_condition(condition)
        self._conditions = [
            condition if i == index else existing
            for i, existing in enumerate(self._conditions)
        ]

    def validate_all(self):
        """Return human-readable errors; empty when the set is consistent"""
        errors = []

        for condition in self._conditions:
            if condition['value'] < 0:
                errors.append(f"{condition['type']} cannot be negative")

        min_weight = self.find(MIN_WEIGHT)
        max_weight = self.find(MAX_WEIGHT)
        if min_weight and max_weight and max_weight['value'] <= min_weight['value']:
            errors.append('Maximum weight must be greater than minimum weight')

        min_price = self.find(MIN_PRICE)
        max_price = self.find(MAX_PRICE)
        if min_price and max_price and max_price['value'] <= min_price['value']:
            errors.append('Maximum price must be greater than minimum price')

        return errors

    def to_list(self):
        """JSON-ready list of conditions, values as floats"""
        return [{'type': c['type'], 'value': float(c['value'])} for c in self._conditions]
