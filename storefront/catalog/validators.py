"""
Validation for storefront catalog input: products, reviews and colors
"""
import re
from decimal import Decimal, InvalidOperation

HEX_COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')
MAX_REVIEW_PHOTOS = 5
MIN_REVIEW_COMMENT_LENGTH = 10


def _is_blank(value):
    return not isinstance(value, str) or not value.strip()


def _valid_rating(rating):
    """Whole number from 1 to 5; numeric strings are accepted"""
    if rating is None or isinstance(rating, bool):
        return False
    try:
        value = Decimal(str(rating).strip())
    except InvalidOperation:
        return False
    return value.is_finite() and value == value.to_integral_value() and 1 <= value <= 5


def validate_review_data(data):
    """
    Validate a review submission.

    Returns:
        dict: {'is_valid': bool, 'errors': list of messages}
    """
    errors = []

    if not _valid_rating(data.get('rating')):
        errors.append('Rating must be between 1 and 5')

    comment = data.get('comment')
    if _is_blank(comment):
        errors.append('Review comment is required')
    elif len(comment.strip()) < MIN_REVIEW_COMMENT_LENGTH:
        errors.append(f'Review comment must be at least {MIN_REVIEW_COMMENT_LENGTH} characters long')

    photos = data.get('photos')
    if photos:
        if not isinstance(photos, (list, tuple)):
            errors.append('Photos must be provided as an array')
        elif len(photos) > MAX_REVIEW_PHOTOS:
            errors.append(f'Maximum {MAX_REVIEW_PHOTOS} photos allowed per review')

    return {'is_valid': len(errors) == 0, 'errors': errors}


def validate_hex_color(color):
    """True for an exact #RRGGBB color, any letter case"""
    return isinstance(color, str) and HEX_COLOR_RE.fullmatch(color) is not None


def format_hex_color(color):
    """
    Normalize user input to #RRGGBB: drop whitespace, add a missing '#',
    expand #RGB shorthand and upper-case.

    >>> format_hex_color('abc')
    '#AABBCC'
    """
    clean = re.sub(r'\s', '', color or '')
    if not clean.startswith('#'):
        clean = f'#{clean}'
    if len(clean) == 4:
        clean = '#' + ''.join(ch * 2 for ch in clean[1:])
    return clean.upper()


def _positive_number(value):
    if value is None or isinstance(value, bool) or value == '':
        return False
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return False
    return number.is_finite() and number > 0


def validate_product_data(data):
    """
    Validate a product document before it is saved.

    Colors and sizes are only checked when present; each entry is reported
    by its name, or by its 1-based position when it has none.

    Returns:
        dict: {'is_valid': bool, 'errors': list of messages}
    """
    errors = []

    if _is_blank(data.get('name')):
        errors.append('Product name is required')

    if _is_blank(data.get('description')):
        errors.append('Product description is required')

    if not _positive_number(data.get('price')):
        errors.append('Valid price is required')

    if data.get('category') in (None, ''):
        errors.append('Category is required')

    images = data.get('images')
    if not isinstance(images, (list, tuple)) or len(images) == 0:
        errors.append('At least one product image is required')

    colors = data.get('colors')
    if isinstance(colors, (list, tuple)):
        for index, color in enumerate(colors, start=1):
            color = color if isinstance(color, dict) else {}
            name = color.get('name')
            if _is_blank(name):
                errors.append(f'Color name is required for color #{index}')
            if not validate_hex_color(color.get('code')):
                errors.append(f'Invalid color code for {name or f"color #{index}"}')

    sizes = data.get('sizes')
    if isinstance(sizes, (list, tuple)):
        for index, size in enumerate(sizes, start=1):
            size = size if isinstance(size, dict) else {}
            name = size.get('name')
            if _is_blank(name):
                errors.append(f'Size name is required for size #{index}')
            stock = size.get('stock')
            if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
                errors.append(f'Invalid stock quantity for {name or f"size #{index}"}')

    return {'is_valid': len(errors) == 0, 'errors': errors}
