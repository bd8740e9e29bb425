from __future__ import annotations
"""Reusable validation helpers for request payloads.

Each helper returns the cleaned value (to enable inline usage) or raises
ValidationError with a message fit for direct display.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from dashboard.constants.categories import CATEGORIES, is_known_category, unknown_categories
from dashboard.errors import ValidationError


def require_text(value: Any, field_name: str, max_length: Optional[int] = None) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field_name} is required')
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{field_name} must be at most {max_length} characters')
    return value


def optional_text(value: Any, field_name: str, max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field_name} must be a string')
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f'{field_name} must be at most {max_length} characters')
    return value


def parse_price(value: Any, field_name: str = 'price') -> Decimal:
    """Positive decimal with at most two fractional digits."""
    if value is None or isinstance(value, bool) or value == '':
        raise ValidationError(f'{field_name} is required')
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field_name} must be a number')
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f'{field_name} must be a positive number')
    if amount.as_tuple().exponent < -2:
        raise ValidationError(f'{field_name} must have at most 2 decimal places')
    return amount.quantize(Decimal('0.01'))


def parse_int(value: Any, field_name: str, minimum: Optional[int] = None) -> int:
    if value is None or isinstance(value, bool) or value == '':
        raise ValidationError(f'{field_name} is required')
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f'{field_name} must be an integer')
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field_name} must be an integer')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field_name} must be at least {minimum}')
    return number


def validate_category(value: Any, field_name: str = 'category') -> str:
    if not is_known_category(value):
        raise ValidationError(f"{field_name} must be one of: {', '.join(CATEGORIES)}")
    return value


def validate_category_set(values: Any, field_name: str = 'assigned_categories') -> List[str]:
    """Non-empty list of known categories, de-duplicated in canonical order."""
    if not isinstance(values, (list, tuple, set, frozenset)) or not values:
        raise ValidationError('At least one category must be assigned')
    unknown = unknown_categories(values)
    if unknown:
        raise ValidationError(f'Unknown categories: {unknown}')
    chosen = set(values)
    return [c for c in CATEGORIES if c in chosen]


def validate_url_list(values: Any, field_name: str = 'images') -> List[str]:
    if values is None:
        return []
    if not isinstance(values, list) or any(not isinstance(v, str) for v in values):
        raise ValidationError(f'{field_name} must be a list of URLs')
    return [v.strip() for v in values if v.strip()]


__all__ = [
    'require_text', 'optional_text', 'parse_price', 'parse_int', 'validate_category',
    'validate_category_set', 'validate_url_list',
]
