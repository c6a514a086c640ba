"""
Shared Validators Module.

Common validation utilities used across all services.
"""
import re
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.core.exceptions import ValidationError

from .constants import TIME_OF_DAY_PATTERN


# =============================================================================
# DATE/TIME VALIDATORS
# =============================================================================

def validate_iso_date(value: Any, field_name: str = "date") -> date:
    """Validate and convert an ISO ``YYYY-MM-DD`` value to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD)")


def validate_time_of_day(value: Any, field_name: str = "time") -> str:
    """Validate a 24-hour ``HH:MM`` time string."""
    if not isinstance(value, str) or not re.match(TIME_OF_DAY_PATTERN, value):
        raise ValidationError(f"{field_name} must be in HH:MM format")
    return value


# =============================================================================
# STRING VALIDATORS
# =============================================================================

def validate_phone_number(value: str, field_name: str = "phone") -> str:
    """Validate phone number format."""
    cleaned = re.sub(r'[^\d]', '', value or '')

    if not cleaned:
        raise ValidationError(f"{field_name} is required")

    if not re.match(r'^\d{10,15}$', cleaned):
        raise ValidationError(f"Invalid {field_name} format")

    return cleaned


def validate_max_length(
    value: Optional[str],
    max_length: int,
    field_name: str = "value"
) -> Optional[str]:
    """Validate that a string does not exceed max length."""
    if value is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")
    return value


# =============================================================================
# NUMERIC VALIDATORS
# =============================================================================

def validate_positive_decimal(
    value: Any,
    max_value: Optional[Decimal] = None,
    field_name: str = "value"
) -> Decimal:
    """Validate a strictly positive decimal value."""
    try:
        value = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number")

    if value <= 0:
        raise ValidationError(f"{field_name} must be positive")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} cannot exceed {max_value}")

    return value
