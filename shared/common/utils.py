# shared/common/utils.py
"""
Common Utility Functions
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Tuple, Union

from django.utils import timezone


# =============================================================================
# DATE UTILITIES
# =============================================================================

def today() -> date:
    """Get the current local date"""
    return timezone.localdate()


def add_days(d: date, days: int) -> date:
    """Shift a date by a number of days"""
    return d + timedelta(days=days)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end is earlier)"""
    return (end - start).days


def cooldown_window(anchor: date, days: int) -> Tuple[date, date]:
    """
    Half-open window ``[anchor, anchor + days)`` during which a new
    attempt is blocked.
    """
    return anchor, add_days(anchor, days)


def is_within_cooldown(as_of: date, anchor: date, days: int) -> bool:
    """Check whether ``as_of`` falls before the end of the cooldown window"""
    _, ends = cooldown_window(anchor, days)
    return as_of < ends


# =============================================================================
# NUMBER UTILITIES
# =============================================================================

def percentage(part: float, whole: float) -> float:
    """Calculate percentage safely"""
    if not whole:
        return 0.0
    return round((part / whole) * 100, 2)


def round_decimal(value: Union[Decimal, float], places: int = 2) -> Decimal:
    """Round decimal to specified places"""
    return Decimal(str(value)).quantize(Decimal(10) ** -places)
