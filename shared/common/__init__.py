# Shared Common Library for the Driving School Management System
# This package contains shared exceptions, validators, constants
# and date helpers used by the services.

__version__ = "1.0.0"

# Export commonly used components
from .exceptions import (
    BaseServiceException,
    format_error,
)

from .validators import (
    validate_iso_date,
    validate_time_of_day,
    validate_phone_number,
    validate_max_length,
    validate_positive_decimal,
)

from .constants import (
    TIME_OF_DAY_PATTERN,
    BookingKind,
    ConflictType,
)

__all__ = [
    # Version
    '__version__',

    # Exceptions
    'BaseServiceException',
    'format_error',

    # Validators
    'validate_iso_date',
    'validate_time_of_day',
    'validate_phone_number',
    'validate_max_length',
    'validate_positive_decimal',

    # Constants
    'TIME_OF_DAY_PATTERN',
    'BookingKind',
    'ConflictType',
]
