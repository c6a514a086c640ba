# services/driving-school-service/src/apps/core/services/__init__.py
"""
Driving School Service Business Logic
"""

from typing import Any, Callable, Dict, Type

from django.core.exceptions import ValidationError as DjangoValidationError

from shared.common.exceptions import BaseServiceException

from .ledger import BookingLedger
from .stores import CandidateStore, FleetStore
from .eligibility_service import EligibilityService, EligibilityResult
from .conflict_service import ConflictService, ReservationResult
from .progression_service import ProgressionService
from .exam_service import ExamService
from .lesson_service import LessonService
from .candidate_service import CandidateService
from .fleet_service import FleetService


# Custom Exceptions
class SchoolServiceError(BaseServiceException):
    """Base exception for driving school service errors."""
    pass


class NotFoundError(SchoolServiceError):
    """Referenced candidate, instructor, vehicle or booking does not exist."""
    default_detail = 'The requested resource was not found.'
    error_code = 'NOT_FOUND'


class InvalidStateError(SchoolServiceError):
    """Operation attempted on a record not in the required source state."""
    default_detail = 'The record is not in a state that allows this operation.'
    error_code = 'INVALID_STATE'


class SchedulingConflictError(SchoolServiceError):
    """Instructor or candidate already booked at the requested slot."""
    default_detail = 'The requested slot conflicts with an existing booking.'
    error_code = 'SCHEDULING_CONFLICT'


class ExamNotEligibleError(SchoolServiceError):
    """Cooldown active, phase already passed, or an attempt already pending."""
    default_detail = 'The candidate cannot take this exam yet.'
    error_code = 'EXAM_NOT_ELIGIBLE_YET'


class BookingValidationError(SchoolServiceError):
    """Malformed input or a booking rule violation."""
    default_detail = 'Validation error.'
    error_code = 'VALIDATION_ERROR'


ERRORS_BY_CODE = {
    cls.error_code: cls
    for cls in (
        NotFoundError,
        InvalidStateError,
        SchedulingConflictError,
        ExamNotEligibleError,
        BookingValidationError,
    )
}


def validate_payload(
    serializer_class: Type,
    data: Dict[str, Any],
    partial: bool = False
) -> Dict[str, Any]:
    """Run a request serializer, raising BookingValidationError on failure."""
    serializer = serializer_class(data=data, partial=partial)
    if not serializer.is_valid():
        raise BookingValidationError(
            "Invalid request data",
            extra_data={'errors': serializer.errors}
        )
    return serializer.validated_data


def run_validator(validator: Callable, *args, **kwargs) -> Any:
    """Call a shared validator, re-raising its failure as BookingValidationError."""
    try:
        return validator(*args, **kwargs)
    except DjangoValidationError as e:
        raise BookingValidationError(e.messages[0])


__all__ = [
    # Collaborators
    'BookingLedger',
    'CandidateStore',
    'FleetStore',

    # Services
    'EligibilityService',
    'ConflictService',
    'ProgressionService',
    'ExamService',
    'LessonService',
    'CandidateService',
    'FleetService',

    # Results
    'EligibilityResult',
    'ReservationResult',

    # Exceptions
    'SchoolServiceError',
    'NotFoundError',
    'InvalidStateError',
    'SchedulingConflictError',
    'ExamNotEligibleError',
    'BookingValidationError',
    'ERRORS_BY_CODE',
    'validate_payload',
    'run_validator',
]
