"""
Shared Constants Module.

Common constants used across the Driving School Management System.
"""
from enum import Enum


# =============================================================================
# SYSTEM CONSTANTS
# =============================================================================

# 24-hour wall clock time, e.g. "09:30"
TIME_OF_DAY_PATTERN = r'^([0-1][0-9]|2[0-3]):[0-5][0-9]$'

DEFAULT_UPCOMING_LIMIT = 10


# =============================================================================
# BOOKING CONSTANTS
# =============================================================================

class BookingKind(str, Enum):
    """The two booking families kept in the ledger."""
    LESSON = "lesson"
    EXAM = "exam"


class ConflictType(str, Enum):
    """Resource dimension a booking collided on."""
    INSTRUCTOR = "instructor"
    CANDIDATE = "candidate"
    PENDING_EXAM = "pending_exam"
    PHASE_PASSED = "phase_passed"
