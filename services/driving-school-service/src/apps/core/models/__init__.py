# services/driving-school-service/src/apps/core/models/__init__.py
"""
Driving School Service Models
"""

from .phase import (
    Phase,
    PHASE_ORDER,
    phase_index,
    previous_phase,
    next_phase,
    is_last_phase,
)
from .candidate import Candidate, PhaseProgress
from .payment import Payment
from .fleet import Instructor, Vehicle
from .exam import Exam
from .lesson import Lesson

__all__ = [
    'Phase',
    'PHASE_ORDER',
    'phase_index',
    'previous_phase',
    'next_phase',
    'is_last_phase',
    'Candidate',
    'PhaseProgress',
    'Payment',
    'Instructor',
    'Vehicle',
    'Exam',
    'Lesson',
]
