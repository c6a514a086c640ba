# services/driving-school-service/src/apps/core/services/conflict_service.py
"""
Conflict Service

Decides whether a lesson or exam may occupy a slot and reserves it.
"""

import uuid
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Dict, Any, Callable

from django.db import transaction, IntegrityError

from shared.common.constants import BookingKind, ConflictType
from apps.core.models import Phase
from .ledger import BookingLedger
from .stores import CandidateStore, FleetStore
from .eligibility_service import EligibilityService

logger = logging.getLogger(__name__)


@dataclass
class ReservationResult:
    """Outcome of a reservation attempt."""

    accepted: bool
    reason: Optional[str] = None
    error_code: Optional[str] = None
    conflicts: List[Dict[str, Any]] = field(default_factory=list)
    booking: Any = None

    @classmethod
    def rejected(cls, reason: str, error_code: str, conflicts=None) -> 'ReservationResult':
        return cls(
            accepted=False,
            reason=reason,
            error_code=error_code,
            conflicts=conflicts or [],
        )

    def raise_for_rejection(self):
        """Raise the typed error matching ``error_code`` if not accepted."""
        from . import ERRORS_BY_CODE, SchoolServiceError

        if self.accepted:
            return
        error_class = ERRORS_BY_CODE.get(self.error_code, SchoolServiceError)
        raise error_class(
            self.reason,
            extra_data={'conflicts': self.conflicts} if self.conflicts else None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accepted': self.accepted,
            'reason': self.reason,
            'error_code': self.error_code,
            'conflicts': self.conflicts,
        }


class ConflictService:
    """
    Booking admission rules.

    Handles:
    - Instructor and candidate slot collisions
    - Pending and already passed exam checks
    - Exam cooldown and phase prerequisite
    - Lesson quota per phase
    - Atomic reservation
    """

    BOOKING_LABELS = {
        BookingKind.LESSON: 'a lesson',
        BookingKind.EXAM: 'an exam',
    }

    def __init__(
        self,
        ledger: BookingLedger = None,
        eligibility: EligibilityService = None,
        candidates: CandidateStore = None,
        fleet: FleetStore = None
    ):
        self.ledger = ledger or BookingLedger()
        self.eligibility = eligibility or EligibilityService(self.ledger)
        self.candidates = candidates or CandidateStore()
        self.fleet = fleet or FleetStore()

    # ==========================================================================
    # Checks
    # ==========================================================================

    def check_conflicts(
        self,
        kind: str,
        date: date,
        time: str,
        instructor_id: uuid.UUID = None,
        candidate_id: uuid.UUID = None,
        exclude_id: uuid.UUID = None
    ) -> List[Dict[str, Any]]:
        """Scheduled bookings of ``kind`` colliding at exactly ``date`` and ``time``."""
        from . import SchedulingConflictError

        kind = BookingKind(kind)
        label = self.BOOKING_LABELS[kind]
        conflicts = []

        if instructor_id:
            existing = self.ledger.find_active(
                kind, date, time,
                instructor_id=instructor_id,
                exclude_id=exclude_id,
            )
            if existing:
                conflicts.append({
                    'type': ConflictType.INSTRUCTOR.value,
                    'resource_id': str(instructor_id),
                    'booking_id': str(existing.id),
                    'message': f"Instructor already has {label} scheduled at this time",
                    'error_code': SchedulingConflictError.error_code,
                })

        if candidate_id:
            existing = self.ledger.find_active(
                kind, date, time,
                candidate_id=candidate_id,
                exclude_id=exclude_id,
            )
            if existing:
                conflicts.append({
                    'type': ConflictType.CANDIDATE.value,
                    'resource_id': str(candidate_id),
                    'booking_id': str(existing.id),
                    'message': f"Candidate already has {label} scheduled at this time",
                    'error_code': SchedulingConflictError.error_code,
                })

        return conflicts

    def check_exam_slot(
        self,
        candidate_id: uuid.UUID,
        exam_type: str,
        exclude_id: uuid.UUID = None
    ) -> List[Dict[str, Any]]:
        """Pending attempt and already passed checks for one phase exam."""
        from . import ExamNotEligibleError

        conflicts = []

        pending = self.ledger.find_pending_exam(candidate_id, exam_type, exclude_id=exclude_id)
        if pending:
            conflicts.append({
                'type': ConflictType.PENDING_EXAM.value,
                'resource_id': str(candidate_id),
                'booking_id': str(pending.id),
                'message': f"Candidate already has a scheduled {exam_type} exam",
                'error_code': ExamNotEligibleError.error_code,
            })

        if self.ledger.has_passed(candidate_id, exam_type):
            conflicts.append({
                'type': ConflictType.PHASE_PASSED.value,
                'resource_id': str(candidate_id),
                'booking_id': None,
                'message': f"Candidate has already passed the {exam_type} exam",
                'error_code': ExamNotEligibleError.error_code,
            })

        return conflicts

    # ==========================================================================
    # Reservation
    # ==========================================================================

    @transaction.atomic
    def check_and_reserve(
        self,
        kind: str,
        candidate_id: uuid.UUID,
        instructor_id: uuid.UUID,
        date: date,
        time: str,
        phase: str = None,
        exclude_id: uuid.UUID = None,
        reserve: Callable[[], Any] = None
    ) -> ReservationResult:
        """
        Run every admission rule for a booking and, when accepted, call
        ``reserve`` to write it.

        ``phase`` is the lesson or exam type. ``exclude_id`` marks an update
        of an existing booking, which is left out of its own checks and is
        not subject to the cooldown, prerequisite or quota rules again.

        Candidate then instructor rows are locked first, so concurrent
        reservations for the same people run one after the other.
        """
        from . import (
            InvalidStateError,
            SchedulingConflictError,
            ExamNotEligibleError,
            BookingValidationError,
        )

        kind = BookingKind(kind)
        is_new = exclude_id is None

        if phase not in Phase.values:
            return self._reject(f"Unknown phase: {phase}", BookingValidationError.error_code)

        candidate = self.candidates.get_for_update(candidate_id)
        instructor = self.fleet.get_instructor_for_update(instructor_id)

        if candidate.is_deleted:
            return self._reject(
                f"Candidate {candidate_id} has been deleted",
                InvalidStateError.error_code,
            )
        if instructor.is_deleted:
            return self._reject(
                f"Instructor {instructor_id} has been deleted",
                InvalidStateError.error_code,
            )

        if kind == BookingKind.EXAM:
            if is_new:
                eligibility = self.eligibility.can_take_exam(candidate_id, phase)
                if not eligibility.can_take:
                    return self._reject(eligibility.reason, ExamNotEligibleError.error_code)

            exam_conflicts = self.check_exam_slot(candidate_id, phase, exclude_id=exclude_id)
            if exam_conflicts:
                return self._reject(
                    exam_conflicts[0]['message'],
                    ExamNotEligibleError.error_code,
                    exam_conflicts,
                )

            if is_new:
                locked_reason = self.eligibility.check_phase_prerequisite(candidate, phase)
                if locked_reason:
                    return self._reject(locked_reason, ExamNotEligibleError.error_code)

        elif is_new:
            progress = self.candidates.get_phase(candidate_id, phase)
            booked = self.ledger.count_active_lessons(candidate_id, phase)
            if booked >= progress.sessions_plan:
                return self._reject(
                    f"Maximum {progress.sessions_plan} sessions allowed for the {phase} phase",
                    BookingValidationError.error_code,
                )

        conflicts = self.check_conflicts(
            kind, date, time,
            instructor_id=instructor_id,
            candidate_id=candidate_id,
            exclude_id=exclude_id,
        )
        if conflicts:
            return self._reject(
                conflicts[0]['message'],
                SchedulingConflictError.error_code,
                conflicts,
            )

        if reserve is None:
            return ReservationResult(accepted=True)

        try:
            with transaction.atomic():
                booking = reserve()
        except IntegrityError:
            logger.warning(
                f"Slot {date} {time} taken concurrently for candidate {candidate_id}"
            )
            return self._reject(
                "The requested slot was booked concurrently",
                SchedulingConflictError.error_code,
            )

        return ReservationResult(accepted=True, booking=booking)

    def _reject(self, reason: str, error_code: str, conflicts=None) -> ReservationResult:
        logger.warning(f"Booking rejected ({error_code}): {reason}")
        return ReservationResult.rejected(reason, error_code, conflicts)
