# services/driving-school-service/src/apps/core/services/exam_service.py
"""
Exam Service

Scheduling, rescheduling and resolution of licensing exams.
"""

import uuid
import logging
from datetime import date
from typing import Optional, Dict, Any, List

from django.conf import settings
from django.db import transaction

from shared.common.constants import BookingKind, DEFAULT_UPCOMING_LIMIT
from shared.common.validators import validate_iso_date, validate_time_of_day, validate_max_length
from apps.core.filters import ExamFilter
from apps.core.models import Exam, PHASE_ORDER
from apps.core.events import (
    publish_exam_scheduled,
    publish_exam_result_recorded,
    publish_exam_cancelled,
)
from .ledger import BookingLedger
from .stores import CandidateStore, FleetStore
from .eligibility_service import EligibilityService, EligibilityResult
from .conflict_service import ConflictService
from .progression_service import ProgressionService

logger = logging.getLogger(__name__)


class ExamService:
    """
    Service for managing exams.

    Handles:
    - Eligibility queries
    - Exam scheduling and updates
    - Result recording
    - Cancellation
    - Exam history
    """

    def __init__(
        self,
        ledger: BookingLedger = None,
        candidates: CandidateStore = None,
        fleet: FleetStore = None,
        eligibility: EligibilityService = None,
        conflicts: ConflictService = None,
        progression: ProgressionService = None
    ):
        self.ledger = ledger or BookingLedger()
        self.candidates = candidates or CandidateStore()
        self.fleet = fleet or FleetStore()
        self.eligibility = eligibility or EligibilityService(self.ledger)
        self.conflicts = conflicts or ConflictService(
            self.ledger, self.eligibility, self.candidates, self.fleet
        )
        self.progression = progression or ProgressionService(self.candidates, self.ledger)

    # ==========================================================================
    # Eligibility
    # ==========================================================================

    def can_take_exam(
        self,
        candidate_id: uuid.UUID,
        phase: str,
        as_of: date = None
    ) -> EligibilityResult:
        from . import run_validator

        if as_of is not None:
            as_of = run_validator(validate_iso_date, as_of, field_name='as_of')
        self.candidates.get(candidate_id)
        return self.eligibility.can_take_exam(candidate_id, phase, as_of)

    # ==========================================================================
    # Exam CRUD
    # ==========================================================================

    def _validate_fields(
        self,
        date: date = None,
        time: str = None,
        notes: str = None
    ) -> Optional[date]:
        """Check request fields, returning ``date`` parsed to a date."""
        from . import run_validator

        if date is not None:
            date = run_validator(validate_iso_date, date)
        if time is not None:
            run_validator(validate_time_of_day, time)
        if notes:
            run_validator(
                validate_max_length,
                notes,
                settings.SCHOOL_EXAM_NOTES_MAX_LENGTH,
                field_name='notes'
            )
        return date

    def get_exam(self, exam_id: uuid.UUID, for_update: bool = False) -> Exam:
        from . import NotFoundError

        try:
            return self.ledger.get(BookingKind.EXAM, exam_id, for_update=for_update)
        except Exam.DoesNotExist:
            raise NotFoundError(f"Exam {exam_id} not found")

    @transaction.atomic
    def schedule_exam(
        self,
        candidate_id: uuid.UUID,
        instructor_id: uuid.UUID,
        exam_type: str,
        date: date,
        time: str,
        notes: str = None
    ) -> Exam:
        """Book the next attempt of a phase exam."""
        date = self._validate_fields(date=date, time=time, notes=notes)

        def reserve():
            return self.ledger.create(
                BookingKind.EXAM,
                candidate_id=candidate_id,
                instructor_id=instructor_id,
                exam_type=exam_type,
                date=date,
                time=time,
                attempt_number=self.get_next_attempt_number(candidate_id, exam_type),
                notes=notes or '',
            )

        result = self.conflicts.check_and_reserve(
            BookingKind.EXAM,
            candidate_id,
            instructor_id,
            date,
            time,
            phase=exam_type,
            reserve=reserve,
        )
        result.raise_for_rejection()

        exam = result.booking
        self.progression.mark_exam_scheduled(exam)

        logger.info(
            f"Scheduled {exam_type} exam {exam.id} for candidate {candidate_id} "
            f"on {date} {time} (attempt {exam.attempt_number})"
        )
        publish_exam_scheduled(exam)

        return exam

    @transaction.atomic
    def update_exam(
        self,
        exam_id: uuid.UUID,
        date: date = None,
        time: str = None,
        instructor_id: uuid.UUID = None,
        notes: str = None
    ) -> Exam:
        """Move a scheduled exam, re-checking the slot without the exam itself."""
        from . import InvalidStateError

        date = self._validate_fields(date=date, time=time, notes=notes)

        exam = self.get_exam(exam_id, for_update=True)
        if not exam.is_scheduled:
            raise InvalidStateError(f"Cannot update exam in {exam.status} status")

        new_date = date or exam.date
        new_time = time or exam.time
        new_instructor_id = instructor_id or exam.instructor_id

        result = self.conflicts.check_and_reserve(
            BookingKind.EXAM,
            exam.candidate_id,
            new_instructor_id,
            new_date,
            new_time,
            phase=exam.exam_type,
            exclude_id=exam.id,
        )
        result.raise_for_rejection()

        exam.date = new_date
        exam.time = new_time
        exam.instructor_id = new_instructor_id
        if notes is not None:
            exam.notes = notes
        exam.save()

        self.progression.mark_exam_scheduled(exam)

        logger.info(f"Updated exam {exam.id} to {exam.date} {exam.time}")
        return exam

    @transaction.atomic
    def record_result(self, exam_id: uuid.UUID, result: str, notes: str = None) -> Exam:
        """Resolve a scheduled exam as passed or failed and apply it to the phase."""
        from . import InvalidStateError, BookingValidationError

        if result not in Exam.RESOLVED_STATUSES:
            raise BookingValidationError('Result must be either "passed" or "failed"')
        self._validate_fields(notes=notes)

        exam = self.get_exam(exam_id, for_update=True)
        if not exam.is_scheduled:
            raise InvalidStateError("Only scheduled exams can have results recorded")

        exam.resolve(result, notes)
        self.progression.apply_exam_result(exam)

        logger.info(f"Recorded {result} for exam {exam.id}")
        publish_exam_result_recorded(exam)

        return exam

    @transaction.atomic
    def cancel_exam(self, exam_id: uuid.UUID) -> Exam:
        from . import InvalidStateError

        exam = self.get_exam(exam_id, for_update=True)
        if not exam.is_scheduled:
            raise InvalidStateError("Only scheduled exams can be cancelled")

        exam.cancel()
        self.progression.release_exam_slot(exam)

        logger.info(f"Cancelled exam {exam.id}")
        publish_exam_cancelled(exam)

        return exam

    # ==========================================================================
    # Queries
    # ==========================================================================

    def list_exams(self, filters: Dict[str, Any] = None) -> List[Exam]:
        """Exams matching ExamFilter parameters, in date and time order."""
        from . import BookingValidationError

        filterset = self.ledger.search(BookingKind.EXAM, ExamFilter, filters)
        if not filterset.is_valid():
            raise BookingValidationError(
                "Invalid exam filters",
                extra_data={'errors': filterset.errors}
            )
        return list(filterset.qs)

    def get_upcoming_exams(
        self,
        from_date: date = None,
        limit: int = DEFAULT_UPCOMING_LIMIT
    ) -> List[Exam]:
        return self.ledger.upcoming(BookingKind.EXAM, from_date=from_date, limit=limit)

    def get_candidate_exams(self, candidate_id: uuid.UUID) -> Dict[str, Any]:
        """Exam history grouped by phase, with attempts and pass flag per phase."""
        candidate = self.candidates.get(candidate_id)
        exams = list(self.ledger.exam_history(candidate_id))

        exams_by_type: Dict[str, List[Exam]] = {phase.value: [] for phase in PHASE_ORDER}
        for exam in exams:
            exams_by_type[exam.exam_type].append(exam)

        return {
            'candidate': candidate,
            'exams': exams,
            'exams_by_type': exams_by_type,
            'summary': self.progression.get_exam_summary(candidate_id),
        }

    def get_next_attempt_number(self, candidate_id: uuid.UUID, exam_type: str) -> int:
        return self.ledger.count_resolved_attempts(candidate_id, exam_type) + 1

    def get_last_result(self, candidate_id: uuid.UUID, exam_type: str) -> Optional[Exam]:
        return self.ledger.most_recent_resolved(candidate_id, exam_type)
