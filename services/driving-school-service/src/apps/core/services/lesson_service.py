# services/driving-school-service/src/apps/core/services/lesson_service.py
"""
Lesson Service

Booking and completion of training lessons.
"""

import uuid
import logging
from datetime import date
from typing import Any, Dict, List

from django.db import transaction

from shared.common.constants import BookingKind, DEFAULT_UPCOMING_LIMIT
from shared.common.validators import validate_iso_date, validate_time_of_day
from apps.core.filters import LessonFilter
from apps.core.models import Lesson
from .ledger import BookingLedger
from .stores import CandidateStore, FleetStore
from .conflict_service import ConflictService
from .progression_service import ProgressionService

logger = logging.getLogger(__name__)


class LessonService:
    """
    Service for managing lessons.

    Handles:
    - Lesson booking within the phase quota
    - Rescheduling
    - Completion and cancellation
    - Candidate and instructor schedules
    """

    def __init__(
        self,
        ledger: BookingLedger = None,
        candidates: CandidateStore = None,
        fleet: FleetStore = None,
        conflicts: ConflictService = None,
        progression: ProgressionService = None
    ):
        self.ledger = ledger or BookingLedger()
        self.candidates = candidates or CandidateStore()
        self.fleet = fleet or FleetStore()
        self.conflicts = conflicts or ConflictService(
            self.ledger, candidates=self.candidates, fleet=self.fleet
        )
        self.progression = progression or ProgressionService(self.candidates, self.ledger)

    def get_lesson(self, lesson_id: uuid.UUID, for_update: bool = False) -> Lesson:
        from . import NotFoundError

        try:
            return self.ledger.get(BookingKind.LESSON, lesson_id, for_update=for_update)
        except Lesson.DoesNotExist:
            raise NotFoundError(f"Lesson {lesson_id} not found")

    @transaction.atomic
    def schedule_lesson(
        self,
        candidate_id: uuid.UUID,
        instructor_id: uuid.UUID,
        lesson_type: str,
        date: date,
        time: str
    ) -> Lesson:
        from . import run_validator

        date = run_validator(validate_iso_date, date)
        run_validator(validate_time_of_day, time)

        def reserve():
            return self.ledger.create(
                BookingKind.LESSON,
                candidate_id=candidate_id,
                instructor_id=instructor_id,
                lesson_type=lesson_type,
                date=date,
                time=time,
            )

        result = self.conflicts.check_and_reserve(
            BookingKind.LESSON,
            candidate_id,
            instructor_id,
            date,
            time,
            phase=lesson_type,
            reserve=reserve,
        )
        result.raise_for_rejection()

        lesson = result.booking
        logger.info(
            f"Scheduled {lesson_type} lesson {lesson.id} for candidate {candidate_id} "
            f"on {date} {time}"
        )
        return lesson

    @transaction.atomic
    def update_lesson(
        self,
        lesson_id: uuid.UUID,
        date: date = None,
        time: str = None,
        instructor_id: uuid.UUID = None
    ) -> Lesson:
        """Move a scheduled lesson, re-checking the slot without the lesson itself."""
        from . import InvalidStateError, run_validator

        if date is not None:
            date = run_validator(validate_iso_date, date)
        if time is not None:
            run_validator(validate_time_of_day, time)

        lesson = self.get_lesson(lesson_id, for_update=True)
        if not lesson.is_scheduled:
            raise InvalidStateError(f"Cannot update lesson in {lesson.status} status")

        new_date = date or lesson.date
        new_time = time or lesson.time
        new_instructor_id = instructor_id or lesson.instructor_id

        result = self.conflicts.check_and_reserve(
            BookingKind.LESSON,
            lesson.candidate_id,
            new_instructor_id,
            new_date,
            new_time,
            phase=lesson.lesson_type,
            exclude_id=lesson.id,
        )
        result.raise_for_rejection()

        lesson.date = new_date
        lesson.time = new_time
        lesson.instructor_id = new_instructor_id
        lesson.save()

        logger.info(f"Updated lesson {lesson.id} to {lesson.date} {lesson.time}")
        return lesson

    @transaction.atomic
    def complete_lesson(self, lesson_id: uuid.UUID) -> Lesson:
        """Mark a scheduled lesson as held and count it toward its phase."""
        from . import InvalidStateError

        lesson = self.get_lesson(lesson_id, for_update=True)
        if not lesson.is_scheduled:
            raise InvalidStateError("Only scheduled lessons can be completed")

        lesson.complete()
        self.progression.record_session_completed(
            lesson.candidate_id,
            lesson.lesson_type,
            lesson=lesson,
        )

        logger.info(f"Completed lesson {lesson.id}")
        return lesson

    @transaction.atomic
    def cancel_lesson(self, lesson_id: uuid.UUID) -> Lesson:
        from . import InvalidStateError

        lesson = self.get_lesson(lesson_id, for_update=True)
        if not lesson.is_scheduled:
            raise InvalidStateError("Only scheduled lessons can be cancelled")

        lesson.cancel()
        logger.info(f"Cancelled lesson {lesson.id}")
        return lesson

    # ==========================================================================
    # Schedules
    # ==========================================================================

    def list_lessons(self, filters: Dict[str, Any] = None) -> List[Lesson]:
        """Lessons matching LessonFilter parameters, in date and time order."""
        from . import BookingValidationError

        filterset = self.ledger.search(BookingKind.LESSON, LessonFilter, filters)
        if not filterset.is_valid():
            raise BookingValidationError(
                "Invalid lesson filters",
                extra_data={'errors': filterset.errors}
            )
        return list(filterset.qs)

    def get_upcoming_lessons(
        self,
        from_date: date = None,
        limit: int = DEFAULT_UPCOMING_LIMIT
    ) -> List[Lesson]:
        return self.ledger.upcoming(BookingKind.LESSON, from_date=from_date, limit=limit)

    def get_candidate_schedule(
        self,
        candidate_id: uuid.UUID,
        start_date: date = None,
        end_date: date = None
    ) -> List[Lesson]:
        self.candidates.get(candidate_id)
        return list(self.ledger.schedule(
            BookingKind.LESSON,
            start_date=start_date,
            end_date=end_date,
            candidate_id=candidate_id,
        ))

    def get_instructor_schedule(
        self,
        instructor_id: uuid.UUID,
        start_date: date = None,
        end_date: date = None
    ) -> List[Lesson]:
        self.fleet.get_instructor(instructor_id)
        return list(self.ledger.schedule(
            BookingKind.LESSON,
            start_date=start_date,
            end_date=end_date,
            instructor_id=instructor_id,
        ))
