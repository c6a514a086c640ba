# services/driving-school-service/src/apps/core/services/ledger.py
"""
Booking Ledger

Persistent record of lesson and exam bookings, with the lookups the
scheduling and eligibility rules are built on.
"""

import uuid
import logging
from datetime import date
from typing import Any, Dict, Optional, List

from django.db.models import QuerySet

from shared.common.constants import BookingKind, DEFAULT_UPCOMING_LIMIT
from shared.common.utils import today
from apps.core.models import Exam, Lesson

logger = logging.getLogger(__name__)


class BookingLedger:
    """
    Query and persistence layer over lessons and exams.

    Every lookup goes through the database, so results always reflect the
    latest committed state.
    """

    MODELS = {
        BookingKind.LESSON: Lesson,
        BookingKind.EXAM: Exam,
    }

    def model_for(self, kind: str):
        try:
            return self.MODELS[BookingKind(kind)]
        except ValueError:
            raise ValueError(f"Unknown booking kind: {kind}")

    # ==========================================================================
    # Records
    # ==========================================================================

    def get(self, kind: str, booking_id: uuid.UUID, for_update: bool = False):
        """Fetch one booking; raises the model's DoesNotExist if missing."""
        queryset = self.model_for(kind).objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.get(id=booking_id)

    def create(self, kind: str, **fields):
        booking = self.model_for(kind).objects.create(**fields)
        logger.debug(f"Created {kind} {booking.id} on {booking.date} {booking.time}")
        return booking

    def filter(self, kind: str, **lookups) -> QuerySet:
        return self.model_for(kind).objects.filter(**lookups)

    # ==========================================================================
    # Slot lookups
    # ==========================================================================

    def find_active(
        self,
        kind: str,
        date: date,
        time: str,
        instructor_id: uuid.UUID = None,
        candidate_id: uuid.UUID = None,
        exclude_id: uuid.UUID = None
    ):
        """
        Scheduled booking of ``kind`` at exactly ``date`` and ``time`` for the
        given instructor or candidate, ignoring ``exclude_id``.

        Exactly one of ``instructor_id`` and ``candidate_id`` is expected.
        """
        if (instructor_id is None) == (candidate_id is None):
            raise ValueError("Pass exactly one of instructor_id or candidate_id")

        model = self.model_for(kind)
        queryset = model.objects.filter(
            date=date,
            time=time,
            status=model.Status.SCHEDULED,
        )
        if instructor_id is not None:
            queryset = queryset.filter(instructor_id=instructor_id)
        else:
            queryset = queryset.filter(candidate_id=candidate_id)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)

        return queryset.first()

    # ==========================================================================
    # Exam history
    # ==========================================================================

    def _exams(self, candidate_id: uuid.UUID, exam_type: str) -> QuerySet:
        return Exam.objects.filter(candidate_id=candidate_id, exam_type=exam_type)

    def count_resolved_attempts(self, candidate_id: uuid.UUID, exam_type: str) -> int:
        """Number of passed or failed attempts; cancelled and pending excluded."""
        return self._exams(candidate_id, exam_type).filter(
            status__in=Exam.RESOLVED_STATUSES
        ).count()

    def most_recent_resolved(self, candidate_id: uuid.UUID, exam_type: str) -> Optional[Exam]:
        """Resolved attempt with the latest date, or None."""
        return self._exams(candidate_id, exam_type).filter(
            status__in=Exam.RESOLVED_STATUSES
        ).order_by('-date', '-time', '-updated_at').first()

    def find_pending_exam(
        self,
        candidate_id: uuid.UUID,
        exam_type: str,
        exclude_id: uuid.UUID = None
    ) -> Optional[Exam]:
        queryset = self._exams(candidate_id, exam_type).filter(
            status=Exam.Status.SCHEDULED
        )
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.first()

    def has_passed(self, candidate_id: uuid.UUID, exam_type: str) -> bool:
        return self._exams(candidate_id, exam_type).filter(
            status=Exam.Status.PASSED
        ).exists()

    def exam_history(self, candidate_id: uuid.UUID, exam_type: str = None) -> QuerySet:
        """All exams of a candidate, oldest first."""
        queryset = Exam.objects.filter(candidate_id=candidate_id)
        if exam_type:
            queryset = queryset.filter(exam_type=exam_type)
        return queryset.select_related('instructor').order_by('date', 'time')

    # ==========================================================================
    # Lessons
    # ==========================================================================

    def count_active_lessons(self, candidate_id: uuid.UUID, lesson_type: str) -> int:
        """Scheduled and completed lessons counted against the phase plan."""
        return Lesson.objects.filter(
            candidate_id=candidate_id,
            lesson_type=lesson_type,
            status__in=[Lesson.Status.SCHEDULED, Lesson.Status.COMPLETED],
        ).count()

    # ==========================================================================
    # Calendars
    # ==========================================================================

    def upcoming(
        self,
        kind: str,
        from_date: date = None,
        limit: int = DEFAULT_UPCOMING_LIMIT,
        **lookups
    ) -> List:
        """Scheduled bookings on or after ``from_date``, soonest first."""
        model = self.model_for(kind)
        queryset = model.objects.filter(
            status=model.Status.SCHEDULED,
            date__gte=from_date or today(),
            **lookups
        ).select_related('candidate', 'instructor').order_by('date', 'time')
        return list(queryset[:limit])

    def search(self, kind: str, filterset_class, params: Dict[str, Any] = None):
        """Bind ``params`` to a FilterSet over all bookings of ``kind``."""
        queryset = self.filter(kind).select_related(
            'candidate', 'instructor'
        ).order_by('date', 'time')
        return filterset_class(params or {}, queryset=queryset)

    def schedule(
        self,
        kind: str,
        start_date: date = None,
        end_date: date = None,
        status: str = None,
        **lookups
    ) -> QuerySet:
        """Bookings of ``kind`` within an optional date range."""
        queryset = self.filter(kind, **lookups)
        if start_date:
            queryset = queryset.filter(date__gte=start_date)
        if end_date:
            queryset = queryset.filter(date__lte=end_date)
        if status:
            queryset = queryset.filter(status=status)
        return queryset.select_related('candidate', 'instructor').order_by('date', 'time')
