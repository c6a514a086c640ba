# services/driving-school-service/src/apps/core/events.py
"""
Driving School Service Events

Domain events raised by the progression engine. Each event is a Django
signal sent once the surrounding transaction commits.
"""

import logging
from typing import Any, Dict

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)


class EventType:
    """Event type constants for the driving school service."""

    LESSON_COMPLETED = 'lesson.completed'
    EXAM_SCHEDULED = 'exam.scheduled'
    EXAM_RESULT_RECORDED = 'exam.result_recorded'
    EXAM_CANCELLED = 'exam.cancelled'
    PHASE_ADVANCED = 'phase.advanced'
    CANDIDATE_GRADUATED = 'candidate.graduated'


# Receivers get ``event_type`` and ``payload`` keyword arguments.
lesson_completed = Signal()
exam_scheduled = Signal()
exam_result_recorded = Signal()
exam_cancelled = Signal()
phase_advanced = Signal()
candidate_graduated = Signal()

SIGNALS = {
    EventType.LESSON_COMPLETED: lesson_completed,
    EventType.EXAM_SCHEDULED: exam_scheduled,
    EventType.EXAM_RESULT_RECORDED: exam_result_recorded,
    EventType.EXAM_CANCELLED: exam_cancelled,
    EventType.PHASE_ADVANCED: phase_advanced,
    EventType.CANDIDATE_GRADUATED: candidate_graduated,
}


def publish(event_type: str, payload: Dict[str, Any]):
    """Send the event's signal after the current transaction commits."""
    signal = SIGNALS[event_type]

    def _send():
        signal.send(sender=EventType, event_type=event_type, payload=payload)

    transaction.on_commit(_send)


# ==========================================================================
# Convenience publishers
# ==========================================================================

def publish_lesson_completed(lesson, progress):
    publish(EventType.LESSON_COMPLETED, {
        'lesson_id': str(lesson.id),
        'candidate_id': str(lesson.candidate_id),
        'phase': lesson.lesson_type,
        'sessions_completed': progress.sessions_completed,
        'sessions_plan': progress.sessions_plan,
    })


def publish_exam_scheduled(exam):
    publish(EventType.EXAM_SCHEDULED, {
        'exam_id': str(exam.id),
        'candidate_id': str(exam.candidate_id),
        'instructor_id': str(exam.instructor_id),
        'exam_type': exam.exam_type,
        'date': exam.date.isoformat(),
        'time': exam.time,
        'attempt_number': exam.attempt_number,
    })


def publish_exam_result_recorded(exam):
    publish(EventType.EXAM_RESULT_RECORDED, {
        'exam_id': str(exam.id),
        'candidate_id': str(exam.candidate_id),
        'exam_type': exam.exam_type,
        'result': exam.status,
        'attempt_number': exam.attempt_number,
    })


def publish_exam_cancelled(exam):
    publish(EventType.EXAM_CANCELLED, {
        'exam_id': str(exam.id),
        'candidate_id': str(exam.candidate_id),
        'exam_type': exam.exam_type,
    })


def publish_phase_advanced(candidate, completed_phase: str, unlocked_phase: str):
    publish(EventType.PHASE_ADVANCED, {
        'candidate_id': str(candidate.id),
        'completed_phase': completed_phase,
        'unlocked_phase': unlocked_phase,
    })


def publish_candidate_graduated(candidate):
    publish(EventType.CANDIDATE_GRADUATED, {
        'candidate_id': str(candidate.id),
        'license_category': candidate.license_category,
        'completion_date': candidate.completion_date.isoformat() if candidate.completion_date else None,
    })
