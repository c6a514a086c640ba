# services/driving-school-service/src/apps/core/signals.py
"""
Django Signals for Driving School Service

Receivers for the domain events published by the services.
"""

import logging

from django.dispatch import receiver

from .events import (
    lesson_completed,
    exam_scheduled,
    exam_result_recorded,
    exam_cancelled,
    phase_advanced,
    candidate_graduated,
)

logger = logging.getLogger(__name__)


@receiver(lesson_completed)
@receiver(exam_scheduled)
@receiver(exam_cancelled)
def log_booking_event(sender, event_type, payload, **kwargs):
    """Log booking lifecycle events."""
    logger.info(f"Event {event_type}", extra={'event_type': event_type, **payload})


@receiver(exam_result_recorded)
def log_exam_result(sender, event_type, payload, **kwargs):
    """Log exam results, failures at warning level."""
    log_method = logger.warning if payload.get('result') == 'failed' else logger.info
    log_method(
        f"Exam {payload['exam_id']} {payload['result']} "
        f"(attempt {payload['attempt_number']})",
        extra={'event_type': event_type, **payload}
    )


@receiver(phase_advanced)
def log_phase_advanced(sender, event_type, payload, **kwargs):
    logger.info(
        f"Candidate {payload['candidate_id']} advanced to {payload['unlocked_phase']}",
        extra={'event_type': event_type, **payload}
    )


@receiver(candidate_graduated)
def log_candidate_graduated(sender, event_type, payload, **kwargs):
    logger.info(
        f"Candidate {payload['candidate_id']} completed all phases",
        extra={'event_type': event_type, **payload}
    )
