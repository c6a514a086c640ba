# services/driving-school-service/src/apps/core/models/exam.py
"""
Exam Model

Licensing exam bookings and their pass/fail lifecycle.
"""

from django.db import models
from django.db.models import Q

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from shared.common.validators import validate_time_of_day
from .phase import Phase


class Exam(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Exam booking for one phase.

    Created ``scheduled``; moves once to ``passed``, ``failed`` or
    ``cancelled``. Only passed and failed attempts count as resolved.
    """

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        PASSED = 'passed', 'Passed'
        FAILED = 'failed', 'Failed'
        CANCELLED = 'cancelled', 'Cancelled'

    RESOLVED_STATUSES = (Status.PASSED, Status.FAILED)

    candidate = models.ForeignKey(
        'Candidate',
        on_delete=models.PROTECT,
        related_name='exams'
    )
    instructor = models.ForeignKey(
        'Instructor',
        on_delete=models.PROTECT,
        related_name='exams'
    )
    exam_type = models.CharField(max_length=20, choices=Phase.choices)

    # Slot
    date = models.DateField(db_index=True)
    time = models.CharField(max_length=5, validators=[validate_time_of_day])

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SCHEDULED,
        db_index=True
    )
    attempt_number = models.PositiveIntegerField(default=1)
    notes = models.TextField(max_length=500, blank=True)

    class Meta:
        db_table = 'exams'
        ordering = ['-date', '-time']
        indexes = [
            models.Index(fields=['candidate', 'exam_type']),
            models.Index(fields=['instructor', 'date']),
            models.Index(fields=['date', 'time']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['instructor', 'date', 'time'],
                condition=Q(status='scheduled'),
                name='unique_scheduled_exam_instructor_slot'
            ),
            models.UniqueConstraint(
                fields=['candidate', 'date', 'time'],
                condition=Q(status='scheduled'),
                name='unique_scheduled_exam_candidate_slot'
            ),
            models.UniqueConstraint(
                fields=['candidate', 'exam_type'],
                condition=Q(status='scheduled'),
                name='unique_pending_exam_per_phase'
            ),
        ]

    def __str__(self):
        return f"{self.exam_type} #{self.attempt_number} on {self.date} {self.time}"

    @property
    def is_scheduled(self) -> bool:
        return self.status == self.Status.SCHEDULED

    @property
    def is_resolved(self) -> bool:
        return self.status in self.RESOLVED_STATUSES

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def resolve(self, result: str, notes: str = None):
        """Record a pass or fail result."""
        if result not in self.RESOLVED_STATUSES:
            raise ValueError(f"Result must be passed or failed, got {result}")
        if not self.is_scheduled:
            raise ValueError(f"Cannot record a result for exam in {self.status} status")

        self.status = result
        if notes:
            self.notes = notes
        self.save(update_fields=['status', 'notes', 'updated_at'])

    def cancel(self):
        """Cancel the exam, freeing its slot."""
        if not self.is_scheduled:
            raise ValueError(f"Cannot cancel exam in {self.status} status")

        self.status = self.Status.CANCELLED
        self.save(update_fields=['status', 'updated_at'])
