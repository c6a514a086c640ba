# services/driving-school-service/src/apps/core/models/lesson.py
"""
Lesson Model

Training sessions booked between a candidate and an instructor.
"""

from django.db import models
from django.db.models import Q

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from shared.common.validators import validate_time_of_day
from .phase import Phase


class Lesson(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """Lesson booking for one phase."""

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    candidate = models.ForeignKey(
        'Candidate',
        on_delete=models.PROTECT,
        related_name='lessons'
    )
    instructor = models.ForeignKey(
        'Instructor',
        on_delete=models.PROTECT,
        related_name='lessons'
    )
    lesson_type = models.CharField(max_length=20, choices=Phase.choices)

    # Slot
    date = models.DateField(db_index=True)
    time = models.CharField(max_length=5, validators=[validate_time_of_day])

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SCHEDULED,
        db_index=True
    )
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'lessons'
        ordering = ['date', 'time']
        indexes = [
            models.Index(fields=['candidate', 'date']),
            models.Index(fields=['instructor', 'date', 'time']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['instructor', 'date', 'time'],
                condition=Q(status='scheduled'),
                name='unique_scheduled_lesson_instructor_slot'
            ),
            models.UniqueConstraint(
                fields=['candidate', 'date', 'time'],
                condition=Q(status='scheduled'),
                name='unique_scheduled_lesson_candidate_slot'
            ),
        ]

    def __str__(self):
        return f"{self.lesson_type} lesson on {self.date} {self.time}"

    @property
    def is_scheduled(self) -> bool:
        return self.status == self.Status.SCHEDULED

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def complete(self):
        """Mark the lesson as held."""
        from django.utils import timezone

        if not self.is_scheduled:
            raise ValueError(f"Cannot complete lesson in {self.status} status")

        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=['status', 'completed_at', 'updated_at'])

    def cancel(self):
        """Cancel the lesson, freeing its slot."""
        if not self.is_scheduled:
            raise ValueError(f"Cannot cancel lesson in {self.status} status")

        self.status = self.Status.CANCELLED
        self.save(update_fields=['status', 'updated_at'])
