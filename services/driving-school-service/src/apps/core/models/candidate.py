# services/driving-school-service/src/apps/core/models/candidate.py
"""
Candidate Models

Candidates enrolled in the school and their per-phase progress.
"""

from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from .phase import Phase, PHASE_ORDER


def default_total_fee() -> Decimal:
    return Decimal(str(settings.SCHOOL_DEFAULT_TOTAL_FEE))


class Candidate(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Driving licence candidate.

    Owns exactly one PhaseProgress per licensing phase, created on
    enrolment in the fixed phase order.
    """

    class LicenseCategory(models.TextChoices):
        A1 = 'A1', 'A1'
        A2 = 'A2', 'A2'
        B = 'B', 'B'
        C1 = 'C1', 'C1'
        C2 = 'C2', 'C2'
        D = 'D', 'D'

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        DELETED = 'deleted', 'Deleted'

    # Identity
    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=15)
    address = models.CharField(max_length=200, blank=True)
    date_of_birth = models.DateField(blank=True, null=True)

    # Licence
    license_category = models.CharField(
        max_length=2,
        choices=LicenseCategory.choices,
        default=LicenseCategory.B
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )
    registration_date = models.DateField(default=timezone.localdate)
    completion_date = models.DateField(blank=True, null=True)

    # Fees
    total_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=default_total_fee
    )
    paid_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    class Meta:
        db_table = 'candidates'
        ordering = ['-registration_date', 'name']
        indexes = [
            models.Index(fields=['license_category', 'status']),
        ]

    def __str__(self):
        return f"{self.name} ({self.license_category})"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.status == self.Status.DELETED

    @property
    def remaining_balance(self) -> Decimal:
        return max(self.total_fee - self.paid_amount, Decimal('0.00'))

    @property
    def ordered_phases(self) -> List['PhaseProgress']:
        """PhaseProgress rows in licensing order."""
        return list(self.phases.order_by('order'))

    @property
    def current_phase(self) -> Optional['PhaseProgress']:
        """First phase that is not completed yet."""
        for progress in self.ordered_phases:
            if progress.status != PhaseProgress.Status.COMPLETED:
                return progress
        return None

    def get_phase(self, phase: str) -> 'PhaseProgress':
        return self.phases.get(phase=phase)


class PhaseProgress(models.Model):
    """
    A candidate's status, lesson quota and exam attempts for one phase.
    """

    class Status(models.TextChoices):
        NOT_STARTED = 'not_started', 'Not Started'
        IN_PROGRESS = 'in_progress', 'In Progress'
        COMPLETED = 'completed', 'Completed'
        FAILED = 'failed', 'Failed'

    # Allowed status moves; completed is terminal for the phase.
    TRANSITIONS = {
        Status.NOT_STARTED: {Status.IN_PROGRESS, Status.COMPLETED},
        Status.IN_PROGRESS: {Status.COMPLETED, Status.FAILED},
        Status.FAILED: {Status.IN_PROGRESS, Status.COMPLETED},
        Status.COMPLETED: set(),
    }

    candidate = models.ForeignKey(
        Candidate,
        on_delete=models.CASCADE,
        related_name='phases'
    )
    phase = models.CharField(max_length=20, choices=Phase.choices)
    order = models.PositiveSmallIntegerField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.NOT_STARTED
    )

    # Lessons
    sessions_completed = models.PositiveIntegerField(default=0)
    sessions_plan = models.PositiveIntegerField(default=10)

    # Exams
    exam_attempts = models.PositiveIntegerField(default=0)
    exam_passed = models.BooleanField(default=False)
    last_exam_date = models.DateField(blank=True, null=True)
    exam_date = models.DateField(
        blank=True,
        null=True,
        help_text="Date of the next scheduled attempt"
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'phase_progress'
        ordering = ['candidate', 'order']
        constraints = [
            models.UniqueConstraint(
                fields=['candidate', 'phase'],
                name='unique_phase_per_candidate'
            ),
            models.UniqueConstraint(
                fields=['candidate', 'order'],
                name='unique_phase_order_per_candidate'
            ),
        ]

    def __str__(self):
        return f"{self.candidate_id}: {self.phase} ({self.status})"

    @property
    def progress_ratio(self) -> float:
        """Completed share of the lesson plan, capped at 1.0."""
        if not self.sessions_plan:
            return 1.0
        return min(self.sessions_completed, self.sessions_plan) / self.sessions_plan

    @property
    def remaining_sessions(self) -> int:
        return max(self.sessions_plan - self.sessions_completed, 0)

    def can_transition(self, target: str) -> bool:
        allowed = self.TRANSITIONS.get(self.Status(self.status), set())
        return self.Status(target) in allowed

    def transition_to(self, target: str):
        """Move to ``target`` status, or raise ValueError."""
        if target == self.status:
            return
        if not self.can_transition(target):
            raise ValueError(
                f"Cannot move {self.phase} from {self.status} to {target}"
            )
        self.status = target

    @classmethod
    def initial_rows(cls, candidate: Candidate, sessions_plan: int) -> List['PhaseProgress']:
        """Unsaved rows for a newly enrolled candidate, one per phase."""
        return [
            cls(
                candidate=candidate,
                phase=phase,
                order=index,
                sessions_plan=sessions_plan,
            )
            for index, phase in enumerate(PHASE_ORDER)
        ]
