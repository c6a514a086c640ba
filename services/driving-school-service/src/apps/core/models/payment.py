# services/driving-school-service/src/apps/core/models/payment.py
"""
Payment Model

Cash payments recorded against a candidate's training fee.
"""

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Payment(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """A single payment made by a candidate."""

    class Method(models.TextChoices):
        CASH = 'cash', 'Cash'

    candidate = models.ForeignKey(
        'Candidate',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    method = models.CharField(
        max_length=10,
        choices=Method.choices,
        default=Method.CASH
    )
    note = models.CharField(max_length=200, blank=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.candidate_id}: {self.amount} on {self.date}"
