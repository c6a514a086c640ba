# services/driving-school-service/src/apps/core/models/fleet.py
"""
Fleet Models

Instructors and the training vehicles assigned to them.
"""

from typing import Optional

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Vehicle(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """Training vehicle."""

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        MAINTENANCE = 'maintenance', 'In Maintenance'
        RETIRED = 'retired', 'Retired'

    brand = models.CharField(max_length=50)
    model = models.CharField(max_length=50)
    license_plate = models.CharField(max_length=20, unique=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    class Meta:
        db_table = 'vehicles'
        ordering = ['brand', 'model']

    def __str__(self):
        return f"{self.brand} {self.model} ({self.license_plate})"

    @property
    def current_instructor(self) -> Optional['Instructor']:
        """Instructor holding this vehicle, via the reverse side of the 1:1."""
        try:
            return self.assigned_instructor
        except Instructor.DoesNotExist:
            return None


class Instructor(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Driving instructor.

    The vehicle relation is a single one-to-one column, so both sides
    always agree on who holds which vehicle.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        DELETED = 'deleted', 'Deleted'

    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=15)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )
    assigned_vehicle = models.OneToOneField(
        Vehicle,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name='assigned_instructor'
    )

    class Meta:
        db_table = 'instructors'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_deleted(self) -> bool:
        return self.status == self.Status.DELETED
