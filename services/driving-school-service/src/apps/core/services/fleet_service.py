# services/driving-school-service/src/apps/core/services/fleet_service.py
"""
Fleet Service

Instructor to vehicle assignment and instructor removal.
"""

import uuid
import logging
from typing import Optional

from django.db import transaction

from apps.core.models import Instructor, Vehicle
from .stores import FleetStore

logger = logging.getLogger(__name__)


class FleetService:
    """Keeps the instructor and vehicle sides of an assignment in step."""

    def __init__(self, fleet: FleetStore = None):
        self.fleet = fleet or FleetStore()

    @transaction.atomic
    def assign_vehicle(
        self,
        instructor_id: uuid.UUID,
        vehicle_id: Optional[uuid.UUID] = None
    ) -> Instructor:
        """
        Give the instructor a vehicle, or unassign the current one when
        ``vehicle_id`` is None.
        """
        from . import InvalidStateError, BookingValidationError

        instructor = self.fleet.get_instructor_for_update(instructor_id)
        if instructor.is_deleted:
            raise InvalidStateError("Cannot assign vehicle to deleted instructor")

        if vehicle_id is None:
            released = instructor.assigned_vehicle_id
            instructor.assigned_vehicle = None
            self.fleet.save(instructor, fields=['assigned_vehicle'])
            logger.info(f"Unassigned vehicle {released} from instructor {instructor_id}")
            return instructor

        vehicle = self.fleet.get_vehicle(vehicle_id, for_update=True)
        if vehicle.status == Vehicle.Status.RETIRED:
            raise BookingValidationError("Cannot assign retired vehicle")

        holder = vehicle.current_instructor
        if holder is not None and holder.id != instructor.id:
            raise BookingValidationError(
                "Vehicle is already assigned to another instructor",
                extra_data={'instructor_id': str(holder.id)}
            )

        instructor.assigned_vehicle = vehicle
        self.fleet.save(instructor, fields=['assigned_vehicle'])

        logger.info(f"Assigned vehicle {vehicle.id} to instructor {instructor_id}")
        return instructor

    @transaction.atomic
    def delete_instructor(self, instructor_id: uuid.UUID) -> Instructor:
        """Mark the instructor deleted and release any assigned vehicle."""
        from . import InvalidStateError

        instructor = self.fleet.get_instructor_for_update(instructor_id)
        if instructor.is_deleted:
            raise InvalidStateError(f"Instructor {instructor_id} is already deleted")

        instructor.status = Instructor.Status.DELETED
        instructor.assigned_vehicle = None
        self.fleet.save(instructor, fields=['status', 'assigned_vehicle'])

        logger.info(f"Deleted instructor {instructor_id}")
        return instructor
