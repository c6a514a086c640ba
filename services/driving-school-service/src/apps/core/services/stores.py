# services/driving-school-service/src/apps/core/services/stores.py
"""
Record Stores

Lookups and persistence for candidates, their phase progress, and the
instructor fleet. Missing records raise NotFoundError.
"""

import uuid
import logging

from apps.core.models import Candidate, PhaseProgress, Instructor, Vehicle

logger = logging.getLogger(__name__)


class CandidateStore:
    """Candidate and PhaseProgress access."""

    def get(self, candidate_id: uuid.UUID, for_update: bool = False) -> Candidate:
        from . import NotFoundError

        queryset = Candidate.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=candidate_id)
        except Candidate.DoesNotExist:
            raise NotFoundError(f"Candidate {candidate_id} not found")

    def get_for_update(self, candidate_id: uuid.UUID) -> Candidate:
        return self.get(candidate_id, for_update=True)

    def save(self, candidate: Candidate, fields=None):
        if fields:
            candidate.save(update_fields=[*fields, 'updated_at'])
        else:
            candidate.save()

    def get_phase(
        self,
        candidate_id: uuid.UUID,
        phase: str,
        for_update: bool = False
    ) -> PhaseProgress:
        from . import NotFoundError

        queryset = PhaseProgress.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(candidate_id=candidate_id, phase=phase)
        except PhaseProgress.DoesNotExist:
            raise NotFoundError(f"No {phase} progress for candidate {candidate_id}")

    def save_phase(self, progress: PhaseProgress):
        progress.save()

    def enroll(self, candidate: Candidate, sessions_plan: int):
        """Persist the candidate's initial phase rows."""
        PhaseProgress.objects.bulk_create(
            PhaseProgress.initial_rows(candidate, sessions_plan)
        )


class FleetStore:
    """Instructor and Vehicle access."""

    def get_instructor(self, instructor_id: uuid.UUID, for_update: bool = False) -> Instructor:
        from . import NotFoundError

        queryset = Instructor.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=instructor_id)
        except Instructor.DoesNotExist:
            raise NotFoundError(f"Instructor {instructor_id} not found")

    def get_instructor_for_update(self, instructor_id: uuid.UUID) -> Instructor:
        return self.get_instructor(instructor_id, for_update=True)

    def get_vehicle(self, vehicle_id: uuid.UUID, for_update: bool = False) -> Vehicle:
        from . import NotFoundError

        queryset = Vehicle.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=vehicle_id)
        except Vehicle.DoesNotExist:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")

    def save(self, record, fields=None):
        if fields:
            record.save(update_fields=[*fields, 'updated_at'])
        else:
            record.save()
