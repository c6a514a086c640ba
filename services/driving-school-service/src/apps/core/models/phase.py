# services/driving-school-service/src/apps/core/models/phase.py
"""
Licensing Phases

The three sequential licensing stages and their fixed order.
"""

from typing import Optional

from django.db import models


class Phase(models.TextChoices):
    HIGHWAY_CODE = 'highway_code', 'Highway Code'
    PARKING = 'parking', 'Parking'
    DRIVING = 'driving', 'Driving'


# Phase advancement depends on this order, not on the declaration order above.
PHASE_ORDER = (
    Phase.HIGHWAY_CODE,
    Phase.PARKING,
    Phase.DRIVING,
)


def phase_index(phase: str) -> int:
    """Position of a phase in the licensing order."""
    try:
        return PHASE_ORDER.index(Phase(phase))
    except ValueError:
        raise ValueError(f"Unknown phase: {phase}")


def previous_phase(phase: str) -> Optional[Phase]:
    """Phase that must be completed before ``phase``, if any."""
    index = phase_index(phase)
    return PHASE_ORDER[index - 1] if index > 0 else None


def next_phase(phase: str) -> Optional[Phase]:
    """Phase unlocked by completing ``phase``, if any."""
    index = phase_index(phase)
    return PHASE_ORDER[index + 1] if index + 1 < len(PHASE_ORDER) else None


def is_last_phase(phase: str) -> bool:
    return phase_index(phase) == len(PHASE_ORDER) - 1
