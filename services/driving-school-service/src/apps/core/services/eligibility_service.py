# services/driving-school-service/src/apps/core/services/eligibility_service.py
"""
Eligibility Service

Decides whether a candidate may book another attempt of a phase exam.
"""

import uuid
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional, Dict, Any

from django.conf import settings

from shared.common.utils import today, cooldown_window, is_within_cooldown
from apps.core.models import Candidate, Phase, PhaseProgress, previous_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EligibilityResult:
    can_take: bool
    reason: Optional[str] = None
    wait_until: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EligibilityService:
    """
    Cooldown rule between exam attempts.

    After an attempt of a phase is resolved on day D, another attempt is
    blocked for every day before D + cooldown. Pass and fail both start
    the cooldown; cancelled and pending attempts never do.
    """

    def __init__(self, ledger, cooldown_days: int = None):
        self.ledger = ledger
        self.cooldown_days = (
            cooldown_days if cooldown_days is not None
            else settings.SCHOOL_EXAM_COOLDOWN_DAYS
        )

    def can_take_exam(
        self,
        candidate_id: uuid.UUID,
        phase: str,
        as_of: date = None
    ) -> EligibilityResult:
        """Check the cooldown for ``phase`` as of a date (default today)."""
        from . import BookingValidationError

        if phase not in Phase.values:
            raise BookingValidationError(f"Unknown phase: {phase}")

        as_of = as_of or today()

        last_attempt = self.ledger.most_recent_resolved(candidate_id, phase)
        if last_attempt is None:
            return EligibilityResult(can_take=True)

        if not is_within_cooldown(as_of, last_attempt.date, self.cooldown_days):
            return EligibilityResult(can_take=True)

        _, wait_until = cooldown_window(last_attempt.date, self.cooldown_days)
        logger.debug(
            f"Candidate {candidate_id} in {phase} cooldown until {wait_until}"
        )
        return EligibilityResult(
            can_take=False,
            reason=(
                f"Must wait {self.cooldown_days} days between exam attempts. "
                f"Earliest available date: {wait_until.isoformat()}"
            ),
            wait_until=wait_until,
        )

    def check_phase_prerequisite(self, candidate: Candidate, phase: str) -> Optional[str]:
        """Reason the phase is still locked, or None when it is open."""
        required = previous_phase(phase)
        if required is None:
            return None

        prior = candidate.get_phase(required)
        if prior.status != PhaseProgress.Status.COMPLETED:
            return f"The {required.label} phase must be completed first"
        return None
