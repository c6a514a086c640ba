# services/driving-school-service/src/apps/core/services/candidate_service.py
"""
Candidate Service

Enrolment, payments and soft deletion of candidates.
"""

import uuid
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Dict, Any

from django.conf import settings
from django.db import transaction

from shared.common.utils import round_decimal
from shared.common.validators import validate_positive_decimal
from apps.core.models import Candidate, Payment
from .stores import CandidateStore
from .progression_service import ProgressionService

logger = logging.getLogger(__name__)


class CandidateService:
    """
    Service for managing candidates.

    Handles:
    - Enrolment with one progress row per phase
    - Payments against the training fee
    - Soft deletion
    """

    def __init__(
        self,
        candidates: CandidateStore = None,
        progression: ProgressionService = None,
        sessions_plan: int = None
    ):
        self.candidates = candidates or CandidateStore()
        self.progression = progression or ProgressionService(self.candidates)
        self.sessions_plan = sessions_plan or settings.SCHOOL_SESSIONS_PLAN

    @transaction.atomic
    def create_candidate(
        self,
        name: str,
        email: str,
        phone: str,
        license_category: str = Candidate.LicenseCategory.B,
        total_fee: Optional[Decimal] = None,
        **kwargs
    ) -> Candidate:
        """Enrol a candidate with all phases not started."""
        from . import BookingValidationError

        email = email.lower()
        if Candidate.objects.filter(email=email).exists():
            raise BookingValidationError(f"A candidate with email {email} already exists")

        candidate = Candidate(
            name=name,
            email=email,
            phone=phone,
            license_category=license_category,
            **kwargs
        )
        if total_fee is not None:
            candidate.total_fee = total_fee
        self.candidates.save(candidate)
        self.candidates.enroll(candidate, self.sessions_plan)

        logger.info(f"Enrolled candidate {candidate.id} for licence {license_category}")
        return candidate

    def get_candidate(self, candidate_id: uuid.UUID) -> Candidate:
        return self.candidates.get(candidate_id)

    def get_progress(self, candidate_id: uuid.UUID) -> Dict[str, Any]:
        return self.progression.get_progress(candidate_id)

    @transaction.atomic
    def delete_candidate(self, candidate_id: uuid.UUID) -> Candidate:
        """Mark the candidate deleted; history is kept."""
        from . import InvalidStateError

        candidate = self.candidates.get_for_update(candidate_id)
        if candidate.is_deleted:
            raise InvalidStateError(f"Candidate {candidate_id} is already deleted")

        candidate.status = Candidate.Status.DELETED
        self.candidates.save(candidate, fields=['status'])

        logger.info(f"Deleted candidate {candidate_id}")
        return candidate

    @transaction.atomic
    def record_payment(
        self,
        candidate_id: uuid.UUID,
        amount: Decimal,
        payment_date: date = None,
        note: str = ''
    ) -> Payment:
        """Record a cash payment and add it to the candidate's paid amount."""
        from . import BookingValidationError, InvalidStateError, run_validator

        amount = round_decimal(run_validator(validate_positive_decimal, amount, field_name="Amount"))

        candidate = self.candidates.get_for_update(candidate_id)
        if candidate.is_deleted:
            raise InvalidStateError(f"Candidate {candidate_id} has been deleted")
        if amount > candidate.remaining_balance:
            raise BookingValidationError(
                f"Amount exceeds the remaining balance of {candidate.remaining_balance}",
                extra_data={'remaining_balance': str(candidate.remaining_balance)}
            )

        payment = Payment(candidate=candidate, amount=amount, note=note)
        if payment_date:
            payment.date = payment_date
        payment.save()

        candidate.paid_amount += amount
        self.candidates.save(candidate, fields=['paid_amount'])

        logger.info(f"Recorded payment of {amount} for candidate {candidate_id}")
        return payment
