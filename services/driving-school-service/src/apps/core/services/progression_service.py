# services/driving-school-service/src/apps/core/services/progression_service.py
"""
Progression Service

Phase state machine driven by lesson completions and exam results.
"""

import uuid
import logging
from typing import Dict, Any, List

from django.db import transaction

from shared.common.utils import today, percentage
from apps.core.models import (
    Candidate,
    PhaseProgress,
    Exam,
    PHASE_ORDER,
    previous_phase,
    next_phase,
    is_last_phase,
)
from apps.core.events import (
    publish_lesson_completed,
    publish_phase_advanced,
    publish_candidate_graduated,
)
from .ledger import BookingLedger
from .stores import CandidateStore

logger = logging.getLogger(__name__)


class ProgressionService:
    """
    Service for advancing candidates through the licensing phases.

    Phases are completed strictly in order; a phase only starts once the
    previous one is completed.
    """

    def __init__(self, candidates: CandidateStore = None, ledger: BookingLedger = None):
        self.candidates = candidates or CandidateStore()
        self.ledger = ledger or BookingLedger()

    # ==========================================================================
    # Queries
    # ==========================================================================

    def can_start(self, candidate: Candidate, phase: str) -> bool:
        """True when every phase before ``phase`` is completed."""
        required = previous_phase(phase)
        if required is None:
            return True
        return candidate.get_phase(required).status == PhaseProgress.Status.COMPLETED

    def get_progress(self, candidate_id: uuid.UUID) -> Dict[str, Any]:
        candidate = self.candidates.get(candidate_id)
        phases = candidate.ordered_phases
        current = next(
            (p for p in phases if p.status != PhaseProgress.Status.COMPLETED),
            None
        )
        completed = sum(1 for p in phases if p.status == PhaseProgress.Status.COMPLETED)

        return {
            'candidate_id': str(candidate.id),
            'status': candidate.status,
            'current_phase': current.phase if current else None,
            'completed_phases': completed,
            'total_phases': len(PHASE_ORDER),
            'completion_percentage': percentage(completed, len(PHASE_ORDER)),
            'phases': [
                {
                    'phase': p.phase,
                    'status': p.status,
                    'sessions_completed': p.sessions_completed,
                    'sessions_plan': p.sessions_plan,
                    'progress_ratio': p.progress_ratio,
                    'exam_attempts': p.exam_attempts,
                    'exam_passed': p.exam_passed,
                    'last_exam_date': p.last_exam_date,
                    'exam_date': p.exam_date,
                }
                for p in phases
            ],
        }

    def get_exam_summary(self, candidate_id: uuid.UUID) -> Dict[str, Dict[str, Any]]:
        """Resolved attempts and pass flag per phase, from the ledger."""
        return {
            phase.value: {
                'attempts': self.ledger.count_resolved_attempts(candidate_id, phase),
                'passed': self.ledger.has_passed(candidate_id, phase),
            }
            for phase in PHASE_ORDER
        }

    def check_invariants(self, candidate_id: uuid.UUID) -> List[str]:
        """Describe every broken progression invariant; empty when consistent."""
        candidate = self.candidates.get(candidate_id)
        phases = candidate.ordered_phases
        problems = []

        if [p.phase for p in phases] != [phase.value for phase in PHASE_ORDER]:
            problems.append("Phase rows do not match the licensing order")

        for earlier, later in zip(phases, phases[1:]):
            if (
                later.status != PhaseProgress.Status.NOT_STARTED
                and earlier.status != PhaseProgress.Status.COMPLETED
            ):
                problems.append(
                    f"{later.phase} is {later.status} before {earlier.phase} is completed"
                )

        for progress in phases:
            resolved = self.ledger.count_resolved_attempts(candidate_id, progress.phase)
            if progress.exam_attempts != resolved:
                problems.append(
                    f"{progress.phase} counts {progress.exam_attempts} attempts, "
                    f"ledger has {resolved}"
                )
            if progress.exam_passed != (progress.status == PhaseProgress.Status.COMPLETED):
                problems.append(f"{progress.phase} pass flag disagrees with its status")

        all_completed = all(p.status == PhaseProgress.Status.COMPLETED for p in phases)
        if all_completed != (candidate.status == Candidate.Status.COMPLETED):
            problems.append("Candidate status disagrees with its phases")

        return problems

    # ==========================================================================
    # Lesson Transitions
    # ==========================================================================

    @transaction.atomic
    def record_session_completed(self, candidate_id: uuid.UUID, phase: str, lesson=None) -> PhaseProgress:
        """Count a held lesson and start the phase when it is unlocked."""
        candidate = self.candidates.get_for_update(candidate_id)
        progress = self.candidates.get_phase(candidate_id, phase, for_update=True)

        progress.sessions_completed += 1
        if (
            progress.status == PhaseProgress.Status.NOT_STARTED
            and self.can_start(candidate, phase)
        ):
            progress.transition_to(PhaseProgress.Status.IN_PROGRESS)
            logger.info(f"Candidate {candidate_id} started {phase}")

        self.candidates.save_phase(progress)

        if lesson is not None:
            publish_lesson_completed(lesson, progress)

        return progress

    # ==========================================================================
    # Exam Transitions
    # ==========================================================================

    @transaction.atomic
    def mark_exam_scheduled(self, exam: Exam) -> PhaseProgress:
        progress = self.candidates.get_phase(exam.candidate_id, exam.exam_type, for_update=True)
        progress.exam_date = exam.date
        self.candidates.save_phase(progress)
        return progress

    @transaction.atomic
    def release_exam_slot(self, exam: Exam) -> PhaseProgress:
        """Clear the phase's next exam date after a cancellation."""
        progress = self.candidates.get_phase(exam.candidate_id, exam.exam_type, for_update=True)
        progress.exam_date = None
        self.candidates.save_phase(progress)
        return progress

    @transaction.atomic
    def apply_exam_result(self, exam: Exam) -> PhaseProgress:
        """
        Apply a resolved exam to the candidate's phases.

        A pass completes the phase and either starts the next phase or, for
        the last phase, graduates the candidate. A fail keeps the phase in
        progress.
        """
        candidate = self.candidates.get_for_update(exam.candidate_id)
        progress = self.candidates.get_phase(candidate.id, exam.exam_type, for_update=True)

        progress.exam_attempts = self.ledger.count_resolved_attempts(candidate.id, exam.exam_type)
        progress.last_exam_date = today()
        progress.exam_date = None

        if exam.status == Exam.Status.PASSED:
            progress.transition_to(PhaseProgress.Status.COMPLETED)
            progress.exam_passed = True
            self.candidates.save_phase(progress)
            self._advance(candidate, exam.exam_type)
        else:
            progress.transition_to(PhaseProgress.Status.IN_PROGRESS)
            self.candidates.save_phase(progress)

        logger.info(
            f"Candidate {candidate.id} {exam.status} {exam.exam_type} "
            f"(attempt {progress.exam_attempts})"
        )
        return progress

    def _advance(self, candidate: Candidate, completed_phase: str):
        if is_last_phase(completed_phase):
            candidate.status = Candidate.Status.COMPLETED
            candidate.completion_date = today()
            self.candidates.save(candidate, fields=['status', 'completion_date'])
            logger.info(f"Candidate {candidate.id} graduated")
            publish_candidate_graduated(candidate)
            return

        unlocked = next_phase(completed_phase)
        following = self.candidates.get_phase(candidate.id, unlocked, for_update=True)
        if following.status == PhaseProgress.Status.NOT_STARTED:
            following.transition_to(PhaseProgress.Status.IN_PROGRESS)
            self.candidates.save_phase(following)

        logger.info(f"Candidate {candidate.id} advanced to {unlocked}")
        publish_phase_advanced(candidate, completed_phase, unlocked.value)
