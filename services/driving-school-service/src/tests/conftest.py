# services/driving-school-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for driving school service tests.
"""

import uuid
from datetime import date, timedelta

import pytest

from apps.core.models import (
    Candidate,
    PhaseProgress,
    Instructor,
    Vehicle,
    Exam,
    Lesson,
    Phase,
)


@pytest.fixture
def make_candidate(db):
    """Factory for enrolled candidates with all three phase rows."""
    def _make(**kwargs):
        suffix = uuid.uuid4().hex[:8]
        fields = {
            'name': f'Candidate {suffix}',
            'email': f'candidate-{suffix}@example.com',
            'phone': '0612345678',
            'license_category': Candidate.LicenseCategory.B,
        }
        fields.update(kwargs)
        candidate = Candidate.objects.create(**fields)
        PhaseProgress.objects.bulk_create(PhaseProgress.initial_rows(candidate, 10))
        return candidate
    return _make


@pytest.fixture
def candidate(make_candidate):
    """Provide a freshly enrolled candidate."""
    return make_candidate()


@pytest.fixture
def make_instructor(db):
    """Factory for active instructors."""
    def _make(**kwargs):
        suffix = uuid.uuid4().hex[:8]
        fields = {
            'name': f'Instructor {suffix}',
            'email': f'instructor-{suffix}@example.com',
            'phone': '0698765432',
        }
        fields.update(kwargs)
        return Instructor.objects.create(**fields)
    return _make


@pytest.fixture
def instructor(make_instructor):
    """Provide an active instructor."""
    return make_instructor()


@pytest.fixture
def make_vehicle(db):
    """Factory for training vehicles."""
    def _make(**kwargs):
        fields = {
            'brand': 'Renault',
            'model': 'Clio',
            'license_plate': f'AB-{uuid.uuid4().hex[:6].upper()}',
        }
        fields.update(kwargs)
        return Vehicle.objects.create(**fields)
    return _make


@pytest.fixture
def make_exam(db):
    """Factory for exams written straight to the ledger."""
    def _make(candidate, instructor, exam_type=Phase.HIGHWAY_CODE, **kwargs):
        fields = {
            'date': date(2024, 11, 1),
            'time': '09:00',
            'status': Exam.Status.SCHEDULED,
            'attempt_number': 1,
        }
        fields.update(kwargs)
        return Exam.objects.create(
            candidate=candidate,
            instructor=instructor,
            exam_type=exam_type,
            **fields
        )
    return _make


@pytest.fixture
def make_lesson(db):
    """Factory for lessons written straight to the ledger."""
    def _make(candidate, instructor, lesson_type=Phase.HIGHWAY_CODE, **kwargs):
        fields = {
            'date': date(2024, 11, 1),
            'time': '09:00',
            'status': Lesson.Status.SCHEDULED,
        }
        fields.update(kwargs)
        return Lesson.objects.create(
            candidate=candidate,
            instructor=instructor,
            lesson_type=lesson_type,
            **fields
        )
    return _make


@pytest.fixture
def complete_phase():
    """Mark a candidate's phase as passed without going through an exam."""
    def _complete(candidate, phase):
        progress = candidate.get_phase(phase)
        progress.status = PhaseProgress.Status.COMPLETED
        progress.exam_passed = True
        progress.save()
        return progress
    return _complete


@pytest.fixture
def future_date():
    """Provide a date well clear of any cooldown."""
    return date.today() + timedelta(days=30)
