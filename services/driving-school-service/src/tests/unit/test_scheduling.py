# services/driving-school-service/src/tests/unit/test_scheduling.py
"""
Unit Tests for Scheduling

Tests for conflict detection and the exam and lesson booking services.
"""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from apps.core.models import Exam, Lesson, Phase, PhaseProgress, Instructor, Candidate
from apps.core.services import (
    ConflictService,
    ExamService,
    LessonService,
    NotFoundError,
    InvalidStateError,
    SchedulingConflictError,
    ExamNotEligibleError,
    BookingValidationError,
)

SLOT_DATE = date(2024, 11, 1)


@pytest.mark.django_db
class TestConflictService:
    """Tests for ConflictService."""

    def setup_method(self):
        self.service = ConflictService()

    def test_no_conflicts(self, candidate, instructor):
        conflicts = self.service.check_conflicts(
            'lesson', SLOT_DATE, '09:00',
            instructor_id=instructor.id,
            candidate_id=candidate.id,
        )

        assert conflicts == []

    def test_instructor_conflict(self, make_candidate, instructor, make_lesson):
        existing = make_lesson(make_candidate(), instructor)

        conflicts = self.service.check_conflicts(
            'lesson', SLOT_DATE, '09:00',
            instructor_id=instructor.id,
            candidate_id=make_candidate().id,
        )

        assert len(conflicts) == 1
        assert conflicts[0]['type'] == 'instructor'
        assert conflicts[0]['booking_id'] == str(existing.id)
        assert conflicts[0]['message'] == "Instructor already has a lesson scheduled at this time"

    def test_candidate_conflict(self, candidate, make_instructor, make_exam):
        make_exam(candidate, make_instructor())

        conflicts = self.service.check_conflicts(
            'exam', SLOT_DATE, '09:00',
            instructor_id=make_instructor().id,
            candidate_id=candidate.id,
        )

        assert [c['type'] for c in conflicts] == ['candidate']
        assert conflicts[0]['message'] == "Candidate already has an exam scheduled at this time"

    def test_different_time_does_not_conflict(self, candidate, instructor, make_lesson):
        make_lesson(candidate, instructor, time='09:00')

        conflicts = self.service.check_conflicts(
            'lesson', SLOT_DATE, '09:30',
            instructor_id=instructor.id,
            candidate_id=candidate.id,
        )

        assert conflicts == []

    def test_kinds_do_not_collide(self, candidate, instructor, make_exam):
        make_exam(candidate, instructor)

        conflicts = self.service.check_conflicts(
            'lesson', SLOT_DATE, '09:00',
            instructor_id=instructor.id,
            candidate_id=candidate.id,
        )

        assert conflicts == []

    def test_update_excludes_itself(self, candidate, instructor, make_lesson):
        lesson = make_lesson(candidate, instructor)

        result = self.service.check_and_reserve(
            'lesson', candidate.id, instructor.id, SLOT_DATE, '09:00',
            phase=Phase.HIGHWAY_CODE,
            exclude_id=lesson.id,
        )

        assert result.accepted is True

    def test_check_without_reserve_writes_nothing(self, candidate, instructor):
        result = self.service.check_and_reserve(
            'lesson', candidate.id, instructor.id, SLOT_DATE, '09:00',
            phase=Phase.HIGHWAY_CODE,
        )

        assert result.accepted is True
        assert result.booking is None
        assert not Lesson.objects.exists()

    def test_concurrent_insert_reported_as_conflict(self, candidate, instructor, make_lesson):
        make_lesson(candidate, instructor, time='10:00')

        def reserve():
            # Slot taken between the check and the insert
            return Lesson.objects.create(
                candidate=candidate,
                instructor=instructor,
                lesson_type=Phase.HIGHWAY_CODE,
                date=SLOT_DATE,
                time='10:00',
            )

        result = self.service.check_and_reserve(
            'lesson', candidate.id, instructor.id, SLOT_DATE, '11:00',
            phase=Phase.HIGHWAY_CODE,
            reserve=reserve,
        )

        assert result.accepted is False
        assert result.error_code == 'SCHEDULING_CONFLICT'
        assert Lesson.objects.count() == 1

    def test_rejection_raises_typed_error(self, make_candidate, instructor, make_lesson):
        make_lesson(make_candidate(), instructor)

        result = self.service.check_and_reserve(
            'lesson', make_candidate().id, instructor.id, SLOT_DATE, '09:00',
            phase=Phase.HIGHWAY_CODE,
        )

        with pytest.raises(SchedulingConflictError) as exc_info:
            result.raise_for_rejection()

        assert exc_info.value.extra_data['conflicts'][0]['type'] == 'instructor'

    def test_unknown_candidate(self, instructor):
        import uuid

        with pytest.raises(NotFoundError):
            self.service.check_and_reserve(
                'lesson', uuid.uuid4(), instructor.id, SLOT_DATE, '09:00',
                phase=Phase.HIGHWAY_CODE,
            )


@pytest.mark.django_db
class TestExamService:
    """Tests for ExamService."""

    def setup_method(self):
        self.service = ExamService()

    def test_schedule_exam(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        assert exam.status == Exam.Status.SCHEDULED
        assert exam.attempt_number == 1
        assert candidate.get_phase(Phase.HIGHWAY_CODE).exam_date == SLOT_DATE

    def test_attempt_number_counts_resolved_only(self, candidate, instructor, make_exam):
        long_ago = timezone.localdate() - timedelta(days=100)
        make_exam(candidate, instructor, status=Exam.Status.FAILED, date=long_ago)
        make_exam(
            candidate, instructor,
            status=Exam.Status.CANCELLED,
            date=long_ago + timedelta(days=20),
            attempt_number=2,
        )

        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        assert exam.attempt_number == 2

    def test_instructor_double_booking_rejected(self, make_candidate, instructor):
        self.service.schedule_exam(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(SchedulingConflictError) as exc_info:
            self.service.schedule_exam(
                make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

        assert str(exc_info.value) == "Instructor already has an exam scheduled at this time"
        assert Exam.objects.count() == 1

    def test_second_pending_exam_rejected(self, candidate, make_instructor):
        self.service.schedule_exam(
            candidate.id, make_instructor().id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(ExamNotEligibleError) as exc_info:
            self.service.schedule_exam(
                candidate.id, make_instructor().id, Phase.HIGHWAY_CODE,
                SLOT_DATE + timedelta(days=1), '09:00'
            )

        assert 'already has a scheduled highway_code exam' in str(exc_info.value)

    def test_cooldown_blocks_scheduling(self, candidate, instructor, make_exam):
        make_exam(
            candidate, instructor,
            status=Exam.Status.FAILED,
            date=timezone.localdate() - timedelta(days=3),
        )

        with pytest.raises(ExamNotEligibleError) as exc_info:
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

        assert exc_info.value.error_code == 'EXAM_NOT_ELIGIBLE_YET'
        assert 'Earliest available date' in str(exc_info.value)

    def test_passed_phase_rejected(self, candidate, instructor, make_exam):
        make_exam(
            candidate, instructor,
            status=Exam.Status.PASSED,
            date=timezone.localdate() - timedelta(days=60),
        )

        with pytest.raises(ExamNotEligibleError) as exc_info:
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

        assert 'already passed' in str(exc_info.value)

    def test_locked_phase_rejected(self, candidate, instructor):
        with pytest.raises(ExamNotEligibleError):
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.PARKING, SLOT_DATE, '09:00'
            )

    def test_deleted_instructor_rejected(self, candidate, make_instructor):
        instructor = make_instructor(status=Instructor.Status.DELETED)

        with pytest.raises(InvalidStateError):
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

    def test_deleted_candidate_rejected(self, make_candidate, instructor):
        candidate = make_candidate(status=Candidate.Status.DELETED)

        with pytest.raises(InvalidStateError):
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

    def test_update_exam_moves_slot(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        updated = self.service.update_exam(exam.id, time='10:00', notes='Moved')

        assert updated.time == '10:00'
        assert updated.date == SLOT_DATE
        assert updated.notes == 'Moved'

    def test_update_exam_into_taken_slot(self, make_candidate, instructor):
        self.service.schedule_exam(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )
        exam = self.service.schedule_exam(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '10:00'
        )

        with pytest.raises(SchedulingConflictError):
            self.service.update_exam(exam.id, time='09:00')

    def test_update_resolved_exam_rejected(self, candidate, instructor, make_exam):
        exam = make_exam(candidate, instructor, status=Exam.Status.FAILED)

        with pytest.raises(InvalidStateError):
            self.service.update_exam(exam.id, time='10:00')

    def test_schedule_exam_accepts_iso_string_date(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, '2024-11-01', '09:00'
        )

        assert exam.date == SLOT_DATE
        assert candidate.get_phase(Phase.HIGHWAY_CODE).exam_date == SLOT_DATE

    def test_schedule_exam_rejects_bad_date(self, candidate, instructor):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, '2024-13-45', '09:00'
            )

        assert str(exc_info.value) == "date must be an ISO date (YYYY-MM-DD)"
        assert Exam.objects.count() == 0

    def test_update_exam_accepts_iso_string_date(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        updated = self.service.update_exam(exam.id, date='2024-11-05')

        assert updated.date == date(2024, 11, 5)

    def test_update_exam_rejects_bad_date(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(BookingValidationError):
            self.service.update_exam(exam.id, date='05/11/2024')

        exam.refresh_from_db()
        assert exam.date == SLOT_DATE

    def test_can_take_exam_rejects_unknown_phase(self, candidate):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.can_take_exam(candidate.id, 'bogus')

        assert str(exc_info.value) == "Unknown phase: bogus"

    def test_record_result_failed(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        self.service.record_result(exam.id, 'failed', notes='Retry later')

        progress = candidate.get_phase(Phase.HIGHWAY_CODE)
        assert progress.status == PhaseProgress.Status.IN_PROGRESS
        assert progress.exam_attempts == 1
        assert progress.exam_passed is False
        assert progress.last_exam_date == timezone.localdate()
        assert progress.exam_date is None

    def test_record_result_twice_rejected(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )
        self.service.record_result(exam.id, 'passed')

        with pytest.raises(InvalidStateError):
            self.service.record_result(exam.id, 'failed')

    def test_record_result_unknown_value(self, candidate, instructor, make_exam):
        exam = make_exam(candidate, instructor)

        with pytest.raises(BookingValidationError):
            self.service.record_result(exam.id, 'cancelled')

    def test_record_result_missing_exam(self):
        import uuid

        with pytest.raises(NotFoundError):
            self.service.record_result(uuid.uuid4(), 'passed')

    def test_cancel_exam_keeps_attempts(self, candidate, instructor):
        exam = self.service.schedule_exam(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        self.service.cancel_exam(exam.id)

        progress = candidate.get_phase(Phase.HIGHWAY_CODE)
        assert Exam.objects.get(id=exam.id).status == Exam.Status.CANCELLED
        assert progress.exam_attempts == 0
        assert progress.exam_date is None

        with pytest.raises(InvalidStateError):
            self.service.cancel_exam(exam.id)

    def test_cancelled_exam_frees_slot(self, make_candidate, instructor):
        exam = self.service.schedule_exam(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )
        self.service.cancel_exam(exam.id)

        other = self.service.schedule_exam(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        assert other.is_scheduled

    def test_candidate_exams_summary(self, candidate, instructor, make_exam):
        make_exam(candidate, instructor, status=Exam.Status.FAILED, date=date(2024, 9, 1))
        make_exam(candidate, instructor, status=Exam.Status.PASSED, date=date(2024, 9, 20))

        history = self.service.get_candidate_exams(candidate.id)

        assert len(history['exams']) == 2
        assert len(history['exams_by_type']['highway_code']) == 2
        assert history['exams_by_type']['driving'] == []
        assert history['summary']['highway_code'] == {'attempts': 2, 'passed': True}
        assert history['summary']['parking'] == {'attempts': 0, 'passed': False}

    def test_upcoming_exams(self, candidate, instructor, make_exam):
        make_exam(candidate, instructor, date=date(2024, 11, 10))

        upcoming = self.service.get_upcoming_exams(from_date=date(2024, 11, 1))

        assert [e.date for e in upcoming] == [date(2024, 11, 10)]

    def test_can_take_exam_unknown_candidate(self):
        import uuid

        with pytest.raises(NotFoundError):
            self.service.can_take_exam(uuid.uuid4(), Phase.HIGHWAY_CODE)

    def test_can_take_exam_accepts_iso_string(self, candidate, instructor, make_exam):
        make_exam(candidate, instructor, status=Exam.Status.FAILED, date=date(2024, 10, 1))

        result = self.service.can_take_exam(candidate.id, Phase.HIGHWAY_CODE, as_of='2024-10-10')

        assert result.can_take is False
        assert result.wait_until == date(2024, 10, 16)

    def test_can_take_exam_rejects_bad_date(self, candidate):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.can_take_exam(candidate.id, Phase.HIGHWAY_CODE, as_of='10/10/2024')

        assert str(exc_info.value) == "as_of must be an ISO date (YYYY-MM-DD)"

    def test_schedule_exam_rejects_bad_time(self, candidate, instructor):
        with pytest.raises(BookingValidationError):
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '25:00'
            )

        assert Exam.objects.count() == 0

    def test_schedule_exam_rejects_long_notes(self, candidate, instructor):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.schedule_exam(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00',
                notes='x' * 501
            )

        assert 'notes cannot exceed 500 characters' in str(exc_info.value)

    def test_schedule_exam_rejects_unknown_phase(self, candidate, instructor):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.schedule_exam(
                candidate.id, instructor.id, 'motorway', SLOT_DATE, '09:00'
            )

        assert str(exc_info.value) == "Unknown phase: motorway"
        assert Exam.objects.count() == 0


@pytest.mark.django_db
class TestLessonService:
    """Tests for LessonService."""

    def setup_method(self):
        self.service = LessonService()

    def test_schedule_lesson(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        assert lesson.status == Lesson.Status.SCHEDULED
        assert lesson.candidate_id == candidate.id

    def test_schedule_lesson_rejects_bad_time(self, candidate, instructor):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.schedule_lesson(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '9am'
            )

        assert str(exc_info.value) == "time must be in HH:MM format"
        assert not Lesson.objects.exists()

    def test_schedule_lesson_accepts_iso_string_date(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, '2024-11-01', '09:00'
        )

        assert lesson.date == SLOT_DATE

    def test_schedule_lesson_rejects_bad_date(self, candidate, instructor):
        with pytest.raises(BookingValidationError) as exc_info:
            self.service.schedule_lesson(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE, '2024-13-45', '09:00'
            )

        assert exc_info.value.error_code == 'VALIDATION_ERROR'
        assert not Lesson.objects.exists()

    def test_update_lesson_accepts_iso_string_date(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        updated = self.service.update_lesson(lesson.id, date='2024-11-05')

        assert updated.date == date(2024, 11, 5)

    def test_update_lesson_rejects_bad_date(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(BookingValidationError):
            self.service.update_lesson(lesson.id, date='not-a-date')

    def test_candidate_double_booking_rejected(self, candidate, make_instructor):
        self.service.schedule_lesson(
            candidate.id, make_instructor().id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(SchedulingConflictError) as exc_info:
            self.service.schedule_lesson(
                candidate.id, make_instructor().id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
            )

        assert str(exc_info.value) == "Candidate already has a lesson scheduled at this time"

    def test_lesson_quota(self, candidate, instructor, make_lesson):
        for day in range(10):
            make_lesson(candidate, instructor, date=SLOT_DATE + timedelta(days=day))

        with pytest.raises(BookingValidationError):
            self.service.schedule_lesson(
                candidate.id, instructor.id, Phase.HIGHWAY_CODE,
                SLOT_DATE + timedelta(days=20), '09:00'
            )

    def test_cancelled_lessons_free_quota(self, candidate, instructor, make_lesson):
        for day in range(10):
            make_lesson(
                candidate, instructor,
                date=SLOT_DATE + timedelta(days=day),
                status=Lesson.Status.CANCELLED,
            )

        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        assert lesson.is_scheduled

    def test_complete_lesson_starts_phase(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        self.service.complete_lesson(lesson.id)

        progress = candidate.get_phase(Phase.HIGHWAY_CODE)
        assert progress.sessions_completed == 1
        assert progress.status == PhaseProgress.Status.IN_PROGRESS

    def test_complete_lesson_of_locked_phase(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.PARKING, SLOT_DATE, '09:00'
        )

        self.service.complete_lesson(lesson.id)

        progress = candidate.get_phase(Phase.PARKING)
        assert progress.sessions_completed == 1
        assert progress.status == PhaseProgress.Status.NOT_STARTED

    def test_complete_cancelled_lesson_rejected(self, candidate, instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )
        self.service.cancel_lesson(lesson.id)

        with pytest.raises(InvalidStateError):
            self.service.complete_lesson(lesson.id)

        assert candidate.get_phase(Phase.HIGHWAY_CODE).sessions_completed == 0

    def test_update_lesson(self, candidate, instructor, make_instructor):
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )
        other = make_instructor()

        updated = self.service.update_lesson(lesson.id, instructor_id=other.id)

        assert updated.instructor_id == other.id
        assert updated.time == '09:00'

    def test_update_lesson_conflict(self, candidate, instructor, make_candidate):
        self.service.schedule_lesson(
            make_candidate().id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '10:00'
        )
        lesson = self.service.schedule_lesson(
            candidate.id, instructor.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
        )

        with pytest.raises(SchedulingConflictError):
            self.service.update_lesson(lesson.id, time='10:00')

    def test_update_at_full_quota_allowed(self, candidate, instructor, make_lesson):
        lessons = [
            make_lesson(candidate, instructor, date=SLOT_DATE + timedelta(days=day))
            for day in range(10)
        ]

        updated = self.service.update_lesson(lessons[0].id, time='15:00')

        assert updated.time == '15:00'

    def test_schedules(self, candidate, instructor, make_candidate, make_lesson):
        make_lesson(candidate, instructor, date=date(2024, 11, 1))
        make_lesson(candidate, instructor, date=date(2024, 12, 1))
        make_lesson(make_candidate(), instructor, date=date(2024, 11, 2))

        candidate_lessons = self.service.get_candidate_schedule(
            candidate.id, start_date=date(2024, 11, 1), end_date=date(2024, 11, 30)
        )
        instructor_lessons = self.service.get_instructor_schedule(instructor.id)

        assert len(candidate_lessons) == 1
        assert len(instructor_lessons) == 3

    def test_no_double_booking_after_many_requests(self, make_candidate, make_instructor):
        instructors = [make_instructor() for _ in range(2)]
        candidates = [make_candidate() for _ in range(3)]
        accepted = []

        for cand in candidates:
            for inst in instructors:
                try:
                    accepted.append(self.service.schedule_lesson(
                        cand.id, inst.id, Phase.HIGHWAY_CODE, SLOT_DATE, '09:00'
                    ))
                except SchedulingConflictError:
                    pass

        assert len(accepted) == 2
        assert len({booking.instructor_id for booking in accepted}) == 2
        assert len({booking.candidate_id for booking in accepted}) == 2


@pytest.mark.django_db
class TestBookingListing:
    """Tests for filtered exam and lesson listings."""

    def test_list_exams_by_status_and_range(self, candidate, instructor, make_exam):
        make_exam(candidate, instructor, status=Exam.Status.FAILED, date=date(2024, 9, 1))
        make_exam(candidate, instructor, status=Exam.Status.PASSED, date=date(2024, 9, 20))
        make_exam(candidate, instructor, exam_type=Phase.PARKING, date=date(2024, 11, 5))

        service = ExamService()

        assert len(service.list_exams()) == 3
        assert len(service.list_exams({'resolved': 'true'})) == 2
        assert len(service.list_exams({'exam_type': 'parking'})) == 1
        assert len(service.list_exams({'date_from': '2024-09-10', 'date_to': '2024-10-31'})) == 1

    def test_list_exams_invalid_filter(self):
        with pytest.raises(BookingValidationError) as exc_info:
            ExamService().list_exams({'exam_type': 'motorway'})

        assert 'exam_type' in exc_info.value.extra_data['errors']

    def test_list_lessons_active(self, candidate, instructor, make_lesson):
        make_lesson(candidate, instructor, date=date(2024, 11, 1))
        make_lesson(candidate, instructor, date=date(2024, 11, 2), status=Lesson.Status.CANCELLED)

        lessons = LessonService().list_lessons({
            'active': 'true',
            'candidate_id': str(candidate.id),
        })

        assert [lesson.date for lesson in lessons] == [date(2024, 11, 1)]
