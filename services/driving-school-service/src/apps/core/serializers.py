"""Driving School Service Serializers."""
from django.conf import settings
from rest_framework import serializers

from shared.common.validators import validate_time_of_day, validate_phone_number
from .models import Candidate, PhaseProgress, Exam, Lesson, Payment, Phase


def notes_max_length() -> int:
    return getattr(settings, 'SCHOOL_EXAM_NOTES_MAX_LENGTH', 500)


# ==========================================================================
# Request serializers
# ==========================================================================

class SlotSerializer(serializers.Serializer):
    """Date and HH:MM time of a booking."""

    date = serializers.DateField()
    time = serializers.CharField(max_length=5, validators=[validate_time_of_day])


class ExamScheduleSerializer(SlotSerializer):
    candidate_id = serializers.UUIDField()
    instructor_id = serializers.UUIDField()
    exam_type = serializers.ChoiceField(choices=Phase.choices)
    notes = serializers.CharField(
        max_length=notes_max_length(),
        required=False,
        allow_blank=True,
        allow_null=True
    )


class ExamUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    time = serializers.CharField(
        max_length=5,
        required=False,
        validators=[validate_time_of_day]
    )
    instructor_id = serializers.UUIDField(required=False)
    notes = serializers.CharField(
        max_length=notes_max_length(),
        required=False,
        allow_blank=True,
        allow_null=True
    )


class ExamResultSerializer(serializers.Serializer):
    result = serializers.ChoiceField(
        choices=[(status.value, status.label) for status in Exam.RESOLVED_STATUSES]
    )
    notes = serializers.CharField(
        max_length=notes_max_length(),
        required=False,
        allow_blank=True,
        allow_null=True
    )


class LessonScheduleSerializer(SlotSerializer):
    candidate_id = serializers.UUIDField()
    instructor_id = serializers.UUIDField()
    lesson_type = serializers.ChoiceField(choices=Phase.choices)


class LessonUpdateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    time = serializers.CharField(
        max_length=5,
        required=False,
        validators=[validate_time_of_day]
    )
    instructor_id = serializers.UUIDField(required=False)


class EligibilityQuerySerializer(serializers.Serializer):
    candidate_id = serializers.UUIDField()
    phase = serializers.ChoiceField(choices=Phase.choices)
    as_of = serializers.DateField(required=False, allow_null=True)


class CandidateCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    address = serializers.CharField(max_length=200, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    license_category = serializers.ChoiceField(choices=Candidate.LicenseCategory.choices)
    total_fee = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False
    )

    def validate_phone(self, value):
        return validate_phone_number(value)

    def validate_email(self, value):
        return value.lower()


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    date = serializers.DateField(required=False)
    note = serializers.CharField(max_length=200, required=False, allow_blank=True)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be positive")
        return value


# ==========================================================================
# Response serializers
# ==========================================================================

class PhaseProgressSerializer(serializers.ModelSerializer):
    progress_ratio = serializers.FloatField(read_only=True)

    class Meta:
        model = PhaseProgress
        fields = [
            'phase', 'status', 'sessions_completed', 'sessions_plan',
            'progress_ratio', 'exam_attempts', 'exam_passed',
            'last_exam_date', 'exam_date',
        ]


class CandidateSerializer(serializers.ModelSerializer):
    phases = serializers.SerializerMethodField()
    remaining_balance = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        read_only=True
    )

    class Meta:
        model = Candidate
        fields = [
            'id', 'name', 'email', 'phone', 'license_category', 'status',
            'registration_date', 'completion_date',
            'total_fee', 'paid_amount', 'remaining_balance', 'phases',
        ]

    def get_phases(self, obj):
        return PhaseProgressSerializer(obj.ordered_phases, many=True).data


class ExamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exam
        fields = [
            'id', 'candidate_id', 'instructor_id', 'exam_type', 'date', 'time',
            'status', 'attempt_number', 'notes', 'created_at', 'updated_at',
        ]


class LessonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lesson
        fields = [
            'id', 'candidate_id', 'instructor_id', 'lesson_type', 'date', 'time',
            'status', 'completed_at', 'created_at', 'updated_at',
        ]


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ['id', 'candidate_id', 'amount', 'date', 'method', 'note']


class EligibilityResultSerializer(serializers.Serializer):
    can_take = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    wait_until = serializers.DateField(allow_null=True)


class ReservationResultSerializer(serializers.Serializer):
    accepted = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
    error_code = serializers.CharField(allow_null=True)
