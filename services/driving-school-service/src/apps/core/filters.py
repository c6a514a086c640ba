# services/driving-school-service/src/apps/core/filters.py
"""
Booking Filters

Django Filter classes for lesson and exam listings.
"""

import django_filters

from .models import Exam, Lesson, Phase


class BookingFilterMixin(django_filters.FilterSet):
    """Filters shared by lessons and exams."""

    # Date filters
    date = django_filters.DateFilter()
    date_from = django_filters.DateFilter(
        field_name='date',
        lookup_expr='gte'
    )
    date_to = django_filters.DateFilter(
        field_name='date',
        lookup_expr='lte'
    )
    time = django_filters.CharFilter()

    # Resource filters
    candidate_id = django_filters.UUIDFilter()
    instructor_id = django_filters.UUIDFilter()

    status_in = django_filters.BaseInFilter(
        field_name='status'
    )
    active = django_filters.BooleanFilter(
        method='filter_active'
    )

    def filter_active(self, queryset, name, value):
        """Filter for bookings still holding their slot."""
        scheduled = queryset.model.Status.SCHEDULED
        if value:
            return queryset.filter(status=scheduled)
        return queryset.exclude(status=scheduled)


class ExamFilter(BookingFilterMixin):
    """Filter for exam queries."""

    status = django_filters.ChoiceFilter(
        choices=Exam.Status.choices
    )
    exam_type = django_filters.ChoiceFilter(
        choices=Phase.choices
    )
    resolved = django_filters.BooleanFilter(
        method='filter_resolved'
    )

    class Meta:
        model = Exam
        fields = ['status', 'exam_type', 'candidate_id', 'instructor_id']

    def filter_resolved(self, queryset, name, value):
        """Filter for passed or failed attempts."""
        if value:
            return queryset.filter(status__in=Exam.RESOLVED_STATUSES)
        return queryset.exclude(status__in=Exam.RESOLVED_STATUSES)


class LessonFilter(BookingFilterMixin):
    """Filter for lesson queries."""

    status = django_filters.ChoiceFilter(
        choices=Lesson.Status.choices
    )
    lesson_type = django_filters.ChoiceFilter(
        choices=Phase.choices
    )

    class Meta:
        model = Lesson
        fields = ['status', 'lesson_type', 'candidate_id', 'instructor_id']
