"""
Report aggregation: monthly attendance grid, tuition line and the narrative
MonthlyReport upsert.

Weeks are Monday-anchored: week 1 runs from the 1st to the first Sunday.
A month spans 4..6 such weeks; the grid always shows 1..5 and adds week 6
only when a lesson lands in it.
"""
import logging
from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.utils import get_owned_or_404, month_bounds
from lessons.models import Lesson
from students.models import Student
from students.services import require_teacher
from .models import MonthlyReport

logger = logging.getLogger(__name__)

RATE_SOURCE_TEACHER = 'teacher'
RATE_SOURCE_STUDENT = 'student'
REPORT_FIELDS = ('summary', 'comments', 'next_month_plan')


def week_of_month(day):
    first_weekday = day.replace(day=1).weekday()
    return (day.day - 1 + first_weekday) // 7 + 1


def _local_day(value):
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    return value


def bucket_lessons_by_week(lessons):
    """[{week, entries: [{lessonId, day, status}]}] for weeks 1..5 (+6 if used)."""
    buckets = {week: [] for week in range(1, 7)}
    for lesson in lessons:
        day = _local_day(lesson.date)
        buckets[week_of_month(day)].append({
            'lessonId': lesson.id,
            'day': day.day,
            'status': lesson.status,
        })
    weeks = [1, 2, 3, 4, 5]
    if buckets[6]:
        weeks.append(6)
    return [{'week': week, 'entries': buckets[week]} for week in weeks]


def tuition_summary(lessons, per_session_rate):
    total_sessions = sum(1 for lesson in lessons if lesson.status == Lesson.STATUS_COMPLETE)
    rate = per_session_rate or Decimal('0.00')
    return {
        'totalSessions': total_sessions,
        'perSessionRate': rate,
        'totalTuition': rate * total_sessions,
    }


def per_session_rate(teacher, student):
    """Rate for the tuition line, picked by REPORT_RATE_SOURCE."""
    source = getattr(settings, 'REPORT_RATE_SOURCE', RATE_SOURCE_TEACHER)
    if source == RATE_SOURCE_TEACHER:
        return teacher.hourly_rate
    if source == RATE_SOURCE_STUDENT:
        return student.lesson_rate
    raise ImproperlyConfigured(
        f"REPORT_RATE_SOURCE must be '{RATE_SOURCE_TEACHER}' or '{RATE_SOURCE_STUDENT}', got {source!r}"
    )


def _check_period(month, year):
    errors = {}
    if not 1 <= month <= 12:
        errors['month'] = 'Month must be between 1 and 12.'
    if not 1900 <= year <= 2100:
        errors['year'] = 'Year must be between 1900 and 2100.'
    if errors:
        raise ValidationError(errors)


def get_student_report(user, student_id, month, year):
    _check_period(month, year)
    teacher = require_teacher(user)
    student = get_owned_or_404(Student.objects.all(), teacher, student_id)

    start, end = month_bounds(year, month)
    report = MonthlyReport.objects.filter(student=student, month=month, year=year).first()
    lessons = list(
        student.lessons.filter(date__gte=start, date__lt=end)
        .select_related('student', 'piece', 'attendance')
        .order_by('date')
    )
    tuition = tuition_summary(lessons, per_session_rate(teacher, student))
    logger.debug(
        f"[report] student_id={student.id} period={year}-{month:02d} "
        f"lessons={len(lessons)} sessions={tuition['totalSessions']}"
    )
    return {
        'report': report,
        'lessons': lessons,
        'student': student,
        'weeks': bucket_lessons_by_week(lessons),
        'teacherHourlyRate': teacher.hourly_rate,
        **tuition,
    }


def upsert_report(user, student_id, month, year, **fields):
    """
    Create or update the (student, month, year) report.
    Only fields passed in are written; the others keep their stored value.
    """
    _check_period(month, year)
    unknown = set(fields) - set(REPORT_FIELDS)
    if unknown:
        raise TypeError(f'Unknown report fields: {sorted(unknown)}')
    teacher = require_teacher(user)

    with transaction.atomic():
        student = get_owned_or_404(Student.objects.all(), teacher, student_id, for_update=True)
        report, created = MonthlyReport.objects.update_or_create(
            student=student, month=month, year=year, defaults=fields,
        )
    logger.info(
        f"[upsert_report] student_id={student.id} period={year}-{month:02d} "
        f"created={created} fields={sorted(fields)}"
    )
    return report
