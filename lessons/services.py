"""
Lesson lifecycle service: create, update, delete, recurring expansion and
attendance marking, always scoped to the caller's teacher profile.

Every write runs its ownership check and its mutation in one transaction;
the owning row is locked (select_for_update) so it cannot disappear between
check and write.
Day of week for recurrence: 0=Sun .. 6=Sat (calendar UI convention).
"""
import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from core.utils import add_months, day_bounds, filter_by_teacher, get_owned_or_404, local_midnight, month_bounds
from pieces.models import Piece
from students.models import Student
from students.services import get_teacher, require_teacher
from .models import Lesson, Attendance, MIN_DURATION, MAX_DURATION

logger = logging.getLogger(__name__)

VALID_STATUSES = {choice for choice, _ in Lesson.STATUS_CHOICES}
UPDATABLE_FIELDS = ('date', 'duration', 'status', 'cancel_reason', 'actual_min', 'note')
NULLABLE_FIELDS = ('cancel_reason', 'actual_min', 'note')


def default_lesson_status():
    """Status for lessons created without an explicit one (LESSON_DEFAULT_STATUS)."""
    value = getattr(settings, 'LESSON_DEFAULT_STATUS', Lesson.STATUS_PENDING)
    if value not in VALID_STATUSES:
        raise ImproperlyConfigured(
            f'LESSON_DEFAULT_STATUS must be one of {sorted(VALID_STATUSES)}, got {value!r}'
        )
    return value


def _check_duration(duration):
    if duration is None or not MIN_DURATION <= int(duration) <= MAX_DURATION:
        raise ValidationError({'duration': f'Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes.'})


def _check_status(status):
    if status not in VALID_STATUSES:
        raise ValidationError({'status': f'"{status}" is not a valid lesson status.'})


def _js_weekday(day):
    """Python weekday(): Mon=0..Sun=6. Map to Sun=0..Sat=6."""
    return (day.weekday() + 1) % 7


def _owned_piece(teacher, piece_id):
    if piece_id is None:
        return None
    return get_owned_or_404(Piece.objects.all(), teacher, piece_id)


def _lesson_queryset():
    return Lesson.objects.select_related('student', 'piece', 'attendance')


def recurring_dates(start_day, day_of_week, recurrence_months):
    """
    Every date in [start_day, start_day + recurrence_months months) whose
    weekday (0=Sun..6=Sat) equals day_of_week, ascending.
    """
    if not 0 <= day_of_week <= 6:
        raise ValidationError({'dayOfWeek': 'Day of week must be between 0 (Sunday) and 6 (Saturday).'})
    end_day = add_months(start_day, recurrence_months)
    current = start_day + timedelta(days=(day_of_week - _js_weekday(start_day)) % 7)
    result = []
    while current < end_day:
        result.append(current)
        current += timedelta(days=7)
    return result


def create_lesson(user, student_id, date, duration, piece_id=None, status=None):
    """
    Create one lesson for an owned student.
    Teacher comes from the owned student, never from input.
    """
    _check_duration(duration)
    if status is not None:
        _check_status(status)
    teacher = require_teacher(user)

    with transaction.atomic():
        student = get_owned_or_404(Student.objects.all(), teacher, student_id, for_update=True)
        piece = _owned_piece(teacher, piece_id)
        lesson = Lesson.objects.create(
            teacher=student.teacher,
            student=student,
            piece=piece,
            date=date,
            duration=duration,
            status=status or default_lesson_status(),
        )
    logger.info(f"[create_lesson] id={lesson.id} student_id={student.id} date={date} status={lesson.status}")
    return lesson


def update_lesson(user, lesson_id, **changes):
    """
    Partial update. Keys absent from `changes` stay unchanged;
    piece_id=None clears the piece.
    """
    if 'duration' in changes and changes['duration'] is not None:
        _check_duration(changes['duration'])
    if changes.get('status') is not None:
        _check_status(changes['status'])
    teacher = require_teacher(user)

    with transaction.atomic():
        lesson = get_owned_or_404(Lesson.objects.all(), teacher, lesson_id, for_update=True)
        if 'piece_id' in changes:
            lesson.piece = _owned_piece(teacher, changes['piece_id'])
        for field in UPDATABLE_FIELDS:
            if field not in changes:
                continue
            if changes[field] is None and field not in NULLABLE_FIELDS:
                continue
            setattr(lesson, field, changes[field])
        lesson.save()
    logger.info(f"[update_lesson] id={lesson.id} fields={sorted(changes)} status={lesson.status}")
    return lesson


def delete_lesson(user, lesson_id):
    """Hard delete. Returns the lesson as it was (id preserved for the response)."""
    teacher = require_teacher(user)
    with transaction.atomic():
        lesson = get_owned_or_404(Lesson.objects.all(), teacher, lesson_id, for_update=True)
        deleted_id = lesson.id
        lesson.delete()
    lesson.id = deleted_id
    logger.info(f"[delete_lesson] id={deleted_id} teacher_id={teacher.id}")
    return lesson


def create_recurring_lessons(user, student_id, start_date, day_of_week, time_of_day,
                             duration, recurrence_months, piece_id=None):
    """
    Expand a weekly rule into concrete lessons, all committed together.
    start_date may be a date or datetime (only its local calendar date counts).
    Returns the number of lessons created.
    """
    _check_duration(duration)
    if not 1 <= recurrence_months <= 2:
        raise ValidationError({'recurrenceMonths': 'Recurrence must be 1 or 2 months.'})
    teacher = require_teacher(user)

    if isinstance(start_date, datetime):
        start_day = timezone.localtime(start_date).date() if timezone.is_aware(start_date) else start_date.date()
    else:
        start_day = start_date
    days = recurring_dates(start_day, day_of_week, recurrence_months)
    logger.info(
        f"[create_recurring] student_id={student_id} start={start_day} dow={day_of_week} "
        f"months={recurrence_months} dates={len(days)}"
    )

    status = default_lesson_status()
    with transaction.atomic():
        student = get_owned_or_404(Student.objects.all(), teacher, student_id, for_update=True)
        piece = _owned_piece(teacher, piece_id)
        lessons = [
            Lesson(
                teacher=student.teacher,
                student=student,
                piece=piece,
                date=timezone.make_aware(datetime.combine(day, time_of_day)),
                duration=duration,
                status=status,
            )
            for day in days
        ]
        Lesson.objects.bulk_create(lessons)
    logger.info(f"[create_recurring] Created {len(lessons)} lessons for student_id={student.id}")
    return len(lessons)


def mark_attendance(user, lesson_id, status, actual_min=None, reason=None, note=None):
    """
    Upsert the lesson's Attendance record (one per lesson).
    actual_min defaults to 0; reason/note are only written when given.
    Lesson.status is not touched.
    """
    if status not in {choice for choice, _ in Attendance.STATUS_CHOICES}:
        raise ValidationError({'status': f'"{status}" is not a valid attendance status.'})
    teacher = require_teacher(user)

    with transaction.atomic():
        lesson = get_owned_or_404(Lesson.objects.all(), teacher, lesson_id, for_update=True)
        defaults = {
            'date': lesson.date,
            'status': status,
            'actual_min': actual_min if actual_min is not None else 0,
        }
        if reason is not None:
            defaults['reason'] = reason
        if note is not None:
            defaults['note'] = note
        attendance, created = Attendance.objects.update_or_create(lesson=lesson, defaults=defaults)
    logger.info(f"[mark_attendance] lesson_id={lesson.id} status={status} created={created}")
    return attendance


def list_lessons(user, student_id=None, status=None):
    qs = filter_by_teacher(_lesson_queryset(), get_teacher(user))
    if student_id is not None:
        qs = qs.filter(student_id=student_id)
    if status is not None:
        qs = qs.filter(status=status)
    return qs.order_by('date')


def lessons_in_range(user, from_day, to_day):
    """Lessons whose local date falls in [from_day, to_day] (both inclusive)."""
    if from_day > to_day:
        from_day, to_day = to_day, from_day
    start = local_midnight(from_day)
    end = local_midnight(to_day + timedelta(days=1))
    return filter_by_teacher(_lesson_queryset(), get_teacher(user)).filter(
        date__gte=start, date__lt=end,
    ).order_by('date')


def lessons_for_month(user, year, month):
    start, end = month_bounds(year, month)
    return filter_by_teacher(_lesson_queryset(), get_teacher(user)).filter(
        date__gte=start, date__lt=end,
    ).order_by('date')


def lessons_for_day(user, day):
    start, end = day_bounds(day)
    return filter_by_teacher(_lesson_queryset(), get_teacher(user)).filter(
        date__gte=start, date__lt=end,
    ).order_by('date')
