"""
Earnings service - per-lesson earnings and dashboard aggregates.

Earnings rule: a lesson earns its student's lesson_rate unless it is
CANCELLED (then 0). No proration by duration.
Dashboard and per-student totals only count COMPLETE lessons; PENDING ones
are not money yet.
"""
import logging
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from core.utils import month_bounds
from lessons.models import Lesson
from lessons.services import lessons_for_day
from students.services import get_teacher

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def lesson_earnings(lesson, student=None):
    student = student or lesson.student
    if lesson.status == Lesson.STATUS_CANCELLED:
        return ZERO
    return student.lesson_rate


def _sum_rate(queryset):
    return queryset.aggregate(total=Sum('student__lesson_rate'))['total'] or ZERO


def dashboard_totals(user, today=None):
    """
    {totalEarnings, currentMonthEarnings, currentMonthLoss, hourlyRate}.
    `today` (a date) picks the current month; defaults to the local date.
    """
    teacher = get_teacher(user)
    if teacher is None:
        return {
            'totalEarnings': ZERO,
            'currentMonthEarnings': ZERO,
            'currentMonthLoss': ZERO,
            'hourlyRate': ZERO,
        }

    today = today or timezone.localdate()
    start, end = month_bounds(today.year, today.month)
    lessons = Lesson.objects.filter(teacher=teacher)
    completed = lessons.filter(status=Lesson.STATUS_COMPLETE)
    this_month = {'date__gte': start, 'date__lt': end}

    totals = {
        'totalEarnings': _sum_rate(completed),
        'currentMonthEarnings': _sum_rate(completed.filter(**this_month)),
        'currentMonthLoss': _sum_rate(lessons.filter(status=Lesson.STATUS_CANCELLED, **this_month)),
        'hourlyRate': teacher.hourly_rate,
    }
    logger.debug(f"[dashboard] teacher_id={teacher.id} month={today:%Y-%m} totals={totals}")
    return totals


def aggregate_by_student(lessons):
    """
    Group lessons per student: minutes, earnings and count.
    Order-independent; result sorted by earnings desc, then studentId.
    """
    rows = {}
    for lesson in lessons:
        student = lesson.student
        row = rows.setdefault(student.id, {
            'studentId': student.id,
            'studentName': student.name,
            'avatar': student.avatar,
            'totalMinutes': 0,
            'earnings': ZERO,
            'lessonCount': 0,
        })
        row['totalMinutes'] += lesson.duration
        row['earnings'] += lesson_earnings(lesson, student)
        row['lessonCount'] += 1
    return sorted(rows.values(), key=lambda row: (-row['earnings'], row['studentId']))


def earnings_by_student(user, today=None):
    """Per-student totals of COMPLETE lessons in the current month."""
    teacher = get_teacher(user)
    if teacher is None:
        return []
    today = today or timezone.localdate()
    start, end = month_bounds(today.year, today.month)
    lessons = Lesson.objects.filter(
        teacher=teacher,
        status=Lesson.STATUS_COMPLETE,
        date__gte=start,
        date__lt=end,
    ).select_related('student')
    return aggregate_by_student(lessons)


def today_lessons(user, day=None):
    """Lessons of one local day ordered by time, each with `.earnings` set."""
    day = day or timezone.localdate()
    lessons = list(lessons_for_day(user, day))
    for lesson in lessons:
        lesson.earnings = lesson_earnings(lesson)
    return lessons
