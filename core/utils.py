"""
Core utilities — teacher scoping (ownership guard) and local-time date bounds.
"""
from calendar import monthrange
from datetime import date, datetime, time, timedelta

from django.utils import timezone
from rest_framework.exceptions import NotFound


def filter_by_teacher(queryset, teacher, owner_field='teacher'):
    """
    Filter queryset to rows owned by teacher.
    teacher=None (caller has no profile yet) yields an empty queryset.
    """
    if teacher is None:
        return queryset.none()
    return queryset.filter(**{owner_field: teacher})


def get_owned_or_404(queryset, teacher, pk, owner_field='teacher', for_update=False):
    """
    Ownership guard: fetch row `pk` only if it belongs to `teacher`.

    Missing and foreign rows raise the same NotFound ("<Model> not found") so
    other teachers' ids are never confirmed. With for_update=True the row is
    locked until the surrounding transaction ends; call inside
    transaction.atomic().
    """
    label = queryset.model._meta.verbose_name.capitalize()
    qs = filter_by_teacher(queryset, teacher, owner_field)
    if for_update:
        qs = qs.select_for_update(of=('self',))
    try:
        return qs.get(pk=pk)
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        raise NotFound(f'{label} not found')


def local_midnight(day):
    """Aware datetime for 00:00 of `day` in the active time zone."""
    return timezone.make_aware(datetime.combine(day, time.min))


def day_bounds(day):
    """[start, end) aware datetimes covering one local calendar day."""
    start = local_midnight(day)
    return start, local_midnight(day + timedelta(days=1))


def month_bounds(year, month):
    """[start, end) aware datetimes covering one local calendar month."""
    _, last_day = monthrange(year, month)
    start = local_midnight(date(year, month, 1))
    end = local_midnight(date(year, month, last_day) + timedelta(days=1))
    return start, end


def add_months(day, months):
    """
    Add calendar months to a date, clamping to the target month's last day.
    2025-01-31 + 1 => 2025-02-28.
    """
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    _, last_day = monthrange(year, month)
    return date(year, month, min(day.day, last_day))
