"""
Student services - teacher profile provisioning and roster CRUD.
Every query is scoped to the caller's TeacherProfile.
"""
import logging

from django.db import transaction
from django.db.models import Count
from rest_framework.exceptions import NotFound

from core.utils import filter_by_teacher, get_owned_or_404
from .models import TeacherProfile, Student

logger = logging.getLogger(__name__)


def ensure_teacher_profile(user, hourly_rate=None):
    """
    Idempotent get-or-create of the caller's TeacherProfile.
    Called once at registration, and before student creation for accounts
    created before registration-time provisioning existed.
    """
    defaults = {}
    if hourly_rate is not None:
        defaults['hourly_rate'] = hourly_rate
    teacher, created = TeacherProfile.objects.get_or_create(user=user, defaults=defaults)
    if created:
        logger.info(f"[teacher_profile] Created profile id={teacher.id} for user_id={user.id}")
    return teacher


def get_teacher(user):
    """Caller's TeacherProfile, or None if never provisioned."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    return TeacherProfile.objects.filter(user=user).first()


def require_teacher(user):
    teacher = get_teacher(user)
    if teacher is None:
        raise NotFound('Teacher not found')
    return teacher


def update_hourly_rate(user, hourly_rate):
    with transaction.atomic():
        teacher = ensure_teacher_profile(user, hourly_rate=hourly_rate)
        if teacher.hourly_rate != hourly_rate:
            teacher.hourly_rate = hourly_rate
            teacher.save(update_fields=['hourly_rate', 'updated_at'])
    logger.info(f"[teacher_profile] user_id={user.id} hourly_rate={hourly_rate}")
    return teacher


def list_students(user):
    """Teacher's students, newest first, annotated with lesson_count."""
    qs = Student.objects.annotate(lesson_count=Count('lessons'))
    return filter_by_teacher(qs, get_teacher(user)).order_by('-created_at')


def get_student(user, student_id):
    return get_owned_or_404(Student.objects.all(), require_teacher(user), student_id)


def create_student(user, name, lesson_rate=None, avatar=None, notes=None):
    with transaction.atomic():
        teacher = ensure_teacher_profile(user)
        student = Student(teacher=teacher, name=name, avatar=avatar or None, notes=notes)
        if lesson_rate is not None:
            student.lesson_rate = lesson_rate
        student.save()
    logger.info(f"[student] Created id={student.id} teacher_id={teacher.id}")
    return student


def update_student(user, student_id, **changes):
    """Partial update; keys absent from `changes` are left unchanged."""
    teacher = require_teacher(user)
    with transaction.atomic():
        student = get_owned_or_404(Student.objects.all(), teacher, student_id, for_update=True)
        for field in ('name', 'avatar', 'notes', 'lesson_rate'):
            if field in changes:
                value = changes[field]
                if field == 'avatar' and value == '':
                    value = None
                setattr(student, field, value)
        student.save()
    return student


def delete_student(user, student_id):
    """Hard delete; lessons and monthly reports cascade."""
    teacher = require_teacher(user)
    with transaction.atomic():
        student = get_owned_or_404(Student.objects.all(), teacher, student_id, for_update=True)
        student_pk = student.pk
        student.delete()
    logger.info(f"[student] Deleted id={student_pk} teacher_id={teacher.id}")
    return student_pk
