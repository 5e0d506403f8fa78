"""
Teacher profile and student roster.
ERD: teacher_profile (user_id, hourly_rate), student (teacher_id, lesson_rate).
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from accounts.models import User


class TeacherProfile(models.Model):
    """
    Teacher Profile — OneToOne with User. The tenant that owns students, pieces and lessons.
    hourly_rate is the legacy teacher-level per-session rate (monthly report tuition line).
    """
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='teacher_profile',
    )
    hourly_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Per-session rate used by monthly report tuition",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teacher_profiles'
        verbose_name = 'Teacher'
        verbose_name_plural = 'Teachers'

    def __str__(self):
        return str(self.user)


class Student(models.Model):
    """
    Student — a roster entry of exactly one teacher.
    lesson_rate: amount billed per non-cancelled lesson, in the teacher's currency unit.
    """
    teacher = models.ForeignKey(
        TeacherProfile,
        on_delete=models.CASCADE,
        related_name='students',
    )
    name = models.CharField(max_length=100)
    avatar = models.URLField(max_length=500, blank=True, null=True)
    notes = models.TextField(max_length=1000, blank=True, null=True)
    lesson_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['-created_at']

    def __str__(self):
        return self.name
