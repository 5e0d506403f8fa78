"""
Repertoire piece — a teacher's reference item, optionally linked from lessons.
"""
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class Piece(models.Model):
    teacher = models.ForeignKey(
        'students.TeacherProfile',
        on_delete=models.CASCADE,
        related_name='pieces',
    )
    title = models.CharField(max_length=200)
    difficulty = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="1 (easiest) .. 5",
    )
    description = models.TextField(max_length=1000, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pieces'
        verbose_name = 'Piece'
        verbose_name_plural = 'Pieces'
        ordering = ['-created_at']

    def __str__(self):
        return self.title
