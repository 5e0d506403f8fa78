"""
Lesson and its legacy Attendance sub-record.
Invariant: lesson.teacher == lesson.student.teacher (set server-side from the
owned student, never from client input).
"""
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

MIN_DURATION = 15
MAX_DURATION = 480


class Lesson(models.Model):
    """
    Scheduled teaching session.
    Status graph is fully connected: any status may be corrected to any other.
    """
    STATUS_PENDING = "PENDING"
    STATUS_COMPLETE = "COMPLETE"
    STATUS_CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETE, "Complete"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    teacher = models.ForeignKey(
        "students.TeacherProfile",
        on_delete=models.CASCADE,
        related_name="lessons",
    )
    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="lessons",
    )
    piece = models.ForeignKey(
        "pieces.Piece",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lessons",
    )
    date = models.DateTimeField(db_index=True)
    duration = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_DURATION), MaxValueValidator(MAX_DURATION)],
        help_text="Minutes (15..480)",
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    actual_min = models.PositiveSmallIntegerField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=500, blank=True, null=True)
    note = models.TextField(max_length=1000, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "lessons"
        verbose_name = "Lesson"
        verbose_name_plural = "Lessons"
        ordering = ["date"]

    def __str__(self):
        return f"{self.student.name} - {self.date:%Y-%m-%d %H:%M} - {self.status}"


class Attendance(models.Model):
    """
    Legacy attendance record, one per lesson (upserted on lesson id).
    Independent of Lesson.status.
    """
    STATUS_PRESENT = "PRESENT"
    STATUS_ABSENT = "ABSENT"
    STATUS_MAKEUP = "MAKEUP"

    STATUS_CHOICES = [
        (STATUS_PRESENT, "Present"),
        (STATUS_ABSENT, "Absent"),
        (STATUS_MAKEUP, "Make-up"),
    ]

    lesson = models.OneToOneField(
        Lesson,
        on_delete=models.CASCADE,
        related_name="attendance",
    )
    date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    actual_min = models.PositiveSmallIntegerField(default=0)
    reason = models.CharField(max_length=500, blank=True, null=True)
    note = models.TextField(max_length=1000, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "attendance"
        verbose_name = "Attendance"
        verbose_name_plural = "Attendance"
        ordering = ["-date"]

    def __str__(self):
        return f"{self.lesson_id} - {self.status}"
