"""
Monthly narrative report, one per (student, month, year).
"""
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

MAX_TEXT = 5000


class MonthlyReport(models.Model):
    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="monthly_reports",
    )
    month = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    year = models.PositiveSmallIntegerField(validators=[MinValueValidator(1900), MaxValueValidator(2100)])
    summary = models.TextField(max_length=MAX_TEXT, blank=True, null=True)
    comments = models.TextField(max_length=MAX_TEXT, blank=True, null=True)
    next_month_plan = models.TextField(max_length=MAX_TEXT, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "monthly_reports"
        verbose_name = "Monthly report"
        verbose_name_plural = "Monthly reports"
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "month", "year"],
                name="uniq_report_student_month_year",
            )
        ]

    def __str__(self):
        return f"{self.student_id} - {self.year}-{self.month:02d}"
