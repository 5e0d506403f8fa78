"""
Report aggregation tests.
- week_of_month is Monday-anchored (Feb 2025 -> 5 weeks, Jun 30 2025 -> week 6)
- grid always lists weeks 1..5, week 6 only when used
- tuition counts COMPLETE lessons at the configured per-session rate
- upsert is idempotent and merges only the fields sent
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from lessons.models import Lesson, Attendance
from reports import services
from reports.models import MonthlyReport
from students.models import Student, TeacherProfile


def _at(y, m, d, hh=10):
    return timezone.make_aware(datetime(y, m, d, hh, 0))


class WeekOfMonthTests(TestCase):
    def test_february_2025_has_five_weeks(self):
        # Feb 1 2025 is a Saturday
        self.assertEqual(services.week_of_month(date(2025, 2, 1)), 1)
        self.assertEqual(services.week_of_month(date(2025, 2, 2)), 1)
        self.assertEqual(services.week_of_month(date(2025, 2, 3)), 2)
        self.assertEqual(services.week_of_month(date(2025, 2, 28)), 5)

    def test_june_2025_reaches_week_six(self):
        # Jun 1 2025 is a Sunday
        self.assertEqual(services.week_of_month(date(2025, 6, 1)), 1)
        self.assertEqual(services.week_of_month(date(2025, 6, 2)), 2)
        self.assertEqual(services.week_of_month(date(2025, 6, 30)), 6)

    def test_march_31_2025(self):
        self.assertEqual(services.week_of_month(date(2025, 3, 31)), 6)


class BucketTests(TestCase):
    def _lesson(self, pk, d, status=Lesson.STATUS_COMPLETE):
        return SimpleNamespace(id=pk, date=d, status=status)

    def test_five_weeks_when_week_six_empty(self):
        weeks = services.bucket_lessons_by_week([self._lesson(1, date(2025, 2, 28))])
        self.assertEqual([w["week"] for w in weeks], [1, 2, 3, 4, 5])
        self.assertEqual(weeks[4]["entries"], [{"lessonId": 1, "day": 28, "status": "COMPLETE"}])
        self.assertTrue(all(w["entries"] == [] for w in weeks[:4]))

    def test_week_six_only_when_used(self):
        weeks = services.bucket_lessons_by_week([
            self._lesson(1, date(2025, 6, 2)),
            self._lesson(2, date(2025, 6, 30), Lesson.STATUS_CANCELLED),
        ])
        self.assertEqual([w["week"] for w in weeks], [1, 2, 3, 4, 5, 6])
        self.assertEqual(weeks[5]["entries"], [{"lessonId": 2, "day": 30, "status": "CANCELLED"}])
        self.assertEqual(weeks[1]["entries"][0]["lessonId"], 1)

    def test_tuition_summary(self):
        lessons = [
            self._lesson(1, date(2025, 3, 3)),
            self._lesson(2, date(2025, 3, 10)),
            self._lesson(3, date(2025, 3, 17), Lesson.STATUS_CANCELLED),
            self._lesson(4, date(2025, 3, 24), Lesson.STATUS_PENDING),
        ]
        summary = services.tuition_summary(lessons, Decimal("300000"))
        self.assertEqual(summary["totalSessions"], 2)
        self.assertEqual(summary["totalTuition"], Decimal("600000"))
        self.assertEqual(services.tuition_summary([], None)["totalTuition"], Decimal("0"))


class StudentReportTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="t@report.test", password="pass123", full_name="Teacher")
        self.teacher = TeacherProfile.objects.create(user=self.user, hourly_rate=Decimal("300000"))
        self.student = Student.objects.create(teacher=self.teacher, name="S", lesson_rate=Decimal("500000"))
        self.lessons = [
            Lesson.objects.create(
                teacher=self.teacher, student=self.student,
                date=_at(2025, 3, day), duration=duration, status=status,
            )
            for day, duration, status in (
                (3, 60, Lesson.STATUS_COMPLETE),
                (10, 45, Lesson.STATUS_COMPLETE),
                (31, 60, Lesson.STATUS_CANCELLED),
            )
        ]
        Attendance.objects.create(
            lesson=self.lessons[0], date=self.lessons[0].date, status=Attendance.STATUS_PRESENT, actual_min=60,
        )

        other_user = User.objects.create_user(email="o@report.test", password="pass123", full_name="Other")
        self.other_teacher = TeacherProfile.objects.create(user=other_user)
        self.other_student = Student.objects.create(teacher=self.other_teacher, name="O")

    def test_march_scenario_uses_teacher_rate(self):
        data = services.get_student_report(self.user, self.student.id, month=3, year=2025)
        self.assertIsNone(data["report"])
        self.assertEqual(len(data["lessons"]), 3)
        self.assertEqual(data["totalSessions"], 2)
        self.assertEqual(data["perSessionRate"], Decimal("300000"))
        self.assertEqual(data["totalTuition"], Decimal("600000"))
        self.assertEqual(data["teacherHourlyRate"], Decimal("300000"))
        self.assertEqual([w["week"] for w in data["weeks"]], [1, 2, 3, 4, 5, 6])

    @override_settings(REPORT_RATE_SOURCE="student")
    def test_student_rate_source(self):
        data = services.get_student_report(self.user, self.student.id, month=3, year=2025)
        self.assertEqual(data["totalTuition"], Decimal("1000000"))

    def test_foreign_student(self):
        with self.assertRaises(NotFound):
            services.get_student_report(self.user, self.other_student.id, month=3, year=2025)
        with self.assertRaises(NotFound):
            services.upsert_report(self.user, self.other_student.id, month=3, year=2025, summary="x")
        self.assertEqual(MonthlyReport.objects.count(), 0)

    def test_upsert_idempotent(self):
        first = services.upsert_report(self.user, self.student.id, 3, 2025, summary="Good month")
        second = services.upsert_report(self.user, self.student.id, 3, 2025, summary="Good month")
        self.assertEqual(first.id, second.id)
        self.assertEqual(MonthlyReport.objects.filter(student=self.student).count(), 1)

    def test_upsert_merges_fields(self):
        services.upsert_report(self.user, self.student.id, 3, 2025, summary="Scales", comments="Focused")
        report = services.upsert_report(self.user, self.student.id, 3, 2025, next_month_plan="Sonatina")
        self.assertEqual(report.summary, "Scales")
        self.assertEqual(report.comments, "Focused")
        self.assertEqual(report.next_month_plan, "Sonatina")

        data = services.get_student_report(self.user, self.student.id, month=3, year=2025)
        self.assertEqual(data["report"].id, report.id)


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="api@report.test", password="pass123", full_name="Teacher")
        self.teacher = TeacherProfile.objects.create(user=self.user, hourly_rate=Decimal("100000"))
        self.student = Student.objects.create(teacher=self.teacher, name="S", lesson_rate=Decimal("200000"))
        lesson = Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=_at(2025, 6, 30), duration=60, status=Lesson.STATUS_COMPLETE,
        )
        Attendance.objects.create(lesson=lesson, date=lesson.date, status=Attendance.STATUS_PRESENT)
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_get_report(self):
        url = f"/api/reports/students/{self.student.id}"
        response = self.client.get(url, {"month": 6, "year": 2025})
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.data["report"])
        self.assertEqual(response.data["totalSessions"], 1)
        self.assertEqual(response.data["totalTuition"], 100000.0)
        self.assertEqual(response.data["weeks"][-1]["week"], 6)
        self.assertEqual(response.data["lessons"][0]["attendance"]["status"], "PRESENT")
        self.assertEqual(response.data["student"]["name"], "S")

    def test_get_report_validation(self):
        response = self.client.get(f"/api/reports/students/{self.student.id}", {"month": 0, "year": 2025})
        self.assertEqual(response.status_code, 400)

    def test_put_report(self):
        url = f"/api/reports/students/{self.student.id}"
        response = self.client.put(url, {"month": 6, "year": 2025, "summary": "Arpeggios"}, format="json")
        self.assertEqual(response.status_code, 200)
        response = self.client.put(url, {"month": 6, "year": 2025, "nextMonthPlan": "Recital"}, format="json")
        self.assertEqual(response.data["summary"], "Arpeggios")
        self.assertEqual(response.data["nextMonthPlan"], "Recital")

        response = self.client.put("/api/reports/students/999999", {"month": 6, "year": 2025}, format="json")
        self.assertEqual(response.status_code, 404)
