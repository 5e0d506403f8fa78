"""
Earnings tests.
- lesson earns student.lesson_rate unless CANCELLED (0), independent of duration
- March 2025 scenario: COMPLETE 60 + COMPLETE 45 + CANCELLED 60 at 500000
  -> currentMonthEarnings 1000000, currentMonthLoss 500000
- per-student aggregation is order-independent
- no teacher profile -> zeros / empty lists
"""
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from earnings import services
from lessons.models import Lesson
from students.models import Student, TeacherProfile


def _at(y, m, d, hh=10):
    return timezone.make_aware(datetime(y, m, d, hh, 0))


class LessonEarningsTests(TestCase):
    def test_cancelled_earns_nothing(self):
        student = SimpleNamespace(id=1, lesson_rate=Decimal("500000"))
        for status, expected in (
            (Lesson.STATUS_COMPLETE, Decimal("500000")),
            (Lesson.STATUS_PENDING, Decimal("500000")),
            (Lesson.STATUS_CANCELLED, Decimal("0")),
        ):
            lesson = SimpleNamespace(status=status, duration=45, student=student)
            self.assertEqual(services.lesson_earnings(lesson, student), expected)

    def test_duration_does_not_prorate(self):
        student = SimpleNamespace(id=1, lesson_rate=Decimal("200000"))
        short = SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=15, student=student)
        long = SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=480, student=student)
        self.assertEqual(services.lesson_earnings(short), services.lesson_earnings(long))

    def test_aggregate_is_order_independent(self):
        a = SimpleNamespace(id=1, name="An", avatar=None, lesson_rate=Decimal("100"))
        b = SimpleNamespace(id=2, name="Binh", avatar="https://example.com/b.png", lesson_rate=Decimal("300"))
        lessons = [
            SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=60, student=a),
            SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=30, student=b),
            SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=45, student=a),
        ]
        forward = services.aggregate_by_student(lessons)
        backward = services.aggregate_by_student(list(reversed(lessons)))
        self.assertEqual(forward, backward)
        self.assertEqual([row["studentId"] for row in forward], [2, 1])
        self.assertEqual(forward[1]["totalMinutes"], 105)
        self.assertEqual(forward[1]["lessonCount"], 2)
        self.assertEqual(forward[1]["earnings"], Decimal("200"))

    def test_aggregate_ties_broken_by_student_id(self):
        a = SimpleNamespace(id=7, name="G", avatar=None, lesson_rate=Decimal("100"))
        b = SimpleNamespace(id=3, name="H", avatar=None, lesson_rate=Decimal("100"))
        rows = services.aggregate_by_student([
            SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=60, student=a),
            SimpleNamespace(status=Lesson.STATUS_COMPLETE, duration=60, student=b),
        ])
        self.assertEqual([row["studentId"] for row in rows], [3, 7])


class DashboardTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="t@earn.test", password="pass123", full_name="Teacher")
        self.teacher = TeacherProfile.objects.create(user=self.user, hourly_rate=Decimal("300000"))
        self.student = Student.objects.create(teacher=self.teacher, name="S", lesson_rate=Decimal("500000"))
        for day, duration, status in (
            (3, 60, Lesson.STATUS_COMPLETE),
            (10, 45, Lesson.STATUS_COMPLETE),
            (17, 60, Lesson.STATUS_CANCELLED),
        ):
            Lesson.objects.create(
                teacher=self.teacher, student=self.student,
                date=_at(2025, 3, day), duration=duration, status=status,
            )
        # previous month and a pending one: not in current-month totals
        Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=_at(2025, 2, 24), duration=60, status=Lesson.STATUS_COMPLETE,
        )
        Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=_at(2025, 3, 24), duration=60, status=Lesson.STATUS_PENDING,
        )

        other_user = User.objects.create_user(email="o@earn.test", password="pass123", full_name="Other")
        other_teacher = TeacherProfile.objects.create(user=other_user)
        other_student = Student.objects.create(teacher=other_teacher, name="O", lesson_rate=Decimal("999"))
        Lesson.objects.create(
            teacher=other_teacher, student=other_student,
            date=_at(2025, 3, 5), duration=60, status=Lesson.STATUS_COMPLETE,
        )

    def test_march_scenario(self):
        totals = services.dashboard_totals(self.user, today=date(2025, 3, 20))
        self.assertEqual(totals["currentMonthEarnings"], Decimal("1000000"))
        self.assertEqual(totals["currentMonthLoss"], Decimal("500000"))
        self.assertEqual(totals["totalEarnings"], Decimal("1500000"))
        self.assertEqual(totals["hourlyRate"], Decimal("300000"))

    def test_cancelling_moves_rate_from_earnings_to_loss(self):
        before = services.dashboard_totals(self.user, today=date(2025, 3, 20))
        lesson = Lesson.objects.get(student=self.student, date=_at(2025, 3, 10))
        lesson.status = Lesson.STATUS_CANCELLED
        lesson.save()
        after = services.dashboard_totals(self.user, today=date(2025, 3, 20))
        self.assertEqual(before["totalEarnings"] - after["totalEarnings"], Decimal("500000"))
        self.assertEqual(after["currentMonthLoss"] - before["currentMonthLoss"], Decimal("500000"))

    def test_by_student(self):
        rows = services.earnings_by_student(self.user, today=date(2025, 3, 20))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["studentId"], self.student.id)
        self.assertEqual(rows[0]["earnings"], Decimal("1000000"))
        self.assertEqual(rows[0]["totalMinutes"], 105)
        self.assertEqual(rows[0]["lessonCount"], 2)

    def test_today_lessons(self):
        lessons = services.today_lessons(self.user, day=date(2025, 3, 17))
        self.assertEqual(len(lessons), 1)
        self.assertEqual(lessons[0].earnings, Decimal("0"))

        lessons = services.today_lessons(self.user, day=date(2025, 3, 24))
        self.assertEqual(lessons[0].earnings, Decimal("500000"))

    def test_no_teacher_profile(self):
        stranger = User.objects.create_user(email="s@earn.test", password="pass123", full_name="Stranger")
        totals = services.dashboard_totals(stranger, today=date(2025, 3, 20))
        self.assertEqual(set(totals.values()), {Decimal("0")})
        self.assertEqual(services.earnings_by_student(stranger), [])
        self.assertEqual(services.today_lessons(stranger), [])


class EarningsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="api@earn.test", password="pass123", full_name="Teacher")
        self.teacher = TeacherProfile.objects.create(user=self.user, hourly_rate=Decimal("150000"))
        self.student = Student.objects.create(teacher=self.teacher, name="S", lesson_rate=Decimal("250000"))
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_dashboard_returns_numbers(self):
        Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=timezone.now(), duration=60, status=Lesson.STATUS_COMPLETE,
        )
        response = self.client.get("/api/earnings/dashboard")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["totalEarnings"], 250000.0)
        self.assertEqual(response.data["hourlyRate"], 150000.0)

    def test_today_with_date_param(self):
        Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=_at(2025, 3, 3), duration=60, status=Lesson.STATUS_CANCELLED,
        )
        response = self.client.get("/api/earnings/today", {"date": "2025-03-03"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["earnings"], 0.0)

        response = self.client.get("/api/earnings/today", {"date": "not-a-date"})
        self.assertEqual(response.status_code, 400)

    def test_by_student_empty(self):
        response = self.client.get("/api/earnings/by-student")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, [])
