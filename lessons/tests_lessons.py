"""
Lesson lifecycle tests.
- recurring expansion: Mon 2025-01-06, dow=1, 1 month -> 5 lessons (Jan 6..Feb 3)
- month addition clamps (Jan 31 + 1 month stays inside February)
- foreign student / piece -> NotFound, nothing inserted
- partial update, piece detach, hard delete
- attendance upsert keeps one row per lesson
- listings scoped per teacher, empty without a teacher profile
"""
from datetime import date, datetime, time
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from lessons.models import Lesson, Attendance
from lessons import services
from pieces.models import Piece
from students.models import Student, TeacherProfile


def _at(y, m, d, hh=10, mm=0):
    return timezone.make_aware(datetime(y, m, d, hh, mm))


class RecurringDatesTests(TestCase):
    def test_monday_start_one_month(self):
        days = services.recurring_dates(date(2025, 1, 6), 1, 1)
        self.assertEqual(
            days,
            [date(2025, 1, 6), date(2025, 1, 13), date(2025, 1, 20), date(2025, 1, 27), date(2025, 2, 3)],
        )

    def test_first_match_after_start(self):
        """Start Wed 2025-01-08, want Sunday (0) -> first date Jan 12."""
        days = services.recurring_dates(date(2025, 1, 8), 0, 1)
        self.assertEqual(days[0], date(2025, 1, 12))
        self.assertTrue(all(d.weekday() == 6 for d in days))
        self.assertTrue(all(d < date(2025, 2, 8) for d in days))

    def test_end_clamped_to_month_end(self):
        """Jan 31 + 1 month = Feb 28 (exclusive)."""
        days = services.recurring_dates(date(2025, 1, 31), 5, 1)
        self.assertEqual(days, [date(2025, 1, 31), date(2025, 2, 7), date(2025, 2, 14), date(2025, 2, 21)])

    def test_two_months(self):
        days = services.recurring_dates(date(2025, 1, 6), 1, 2)
        self.assertEqual(len(days), 9)
        self.assertEqual(days[-1], date(2025, 3, 3))

    def test_invalid_day_of_week(self):
        with self.assertRaises(ValidationError):
            services.recurring_dates(date(2025, 1, 6), 7, 1)


class LessonServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="t1@lesson.test", password="pass123", full_name="Teacher One")
        self.teacher = TeacherProfile.objects.create(user=self.user, hourly_rate=Decimal("300000"))
        self.student = Student.objects.create(teacher=self.teacher, name="An", lesson_rate=Decimal("500000"))
        self.piece = Piece.objects.create(teacher=self.teacher, title="Für Elise", difficulty=2)

        self.other_user = User.objects.create_user(email="t2@lesson.test", password="pass123", full_name="Teacher Two")
        self.other_teacher = TeacherProfile.objects.create(user=self.other_user)
        self.other_student = Student.objects.create(teacher=self.other_teacher, name="Binh")
        self.other_piece = Piece.objects.create(teacher=self.other_teacher, title="Canon")

    def test_create_lesson_defaults_to_pending(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60)
        self.assertEqual(lesson.status, Lesson.STATUS_PENDING)
        self.assertEqual(lesson.teacher_id, self.teacher.id)
        self.assertIsNone(lesson.piece_id)

    @override_settings(LESSON_DEFAULT_STATUS="COMPLETE")
    def test_create_lesson_default_status_configurable(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60)
        self.assertEqual(lesson.status, Lesson.STATUS_COMPLETE)

    def test_create_lesson_explicit_status_and_piece(self):
        lesson = services.create_lesson(
            self.user, self.student.id, _at(2025, 3, 3), 45,
            piece_id=self.piece.id, status=Lesson.STATUS_COMPLETE,
        )
        self.assertEqual(lesson.status, Lesson.STATUS_COMPLETE)
        self.assertEqual(lesson.piece_id, self.piece.id)

    def test_create_lesson_foreign_student(self):
        with self.assertRaises(NotFound) as ctx:
            services.create_lesson(self.user, self.other_student.id, _at(2025, 3, 3), 60)
        self.assertEqual(str(ctx.exception.detail), "Student not found")
        self.assertEqual(Lesson.objects.count(), 0)

    def test_create_lesson_foreign_piece(self):
        with self.assertRaises(NotFound) as ctx:
            services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60, piece_id=self.other_piece.id)
        self.assertEqual(str(ctx.exception.detail), "Piece not found")
        self.assertEqual(Lesson.objects.count(), 0)

    def test_create_lesson_without_teacher_profile(self):
        stranger = User.objects.create_user(email="x@lesson.test", password="pass123", full_name="X")
        with self.assertRaises(NotFound) as ctx:
            services.create_lesson(stranger, self.student.id, _at(2025, 3, 3), 60)
        self.assertEqual(str(ctx.exception.detail), "Teacher not found")

    def test_duration_bounds(self):
        for duration in (14, 481):
            with self.assertRaises(ValidationError):
                services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), duration)
        services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 15)
        services.create_lesson(self.user, self.student.id, _at(2025, 3, 4), 480)
        self.assertEqual(Lesson.objects.count(), 2)

    def test_create_recurring(self):
        count = services.create_recurring_lessons(
            self.user, self.student.id, date(2025, 1, 6), 1, time(17, 30), 60, 1,
        )
        self.assertEqual(count, 5)
        lessons = list(Lesson.objects.filter(student=self.student).order_by("date"))
        self.assertEqual(len(lessons), 5)
        first = timezone.localtime(lessons[0].date)
        self.assertEqual((first.date(), first.hour, first.minute), (date(2025, 1, 6), 17, 30))
        self.assertTrue(all(l.teacher_id == self.teacher.id for l in lessons))

    def test_create_recurring_foreign_student_inserts_nothing(self):
        with self.assertRaises(NotFound):
            services.create_recurring_lessons(
                self.user, self.other_student.id, date(2025, 1, 6), 1, time(9, 0), 60, 1,
            )
        self.assertEqual(Lesson.objects.count(), 0)

    def test_update_lesson_partial(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60, piece_id=self.piece.id)
        updated = services.update_lesson(
            self.user, lesson.id, status=Lesson.STATUS_CANCELLED, cancel_reason="Sick",
        )
        self.assertEqual(updated.status, Lesson.STATUS_CANCELLED)
        self.assertEqual(updated.cancel_reason, "Sick")
        self.assertEqual(updated.duration, 60)
        self.assertEqual(updated.piece_id, self.piece.id)

        # correction back to COMPLETE is allowed
        updated = services.update_lesson(self.user, lesson.id, status=Lesson.STATUS_COMPLETE)
        self.assertEqual(updated.status, Lesson.STATUS_COMPLETE)

    def test_update_lesson_clears_piece(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60, piece_id=self.piece.id)
        services.update_lesson(self.user, lesson.id, piece_id=None)
        lesson.refresh_from_db()
        self.assertIsNone(lesson.piece_id)

    def test_update_foreign_lesson(self):
        foreign = Lesson.objects.create(
            teacher=self.other_teacher, student=self.other_student, date=_at(2025, 3, 3), duration=60,
        )
        with self.assertRaises(NotFound):
            services.update_lesson(self.user, foreign.id, status=Lesson.STATUS_CANCELLED)
        foreign.refresh_from_db()
        self.assertEqual(foreign.status, Lesson.STATUS_PENDING)

    def test_delete_foreign_lesson(self):
        foreign = Lesson.objects.create(
            teacher=self.other_teacher, student=self.other_student, date=_at(2025, 3, 3), duration=60,
        )
        with self.assertRaises(NotFound):
            services.delete_lesson(self.user, foreign.id)
        self.assertTrue(Lesson.objects.filter(id=foreign.id).exists())

    def test_mark_attendance_foreign_lesson(self):
        foreign = Lesson.objects.create(
            teacher=self.other_teacher, student=self.other_student, date=_at(2025, 3, 3), duration=60,
        )
        with self.assertRaises(NotFound):
            services.mark_attendance(self.user, foreign.id, Attendance.STATUS_PRESENT, actual_min=60)
        self.assertEqual(Attendance.objects.count(), 0)

    def test_delete_lesson(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60)
        Attendance.objects.create(lesson=lesson, date=lesson.date, status=Attendance.STATUS_PRESENT)
        deleted = services.delete_lesson(self.user, lesson.id)
        self.assertEqual(deleted.id, lesson.id)
        self.assertFalse(Lesson.objects.filter(id=lesson.id).exists())
        self.assertEqual(Attendance.objects.count(), 0)

    def test_mark_attendance_upsert(self):
        lesson = services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60)
        first = services.mark_attendance(self.user, lesson.id, Attendance.STATUS_ABSENT, reason="Travel")
        self.assertEqual(first.actual_min, 0)
        self.assertEqual(first.date, lesson.date)

        second = services.mark_attendance(self.user, lesson.id, Attendance.STATUS_PRESENT, actual_min=50)
        self.assertEqual(first.id, second.id)
        self.assertEqual(Attendance.objects.filter(lesson=lesson).count(), 1)
        self.assertEqual(second.status, Attendance.STATUS_PRESENT)
        self.assertEqual(second.actual_min, 50)
        self.assertEqual(second.reason, "Travel")

        lesson.refresh_from_db()
        self.assertEqual(lesson.status, Lesson.STATUS_PENDING)

    def test_listings(self):
        services.create_lesson(self.user, self.student.id, _at(2025, 3, 10), 60)
        services.create_lesson(self.user, self.student.id, _at(2025, 3, 3), 60, status=Lesson.STATUS_COMPLETE)
        services.create_lesson(self.user, self.student.id, _at(2025, 4, 1), 60)
        Lesson.objects.create(
            teacher=self.other_teacher, student=self.other_student, date=_at(2025, 3, 5), duration=60,
        )

        all_lessons = list(services.list_lessons(self.user))
        self.assertEqual(len(all_lessons), 3)
        self.assertEqual([l.date for l in all_lessons], sorted(l.date for l in all_lessons))

        self.assertEqual(services.list_lessons(self.user, status=Lesson.STATUS_COMPLETE).count(), 1)
        self.assertEqual(services.lessons_for_month(self.user, 2025, 3).count(), 2)
        self.assertEqual(services.lessons_in_range(self.user, date(2025, 3, 3), date(2025, 3, 10)).count(), 2)
        # reversed bounds are accepted
        self.assertEqual(services.lessons_in_range(self.user, date(2025, 3, 10), date(2025, 3, 3)).count(), 2)

    def test_listings_without_teacher_profile(self):
        stranger = User.objects.create_user(email="y@lesson.test", password="pass123", full_name="Y")
        self.assertEqual(list(services.list_lessons(stranger)), [])
        self.assertEqual(list(services.lessons_for_month(stranger, 2025, 3)), [])


class LessonApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="api@lesson.test", password="pass123", full_name="Teacher")
        self.teacher = TeacherProfile.objects.create(user=self.user)
        self.student = Student.objects.create(teacher=self.teacher, name="Chi", lesson_rate=Decimal("200000"))
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_requires_auth(self):
        client = APIClient()
        response = client.get("/api/lessons/")
        self.assertEqual(response.status_code, 401)

    def test_create_and_list(self):
        response = self.client.post(
            "/api/lessons/",
            {"studentId": self.student.id, "date": "2025-03-03T10:00:00+07:00", "duration": 60},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["status"], "PENDING")
        self.assertEqual(response.data["student"]["name"], "Chi")
        self.assertIsNone(response.data["attendance"])
        self.assertIsNone(response.data["piece"])

        response = self.client.get("/api/lessons/", {"studentId": self.student.id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

    def test_create_invalid_duration(self):
        response = self.client.post(
            "/api/lessons/",
            {"studentId": self.student.id, "date": "2025-03-03T10:00:00+07:00", "duration": 10},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "validation_error")
        self.assertIn("duration", response.data["errors"])

    def test_create_unknown_student(self):
        response = self.client.post(
            "/api/lessons/",
            {"studentId": 999999, "date": "2025-03-03T10:00:00+07:00", "duration": 60},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "Student not found")

    def test_recurring_endpoint(self):
        response = self.client.post(
            "/api/lessons/recurring",
            {
                "studentId": self.student.id,
                "startDate": "2025-01-06",
                "dayOfWeek": 1,
                "time": "17:00",
                "duration": 45,
                "recurrenceMonths": 1,
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data, {"count": 5})

    @override_settings(TIME_ZONE="Asia/Ho_Chi_Minh")
    def test_recurring_accepts_iso_datetime_start(self):
        # 2025-01-05T20:00Z is Monday Jan 6 in Asia/Ho_Chi_Minh, so Sunday Jan 5 is not included
        response = self.client.post(
            "/api/lessons/recurring",
            {
                "studentId": self.student.id,
                "startDate": "2025-01-05T20:00:00.000Z",
                "dayOfWeek": 0,
                "time": "09:00",
                "duration": 60,
                "recurrenceMonths": 1,
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data, {"count": 4})
        first = Lesson.objects.filter(student=self.student).order_by("date").first()
        self.assertEqual(timezone.localtime(first.date).date(), date(2025, 1, 12))

    def test_recurring_rejects_bad_start_date(self):
        response = self.client.post(
            "/api/lessons/recurring",
            {
                "studentId": self.student.id,
                "startDate": "06/01/2025",
                "dayOfWeek": 1,
                "time": "17:00",
                "duration": 45,
                "recurrenceMonths": 1,
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("startDate", response.data["errors"])

    def test_recurring_rejects_bad_time(self):
        response = self.client.post(
            "/api/lessons/recurring",
            {
                "studentId": self.student.id,
                "startDate": "2025-01-06",
                "dayOfWeek": 1,
                "time": "25:99",
                "duration": 45,
                "recurrenceMonths": 3,
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("time", response.data["errors"])
        self.assertIn("recurrenceMonths", response.data["errors"])

    def test_patch_attendance_delete(self):
        lesson = Lesson.objects.create(
            teacher=self.teacher, student=self.student, date=_at(2025, 3, 3), duration=60,
        )
        response = self.client.patch(f"/api/lessons/{lesson.id}", {"status": "CANCELLED"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "CANCELLED")

        response = self.client.post(
            f"/api/lessons/{lesson.id}/attendance", {"status": "MAKEUP", "actualMin": 30}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["actualMin"], 30)
        self.assertEqual(response.data["lessonId"], lesson.id)

        response = self.client.delete(f"/api/lessons/{lesson.id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], lesson.id)
        self.assertFalse(Lesson.objects.filter(id=lesson.id).exists())

    def test_month_and_range(self):
        Lesson.objects.create(teacher=self.teacher, student=self.student, date=_at(2025, 3, 3), duration=60)
        Lesson.objects.create(teacher=self.teacher, student=self.student, date=_at(2025, 3, 31, 20), duration=60)
        response = self.client.get("/api/lessons/month", {"year": 2025, "month": 3})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

        response = self.client.get("/api/lessons/range", {"from": "2025-03-31", "to": "2025-03-31"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

        response = self.client.get("/api/lessons/month", {"year": 2025, "month": 13})
        self.assertEqual(response.status_code, 400)
