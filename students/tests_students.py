"""
Roster and ownership tests.
- every student/piece route answers 404 for another teacher's rows
- creating a student provisions the teacher profile
- student detail carries its most recent lessons
"""
from datetime import datetime
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from lessons.models import Lesson, Attendance
from pieces.models import Piece
from students.models import Student, TeacherProfile
from students import services


def _auth(user):
    token = AccessToken.for_user(user)
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


class OwnershipTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@roster.test", password="pass123", full_name="Owner")
        self.teacher = TeacherProfile.objects.create(user=self.owner)
        self.student = Student.objects.create(teacher=self.teacher, name="Mai", lesson_rate=Decimal("400000"))
        self.piece = Piece.objects.create(teacher=self.teacher, title="Minuet in G")
        self.lesson = Lesson.objects.create(
            teacher=self.teacher, student=self.student,
            date=timezone.make_aware(datetime(2025, 3, 3, 10, 0)), duration=60,
        )

        self.intruder = User.objects.create_user(email="intruder@roster.test", password="pass123", full_name="Intruder")
        TeacherProfile.objects.create(user=self.intruder)

    def test_foreign_student_is_not_found(self):
        url = f"/api/students/{self.student.id}"
        self.assertEqual(self.client.get(url, **_auth(self.intruder)).status_code, 404)
        self.assertEqual(
            self.client.patch(url, {"name": "Hacked"}, format="json", **_auth(self.intruder)).status_code, 404,
        )
        self.assertEqual(self.client.delete(url, **_auth(self.intruder)).status_code, 404)
        self.student.refresh_from_db()
        self.assertEqual(self.student.name, "Mai")

    def test_foreign_piece_and_lesson_are_not_found(self):
        self.assertEqual(self.client.get(f"/api/pieces/{self.piece.id}", **_auth(self.intruder)).status_code, 404)
        response = self.client.patch(
            f"/api/lessons/{self.lesson.id}", {"status": "CANCELLED"}, format="json", **_auth(self.intruder),
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "not_found")
        self.assertEqual(
            self.client.post(
                f"/api/lessons/{self.lesson.id}/attendance", {"status": "PRESENT"}, format="json",
                **_auth(self.intruder),
            ).status_code,
            404,
        )
        self.assertEqual(Attendance.objects.count(), 0)
        self.assertEqual(
            self.client.delete(f"/api/lessons/{self.lesson.id}", **_auth(self.intruder)).status_code, 404,
        )
        self.assertTrue(Lesson.objects.filter(id=self.lesson.id).exists())
        self.lesson.refresh_from_db()
        self.assertEqual(self.lesson.status, Lesson.STATUS_PENDING)
        self.assertEqual(
            self.client.get(f"/api/reports/students/{self.student.id}", {"month": 3, "year": 2025},
                            **_auth(self.intruder)).status_code,
            404,
        )

    def test_lists_are_scoped(self):
        response = self.client.get("/api/students/", **_auth(self.intruder))
        self.assertEqual(response.data, [])
        response = self.client.get("/api/lessons/", **_auth(self.intruder))
        self.assertEqual(response.data, [])

        response = self.client.get("/api/students/", **_auth(self.owner))
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["lessonCount"], 1)
        self.assertEqual(response.data[0]["lessonRate"], 400000.0)

    def test_student_detail_has_recent_lessons(self):
        response = self.client.get(f"/api/students/{self.student.id}", **_auth(self.owner))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([l["id"] for l in response.data["lessons"]], [self.lesson.id])

    def test_delete_student_cascades(self):
        response = self.client.delete(f"/api/students/{self.student.id}", **_auth(self.owner))
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Lesson.objects.filter(id=self.lesson.id).exists())

    def test_delete_piece_keeps_lessons(self):
        self.lesson.piece = self.piece
        self.lesson.save()
        response = self.client.delete(f"/api/pieces/{self.piece.id}", **_auth(self.owner))
        self.assertEqual(response.status_code, 204)
        self.lesson.refresh_from_db()
        self.assertIsNone(self.lesson.piece_id)


class RosterServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="new@roster.test", password="pass123", full_name="New")

    def test_create_student_provisions_teacher(self):
        self.assertFalse(TeacherProfile.objects.filter(user=self.user).exists())
        student = services.create_student(self.user, "Lan", lesson_rate=Decimal("250000"))
        self.assertEqual(student.teacher.user_id, self.user.id)
        services.create_student(self.user, "Hoa")
        self.assertEqual(TeacherProfile.objects.filter(user=self.user).count(), 1)

    def test_update_hourly_rate_get_or_create(self):
        teacher = services.update_hourly_rate(self.user, Decimal("350000"))
        self.assertEqual(teacher.hourly_rate, Decimal("350000"))
        teacher = services.update_hourly_rate(self.user, Decimal("0"))
        teacher.refresh_from_db()
        self.assertEqual(teacher.hourly_rate, Decimal("0"))
        self.assertEqual(TeacherProfile.objects.filter(user=self.user).count(), 1)

    def test_create_student_api_validation(self):
        client = APIClient()
        response = client.post("/api/students/", {"lessonRate": 100}, format="json", **_auth(self.user))
        self.assertEqual(response.status_code, 400)
        self.assertIn("name", response.data["errors"])

        response = client.post(
            "/api/students/", {"name": "Lan", "lessonRate": -5}, format="json", **_auth(self.user),
        )
        self.assertEqual(response.status_code, 400)

        response = client.post(
            "/api/students/", {"name": "Lan", "lessonRate": 150000}, format="json", **_auth(self.user),
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["lessonRate"], 150000.0)
        self.assertEqual(response.data["lessonCount"], 0)

    def test_piece_requires_teacher_profile(self):
        client = APIClient()
        response = client.post("/api/pieces/", {"title": "Etude"}, format="json", **_auth(self.user))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["detail"], "Teacher not found")
