"""
Account and profile tests.
- register creates a teacher profile and returns a token
- duplicate email on register / profile update -> 409
- change password checks the current one
"""
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts import services
from accounts.models import User
from core.exceptions import Conflict
from students.models import TeacherProfile


class AuthTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_provisions_teacher(self):
        response = self.client.post(
            "/api/auth/register",
            {"email": "New@Piano.test", "password": "secret1", "fullName": "New Teacher"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertIn("accessToken", response.data)
        self.assertEqual(response.data["user"]["email"], "new@piano.test")
        user = User.objects.get(email="new@piano.test")
        self.assertTrue(TeacherProfile.objects.filter(user=user).exists())

    def test_register_duplicate_email(self):
        User.objects.create_user(email="dup@piano.test", password="secret1", full_name="Dup")
        response = self.client.post(
            "/api/auth/register",
            {"email": "DUP@piano.test", "password": "secret1", "fullName": "Dup 2"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["code"], "conflict")

    def test_register_race_on_unique_email(self):
        # a concurrent registration inserted the row after the pre-check passed
        User.objects.create_user(email="race@piano.test", password="secret1", full_name="First")
        with mock.patch.object(services, "_email_taken", return_value=False):
            with self.assertRaises(Conflict):
                services.register_user("race@piano.test", "secret1", "Second")
        self.assertEqual(User.objects.filter(email="race@piano.test").count(), 1)
        self.assertEqual(TeacherProfile.objects.count(), 0)

    def test_register_short_password(self):
        response = self.client.post(
            "/api/auth/register",
            {"email": "short@piano.test", "password": "123", "fullName": "Short"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_login(self):
        User.objects.create_user(email="login@piano.test", password="secret1", full_name="Login")
        response = self.client.post(
            "/api/auth/login", {"email": "login@piano.test", "password": "secret1"}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("accessToken", response.data)

        response = self.client.post(
            "/api/auth/login", {"email": "login@piano.test", "password": "wrong"}, format="json",
        )
        self.assertEqual(response.status_code, 401)


class ProfileTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="me@piano.test", password="secret1", full_name="Me")
        User.objects.create_user(email="taken@piano.test", password="secret1", full_name="Taken")
        token = AccessToken.for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_profile_without_teacher(self):
        response = self.client.get("/api/profile/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["email"], "me@piano.test")
        self.assertIsNone(response.data["teacher"])

    def test_update_profile_email_conflict(self):
        response = self.client.patch("/api/profile/", {"email": "taken@piano.test"}, format="json")
        self.assertEqual(response.status_code, 409)
        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "me@piano.test")

    def test_update_profile(self):
        response = self.client.patch(
            "/api/profile/", {"fullName": "Renamed", "image": ""}, format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["fullName"], "Renamed")
        self.assertIsNone(response.data["image"])

    def test_update_rate(self):
        response = self.client.put("/api/profile/rate", {"hourlyRate": 320000}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["hourlyRate"], 320000.0)
        self.assertEqual(TeacherProfile.objects.get(user=self.user).hourly_rate, Decimal("320000"))

        response = self.client.get("/api/profile/")
        self.assertEqual(response.data["teacher"]["hourlyRate"], 320000.0)
        self.assertEqual(response.data["teacher"]["studentCount"], 0)

        response = self.client.put("/api/profile/rate", {"hourlyRate": -1}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_change_password(self):
        response = self.client.post(
            "/api/auth/change-password",
            {"currentPassword": "wrong", "newPassword": "secret2"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/api/auth/change-password",
            {"currentPassword": "secret1", "newPassword": "secret2"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("secret2"))

    def test_me_and_logout(self):
        self.assertEqual(self.client.get("/api/auth/me").data["fullName"], "Me")
        self.assertEqual(self.client.post("/api/auth/logout").status_code, 200)
