from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.tests.factories import UserFactory


class RegisterViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("authentication:register")

    def test_register(self):
        response = self.client.post(
            self.url,
            {"name": "Musa Dlamini", "email": "musa@example.com", "password": "durban-2025", "role": "mentor"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["email"], "musa@example.com")
        self.assertEqual(response.data["user"]["role"], "mentor")
        self.assertNotIn("password", response.data["user"])

    def test_duplicate_email(self):
        UserFactory(email="musa@example.com")

        response = self.client.post(
            self.url, {"name": "Musa", "email": "MUSA@example.com", "password": "durban-2025"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "User already exists"})

    def test_short_password(self):
        response = self.client.post(
            self.url, {"name": "Musa", "email": "musa@example.com", "password": "short"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data["error"].startswith("password"))

    def test_admin_role_cannot_be_chosen(self):
        response = self.client.post(
            self.url,
            {"name": "Musa", "email": "musa@example.com", "password": "durban-2025", "role": "admin"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LoginViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = UserFactory(email="ayesha@example.com")
        self.url = reverse("authentication:login")

    def test_login_returns_tokens_usable_on_me(self):
        response = self.client.post(
            self.url, {"email": "ayesha@example.com", "password": "defaultpassword"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get(reverse("authentication:me"))
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["id"], str(self.user.id))

    def test_bad_credentials(self):
        response = self.client.post(self.url, {"email": "ayesha@example.com", "password": "wrong"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {"error": "Invalid email or password"})


class MeViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = UserFactory(name="Old Name")
        self.url = reverse("authentication:me")

    def test_requires_authentication(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_profile(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.put(self.url, {"name": "New Name", "role": "admin"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "New Name")
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, "learner")
