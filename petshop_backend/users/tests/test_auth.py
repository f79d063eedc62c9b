# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()


class RegisterAndLoginTests(TestCase):
    """
    GUARANTEES:
    - Public registration always yields a customer account
    - Login works with email OR username and returns a JWT pair
    - Bad credentials answer 401 with the normalized error body
    """

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_customer_even_if_role_is_sent(self):
        res = self.client.post(
            "/api/auth/register/",
            {
                "email": "Shopper@Example.com",
                "username": "shopper",
                "password": "strong-pass-123",
                "role": "admin",
                "phone": "01700000000",
            },
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username="shopper")
        self.assertEqual(user.role, "customer")
        self.assertFalse(user.is_staff)
        self.assertEqual(user.phone, "01700000000")

    def test_register_requires_email_or_username(self):
        res = self.client.post("/api/auth/register/", {"password": "strong-pass-123"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_with_username_only_generates_email(self):
        res = self.client.post(
            "/api/auth/register/",
            {"username": "kitty", "password": "strong-pass-123"},
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username="kitty").email, "kitty@local.test")

    def test_duplicate_email_rejected(self):
        User.objects.create_user(email="dup@example.com", password="x")
        res = self.client.post(
            "/api/auth/register/",
            {"email": "DUP@example.com", "password": "strong-pass-123"},
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_with_email_or_username_returns_tokens(self):
        User.objects.create_user(email="pet@example.com", username="petlover", password="secret-123")

        for identifier in ("pet@example.com", "PetLover"):
            res = self.client.post(
                "/api/auth/login/",
                {"identifier": identifier, "password": "secret-123"},
            )
            self.assertEqual(res.status_code, status.HTTP_200_OK)
            self.assertIn("access", res.data)
            self.assertIn("refresh", res.data)
            self.assertEqual(res.data["user"]["email"], "pet@example.com")

    def test_login_with_wrong_password_is_401(self):
        User.objects.create_user(email="pet@example.com", password="secret-123")

        res = self.client.post(
            "/api/auth/login/",
            {"identifier": "pet@example.com", "password": "nope"},
        )
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["error"]["code"], "INVALID_CREDENTIALS")

    def test_inactive_user_cannot_login(self):
        User.objects.create_user(email="gone@example.com", password="secret-123", is_active=False)

        res = self.client.post(
            "/api/auth/login/",
            {"identifier": "gone@example.com", "password": "secret-123"},
        )
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_jwt_create_accepts_email(self):
        User.objects.create_user(email="jwt@example.com", password="secret-123")
        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "jwt@example.com", "password": "secret-123"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)


class MeViewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="me@example.com", password="secret-123")

    def test_me_requires_auth(self):
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_get_and_patch(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["user"]["email"], "me@example.com")

        res = self.client.patch(
            "/api/auth/me/",
            {"first_name": "Mina", "phone": "01800000000", "role": "admin"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "Mina")
        self.assertEqual(self.user.phone, "01800000000")
        self.assertEqual(self.user.role, "customer")

    def test_me_lists_capabilities_for_staff(self):
        manager = User.objects.create_user(email="boss@example.com", password="secret-123", role="manager")
        self.client.force_authenticate(user=manager)

        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        caps = res.data["user"]["capabilities"]
        self.assertIn("orders.manage", caps)
        self.assertNotIn("wallet.adjust", caps)

        self.client.force_authenticate(user=self.user)
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.data["user"]["capabilities"], [])
