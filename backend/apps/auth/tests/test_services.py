from django.test import TestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.auth.backends import EmailBackend
from apps.auth.services import SessionService
from apps.users.models import Role, User


class EmailBackendTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="ama@example.com",
            email="ama@example.com",
            password="secret123",
            name="Ama",
            role=Role.CUSTOMER,
        )
        self.backend = EmailBackend()

    def test_authenticates_case_insensitively(self):
        user = self.backend.authenticate(None, email=" AMA@example.com ", password="secret123")
        self.assertEqual(user, self.user)

    def test_wrong_password(self):
        self.assertIsNone(self.backend.authenticate(None, email="ama@example.com", password="nope"))

    def test_unknown_email(self):
        self.assertIsNone(
            self.backend.authenticate(None, email="ghost@example.com", password="secret123")
        )

    def test_inactive_user_is_rejected(self):
        self.user.is_active = False
        self.user.save()
        self.assertIsNone(
            self.backend.authenticate(None, email="ama@example.com", password="secret123")
        )

    def test_username_logins_are_ignored(self):
        self.assertIsNone(self.backend.authenticate(None, username="ama@example.com", password="secret123"))


class SessionServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="kofi@example.com", email="kofi@example.com", password="secret123"
        )
        self.service = SessionService()

    def test_logout_blacklists_token(self):
        refresh = RefreshToken.for_user(self.user)
        self.assertIsNone(self.service.logout(str(refresh), self.user.id))
        error = self.service.logout(str(refresh), self.user.id)
        self.assertEqual(error[:2], ("VALIDATION_ERROR", "Invalid token"))

    def test_logout_requires_token(self):
        error = self.service.logout("", self.user.id)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertEqual(error[2], {"refresh": None})

    def test_logout_all_counts_only_new_blacklist_entries(self):
        first = RefreshToken.for_user(self.user)
        RefreshToken.for_user(self.user)
        self.service.logout(str(first), self.user.id)
        result = self.service.logout_all(self.user)
        self.assertEqual(result["tokens_invalidated"], 1)
        self.assertEqual(self.service.logout_all(self.user)["tokens_invalidated"], 0)
