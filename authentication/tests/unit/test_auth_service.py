"""
Unit tests for AuthService
"""

import pytest
from django.contrib.auth import get_user_model

from authentication.domain.services.auth_service import AuthService
from marketplace.tests.factories import UserFactory

User = get_user_model()


@pytest.mark.unit
@pytest.mark.django_db
class TestAuthServiceRegister:
    def setup_method(self):
        self.service = AuthService()

    def test_register_normalises_email(self):
        result = self.service.register(name=" Nandi ", email="Nandi@Example.COM", password="s3cure-pass")

        assert result.success
        assert result.user.email == "nandi@example.com"
        assert result.user.name == "Nandi"
        assert result.user.check_password("s3cure-pass")
        assert result.user.role == "learner"

    def test_duplicate_email_is_case_insensitive(self):
        self.service.register(name="Nandi", email="nandi@example.com", password="s3cure-pass")

        result = self.service.register(name="Other", email="NANDI@example.com", password="s3cure-pass")

        assert not result.success
        assert "email" in result.errors
        assert User.objects.filter(email="nandi@example.com").count() == 1


@pytest.mark.unit
@pytest.mark.django_db
class TestAuthServiceLogin:
    def setup_method(self):
        self.service = AuthService()
        self.user = UserFactory(email="kagiso@example.com")

    def test_valid_credentials_issue_tokens(self):
        result = self.service.login("kagiso@example.com", "defaultpassword")

        assert result.success
        assert result.access_token
        assert result.refresh_token
        assert result.user == self.user

    def test_email_lookup_ignores_case(self):
        assert self.service.login("  Kagiso@Example.com ", "defaultpassword").success

    def test_wrong_password(self):
        result = self.service.login("kagiso@example.com", "nope")

        assert not result.success
        assert result.error == "Invalid email or password"

    def test_missing_credentials(self):
        assert self.service.login("", "").error == "Email and password are required"
