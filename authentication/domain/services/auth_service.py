"""
AuthService - Core Authentication Business Logic.

Keeps registration and credential checks out of the views so they can be
unit tested without HTTP.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction

from authentication.api.serializers.jwt_serializers import CustomRefreshToken
from utils.logging_utils import mask_value

from .results import LoginResult, RegisterResult


User = get_user_model()
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service encapsulating registration and login.
    """

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate user with email/password and issue a JWT pair.

        Args:
            email: User email address (case-insensitive)
            password: User password

        Returns:
            LoginResult with authentication status and tokens
        """
        try:
            if not email or not password:
                return LoginResult(success=False, error="Email and password are required")

            user = authenticate(username=email.strip().lower(), password=password)
            if not user:
                logger.info("Login failed for %s", mask_value(email))
                return LoginResult(success=False, error="Invalid email or password")

            return self._generate_login_tokens(user)

        except Exception as e:
            logger.exception(f"Login error for email {mask_value(email)}: {e}")
            return LoginResult(success=False, error="An unexpected error occurred. Please try again later.")

    def _generate_login_tokens(self, user) -> LoginResult:
        """Generate JWT tokens for successful login."""
        refresh = CustomRefreshToken.for_user(user)
        return LoginResult(
            success=True,
            user=user,
            access_token=str(refresh.access_token),
            refresh_token=str(refresh),
            message="Login successful",
        )

    def register(self, name: str, email: str, password: str, role: str = "learner") -> RegisterResult:
        """
        Create a user account. E-mail addresses are stored lower-case and must be unique.

        Validation of field shapes happens in ``UserRegistrationSerializer``; this
        method only enforces uniqueness, which needs the database.
        """
        email = email.strip().lower()
        try:
            with transaction.atomic():
                if User.objects.filter(email=email).exists():
                    return RegisterResult(
                        success=False,
                        error="User with this email already exists",
                        errors={"email": "User with this email already exists"},
                    )
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    name=name.strip(),
                    role=role,
                )
        except IntegrityError:
            return RegisterResult(
                success=False,
                error="User with this email already exists",
                errors={"email": "User with this email already exists"},
            )
        except Exception as e:
            logger.exception(f"Registration error for {mask_value(email)}: {e}")
            return RegisterResult(success=False, error="Something went wrong")

        logger.info("Registered user %s", user.id)
        return RegisterResult(success=True, user=user, message="User registered successfully")
