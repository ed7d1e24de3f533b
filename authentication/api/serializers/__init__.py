from .auth_serializers import (
    ErrorResponseSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    UserSummarySerializer,
)
from .jwt_serializers import CustomRefreshToken


__all__ = [
    "CustomRefreshToken",
    "ErrorResponseSerializer",
    "LoginRequestSerializer",
    "LoginResponseSerializer",
    "UserRegistrationSerializer",
    "UserSerializer",
    "UserSummarySerializer",
]
