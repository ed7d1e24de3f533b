from .auth_service import AuthService
from .results import LoginResult, RegisterResult


__all__ = ["AuthService", "LoginResult", "RegisterResult"]
