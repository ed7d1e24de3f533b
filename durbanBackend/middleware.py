"""Request middleware for the Durban Smart City API."""

from typing import Callable


class JWTCSRFBypassMiddleware:
    """Exempt Bearer-token requests from CSRF checks.

    API clients authenticate with an ``Authorization: Bearer`` header and send
    no session cookie, so a forged cross-site request cannot carry their
    credentials. Session-authenticated requests (the admin) are still checked.
    Must sit before ``CsrfViewMiddleware``.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request):
        if request.headers.get("Authorization", "").lower().startswith("bearer "):
            request._dont_enforce_csrf_checks = True
        return self.get_response(request)
