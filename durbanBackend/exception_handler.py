"""DRF exception handler that keeps every error body in the ``{"error": "<message>"}`` shape."""

import logging

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler

from utils.responses import first_error_message


logger = logging.getLogger(__name__)


def json_error_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled exception in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc,
        )
        return Response({"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, NotAuthenticated):
        response.data = {"error": "Authentication required"}
    else:
        response.data = {"error": first_error_message(response.data)}
    return response
