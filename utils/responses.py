"""Helpers that turn service outcomes into DRF responses with the ``{"error": ...}`` body."""

from rest_framework.response import Response

from .service_base import ErrorCodes, ServiceResult, status_for_error


def first_error_message(errors) -> str:
    """Flatten DRF serializer errors into one short message."""
    if isinstance(errors, dict):
        for field_name, value in errors.items():
            message = first_error_message(value)
            if field_name in ("non_field_errors", "detail"):
                return message
            return f"{field_name}: {message}"
    if isinstance(errors, (list, tuple)):
        if errors:
            return first_error_message(errors[0])
        return "Invalid input"
    return str(errors)


def error_response(result: ServiceResult) -> Response:
    return Response({"error": result.error_detail}, status=status_for_error(result.error))


def validation_error_response(errors) -> Response:
    return Response(
        {"error": first_error_message(errors)},
        status=status_for_error(ErrorCodes.VALIDATION_ERROR),
    )
