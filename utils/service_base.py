"""
Base classes and utilities for the service layer.

Services return a ``ServiceResult`` instead of raising for expected failures
(missing rows, wrong owner, illegal status move). Views map the error code to
an HTTP status through ``ERROR_STATUS_CODES``.

Examples:
    >>> result = service_ok(proposal)
    >>> if result.ok:
    ...     return Response(serializer(result.value).data, 200)

    >>> result = service_err(ErrorCodes.NOT_FOUND, "Service request not found")
    >>> print(result.error)  # "not_found"
    >>> print(result.error_detail)  # "Service request not found"
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code from ``ErrorCodes`` (present if ok=False)
        error_detail: Short human-readable message, safe to show to clients
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """Transform the success value if ok=True, otherwise pass through the error."""
        if self.ok:
            return service_ok(func(self.value))
        return self


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Example:
        >>> request = ServiceRequest.objects.get(id=request_id)
        >>> return service_ok(request)
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (one of ``ErrorCodes``)
        error_detail: Human-readable error message

    Example:
        >>> return service_err(ErrorCodes.NOT_FOUND, "Service request not found")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class ProposalService(BaseService):
            @BaseService.log_performance
            def submit_proposal(self, user, ...):
                self.logger.info("Submitting proposal for request %s", request_id)
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and any errors that occur.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper

    def internal_error(self, operation: str, exc: Exception) -> ServiceResult:
        """Log an unexpected exception with traceback and return a generic failure."""
        self.logger.error(f"Unexpected error during {operation}: {exc}", exc_info=True)
        return service_err(ErrorCodes.INTERNAL_ERROR, "An internal error occurred")


class ErrorCodes:
    """Standard error codes used across services."""

    AUTHENTICATION_REQUIRED = "authentication_required"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    INTERNAL_ERROR = "internal_error"


ERROR_STATUS_CODES = {
    ErrorCodes.AUTHENTICATION_REQUIRED: 401,
    ErrorCodes.PERMISSION_DENIED: 403,
    ErrorCodes.NOT_FOUND: 404,
    ErrorCodes.VALIDATION_ERROR: 400,
    ErrorCodes.CONFLICT: 400,
    ErrorCodes.INTERNAL_ERROR: 500,
}


def status_for_error(error: Optional[str]) -> int:
    return ERROR_STATUS_CODES.get(error, 400)
