"""
Exception handling for ClinicBook.

This module provides custom exception classes for the infrastructure
layers of the application. Business rule violations live in
``clinicbook.domain.errors``.
"""

from typing import Any, Dict, List, Optional


class ClinicBookException(Exception):
    """Base exception class for ClinicBook."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ClinicBookException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class StoreUnavailableError(ClinicBookException):
    """Raised when a store round-trip fails or times out.

    The operation is assumed not to have taken effect, so callers may retry.
    """

    retryable = True

    def __init__(
        self,
        operation: str,
        message: str = "The appointment store is temporarily unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        merged = {"operation": operation, "retryable": True}
        merged.update(details or {})
        super().__init__(message, "STORE_UNAVAILABLE", merged)


class ValidationError(ClinicBookException):
    """Raised when a request fails validation before any store access."""

    def __init__(self, errors: List[str], details: Optional[Dict[str, Any]] = None) -> None:
        self.errors = list(errors)
        merged = {"errors": self.errors}
        merged.update(details or {})
        message = self.errors[0] if self.errors else "Invalid request"
        super().__init__(message, "VALIDATION_ERROR", merged)


class ExternalServiceError(ClinicBookException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class EmailDeliveryError(ExternalServiceError):
    """Raised when the transactional email provider rejects a message."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("EmailJS", message, details)
