"""
Exception handling for the triage service.

Infrastructure-level errors live here; business rule violations are in
``clinictriage.domain.errors``.
"""

from typing import Any, Dict, Optional


class ClinicTriageException(Exception):
    """Base exception class for the triage service."""

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


class ConfigurationError(ClinicTriageException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class RepositoryError(ClinicTriageException):
    """Raised when a repository operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "REPOSITORY_ERROR", details)


class MessagingServiceUnavailableError(ClinicTriageException):
    """Raised when the messaging service cannot accept messages."""

    def __init__(
        self,
        message: str = "Messaging service is not connected",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "MESSAGING_UNAVAILABLE", details)


class NotificationSendError(ClinicTriageException):
    """Raised when a message could not be delivered to a queue."""

    def __init__(
        self, queue_name: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.queue_name = queue_name
        full_message = f"Failed to publish to '{queue_name}': {message}"
        super().__init__(full_message, "NOTIFICATION_SEND_ERROR", details)
