"""
Exception handling for the clinic queue application.

Infrastructure-level failures live here; business rule violations are in
``clinicqueue.domain.errors``.
"""

from typing import Any, Dict, Optional


class ClinicQueueException(Exception):
    """Base exception class for the clinic queue application."""

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


class PersistenceError(ClinicQueueException):
    """Raised when the queue store or journey log is unreachable or failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "PERSISTENCE_ERROR", details)


class AuditWriteError(ClinicQueueException):
    """The status change was stored but its journey step could not be appended."""

    def __init__(
        self,
        entry_id: str,
        step_type: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.entry_id = entry_id
        self.step_type = step_type
        self.cause = cause
        message = f"Journey step '{step_type}' for queue entry '{entry_id}' was not recorded"
        super().__init__(
            message,
            "AUDIT_WRITE_ERROR",
            {"entry_id": entry_id, "step_type": step_type, "cause": repr(cause)},
        )


class ExternalServiceError(ClinicQueueException):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class NotificationDeliveryError(ExternalServiceError):
    """Raised when a notification could not be handed to its transport."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("Notification", message, details)
