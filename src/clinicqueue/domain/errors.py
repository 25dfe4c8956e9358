"""
Domain-specific error types for queue journey rule violations.
"""

from typing import Any, Dict, Optional

from .enums.workflow import QueueStatus


class DomainError(Exception):
    """Base domain error."""

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


class TransitionError(DomainError):
    """Expected, recoverable failure of a queue transition."""


class InvalidTransitionError(TransitionError):
    """The requested action is not available from the current status."""

    def __init__(self, current: QueueStatus, target: QueueStatus) -> None:
        self.current = QueueStatus(current)
        self.target = QueueStatus(target)
        message = (
            f"Transition {self.current.value} -> {self.target.value} is not available "
            "from the current state"
        )
        super().__init__(
            message,
            "INVALID_TRANSITION",
            {"current": self.current.value, "target": self.target.value},
        )


class ConcurrencyConflictError(TransitionError):
    """The stored status changed since the caller read the entry."""

    def __init__(self, entry_id: str, expected_status: Optional[QueueStatus] = None) -> None:
        self.entry_id = entry_id
        self.expected_status = expected_status
        message = f"Queue entry '{entry_id}' changed, please refresh"
        details: Dict[str, Any] = {"id": entry_id}
        if expected_status is not None:
            details["expected_status"] = QueueStatus(expected_status).value
        super().__init__(message, "CONCURRENCY_CONFLICT", details)


class QueueEntryNotFoundError(DomainError):
    """Queue entry not found."""

    def __init__(self, entry_id: str) -> None:
        message = f"Queue entry with ID '{entry_id}' not found"
        super().__init__(message, "QUEUE_ENTRY_NOT_FOUND", {"entry_id": entry_id})
