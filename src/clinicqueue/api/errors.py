from ..domain.errors import (
    ConcurrencyConflictError,
    DomainError,
    InvalidTransitionError,
    QueueEntryNotFoundError,
)


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict = None, code: str = "CONFLICT"):
        super().__init__(code, message, 409, details)


class UnprocessableActionError(APIError):
    def __init__(self, message: str, details: dict = None, code: str = "INVALID_TRANSITION"):
        super().__init__(code, message, 422, details)


# Domain-specific
class QueueEntryNotFoundAPIError(NotFoundError):
    def __init__(self, entry_id: str):
        super().__init__(f"Queue entry not found ({entry_id})", {"entry_id": entry_id})


def from_domain_error(exc: DomainError) -> APIError:
    """Map a domain error to its HTTP representation."""
    if isinstance(exc, InvalidTransitionError):
        return UnprocessableActionError(
            "This action is not available from the current state", exc.details, exc.error_code
        )
    if isinstance(exc, ConcurrencyConflictError):
        return ConflictError("State changed, please refresh", exc.details, exc.error_code)
    if isinstance(exc, QueueEntryNotFoundError):
        return QueueEntryNotFoundAPIError(exc.details.get("entry_id", ""))
    return APIError(exc.error_code or "DOMAIN_ERROR", exc.message, 400, exc.details)
