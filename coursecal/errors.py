"""Exception types raised by the calendar engine."""

from typing import Optional


class CourseCalError(Exception):
    """Base exception for all calendar engine errors."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(CourseCalError, ValueError):
    """Raised when an input record violates the engine's contract.

    Carries the identifier of the offending record and the name of the
    field that failed, so callers can point the user at the bad data.
    """

    def __init__(self, entity_id: str, field: str, message: str) -> None:
        self.entity_id = entity_id
        self.field = field
        super().__init__(
            message=f"{entity_id}: invalid {field}: {message}",
            detail=message,
        )
