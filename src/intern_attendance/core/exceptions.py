class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedTime(ValidationError):
    """Raised when a time value cannot be parsed into hour and minute."""


class InvalidSessionTransition(DomainError):
    """Raised when a time is written into a session with a terminal status."""


class RecordNotFound(DomainError):
    """Raised when no attendance record exists for the given id or key."""


class ConcurrentModification(DomainError):
    """Raised when a record keeps changing underneath a session write."""
