class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class WrongSessionError(ValidationError):
    """Raised when a scanned payload is malformed or names another class."""


class ExpiryError(DomainError):
    """Raised when a token or a time window has elapsed."""


class OutsideScheduleError(ExpiryError):
    """Raised when no schedule window of the class covers the current time."""


class DuplicateError(DomainError):
    """Raised when attendance already exists for (student, class, day)."""


class TransientIOError(DomainError):
    """Raised when the data store could not be read or written. Retryable."""


class CameraPermissionError(DomainError):
    """Raised when the camera cannot be opened. Needs user action before retry."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidTransitionError(DomainError):
    """Raised when the capture state machine is driven out of order."""
