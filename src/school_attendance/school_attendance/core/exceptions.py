class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AttendanceConflictError(ValidationError):
    """Raised when an attendance event is not allowed in the record's current state."""


class NotFoundError(DomainError):
    """Raised when updating a record that does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DatabaseInitError(Exception):
    """Raised when the local database cannot be opened or upgraded."""
