class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicatePunchError(DomainError):
    """Raised when the same punch type was recorded moments ago (debounce)."""


class AuthenticationError(DomainError):
    """Raised when a kiosk PIN does not match an active employee."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""
