class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a unique login identifier (phone) is already taken."""


class PersistenceError(DomainError):
    """Raised when a store operation fails."""


class UploadError(DomainError):
    """Raised when the image host rejects or fails an upload."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a session lacks permission for an action."""
