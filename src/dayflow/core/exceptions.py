class DomainError(Exception):
    """Base exception for business rule violations.

    The message is safe to show to the end user.
    """

    status_code = 400

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    default_message = "Request could not be processed"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    default_message = "Invalid input"


class InvalidDateRangeError(ValidationError):
    default_message = "End date must be on or after start date"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
    default_message = "Invalid email or password"


class UnauthorizedError(DomainError):
    """Raised when an operation is invoked without a resolvable caller identity."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(DomainError):
    """Raised when the current state of a record forbids the action."""

    status_code = 409
    default_message = "Conflicting request"


class AlreadyCheckedInError(ConflictError):
    default_message = "Already checked in today"


class NotCheckedInError(ConflictError):
    default_message = "Please check in first"


class AlreadyCheckedOutError(ConflictError):
    default_message = "Already checked out today"


class OverlappingRequestError(ConflictError):
    default_message = "You have a pending leave request for these dates"


class AlreadyProcessedError(ConflictError):
    default_message = "Leave request has already been processed"


class StorageError(DomainError):
    """Underlying persistence failed; the user only sees the generic message."""

    status_code = 500
    default_message = "A system error occurred, please try again later"
