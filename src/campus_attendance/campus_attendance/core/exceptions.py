class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials or an access token are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class DuplicateKeyError(DomainError):
    """Raised when a unique column (username, employee_id) already exists."""

    status_code = 409


class InsufficientParkingError(DomainError):
    """An entry batch needs more spaces than are free; nothing was written."""

    status_code = 409


class ParkingFullError(DomainError):
    status_code = 409


class InvalidConfigError(DomainError):
    """Parking configuration would break 0 <= occupied <= total."""


class AlreadyCheckedOutError(DomainError):
    status_code = 409
