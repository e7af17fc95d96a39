"""App-wide exception hierarchy.

Every failure raised by the directory, catalog and index components is an
AppException subclass carrying its HTTP status code and error type, so the
request layer can translate it without inspecting driver errors.
"""


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


# Validation errors (400)
class InvalidArgumentError(AppException):
    """Raised when a required argument is missing or malformed.

    Always raised before the store is touched.
    """

    status_code = 400
    error_type = "invalid_argument"

    def __init__(self, message: str = "Invalid argument"):
        super().__init__(message)


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


# Authorization errors (403)
class AuthorizationError(AppException):
    """Base class for authorization failures."""

    status_code = 403
    error_type = "authorization_error"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


# Not found errors (404)
class NotFoundError(AppException):
    """Base class for resource not found errors."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


# Conflict errors (409)
class ConflictError(AppException):
    """Raised when a write would violate a uniqueness constraint.

    Only produced on databases without a native upsert, where the
    check-then-insert fallback loses a race.
    """

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


# Storage errors (503)
class StoreError(AppException):
    """Raised when the underlying database fails.

    The original driver exception is chained as ``__cause__``.
    """

    status_code = 503
    error_type = "store_error"

    def __init__(self, message: str = "Storage is unavailable"):
        super().__init__(message)
