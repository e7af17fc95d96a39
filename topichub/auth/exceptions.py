"""Auth domain exceptions.

Authentication and authorization related exceptions.
"""

from topichub.core.exceptions import AuthenticationError, AuthorizationError


# Authentication errors (401)
class NotAuthenticatedError(AuthenticationError):
    """Raised when the request carries no usable identity."""

    error_type = "not_authenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class InvalidAdminPasswordError(AuthenticationError):
    """Raised when an admin password does not match the stored hash."""

    error_type = "invalid_admin_password"

    def __init__(self, message: str = "Invalid admin password"):
        super().__init__(message)


# Authorization errors (403)
class UserBannedError(AuthorizationError):
    """Raised when the current user has a ban that has not expired."""

    error_type = "user_banned"

    def __init__(self, message: str = "User is banned"):
        super().__init__(message)


class AdminRequiredError(AuthorizationError):
    """Raised when admin privileges are required."""

    error_type = "admin_required"

    def __init__(self, message: str = "Admin privileges required"):
        super().__init__(message)


class SuperAdminRequiredError(AdminRequiredError):
    """Raised when super admin privileges are required."""

    error_type = "super_admin_required"

    def __init__(self, message: str = "Super admin privileges required"):
        super().__init__(message)
