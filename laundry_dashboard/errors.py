"""Exception types raised by the backend client and order pipeline."""


class DashboardError(Exception):
    """Base class for all dashboard failures."""


class AuthenticationError(DashboardError):
    """No bearer token is available, or the login endpoint rejected us."""


class ApiError(DashboardError):
    """The backend answered with a non-success status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
