"""Error taxonomy for the API.

Every error is rendered to the client as ``{"success": false, "message": ...}``
with the status code carried by the exception.
"""


class ScheduleError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ScheduleError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(ScheduleError):
    """Missing credentials (401) or an invalid/expired token (403)."""

    status_code = 401


class PermissionDeniedError(ScheduleError):
    """Caller does not own the resource, or the resource does not exist."""

    status_code = 403


class ConflictError(ScheduleError):
    """Uniqueness violation such as a duplicate email."""

    status_code = 400


class NotFoundError(ScheduleError):
    status_code = 404


class ServerError(ScheduleError):
    status_code = 500
