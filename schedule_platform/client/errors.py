class ClientError(Exception):
    """Base class for client-side failures."""


class FormError(ClientError):
    """Input rejected before any request was sent.

    Attributes:
        errors: Field name to message
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(errors.values()))


class ApiError(ClientError):
    """The server answered with ``success: false``."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{message} (HTTP {status_code})")


class SessionExpiredError(ApiError):
    """No usable session: the stored token was missing, expired or rejected with 401.

    The stored token has already been cleared when this is raised; the user
    has to log in again.
    """

    def __init__(self, message: str = "Your session has expired. Please log in again."):
        super().__init__(401, message)


class ConnectionFailedError(ClientError):
    """The server could not be reached."""
