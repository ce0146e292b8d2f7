"""Python client for the schedule API."""

from schedule_platform.client.api import ScheduleClient
from schedule_platform.client.errors import (
    ApiError,
    ClientError,
    ConnectionFailedError,
    FormError,
    SessionExpiredError,
)
from schedule_platform.client.storage import (
    FileTokenStorage,
    KeyringTokenStorage,
    MemoryTokenStorage,
    TokenStorage,
    is_token_valid,
    select_token_storage,
)

__all__ = [
    "ScheduleClient",
    "TokenStorage",
    "MemoryTokenStorage",
    "FileTokenStorage",
    "KeyringTokenStorage",
    "select_token_storage",
    "is_token_valid",
    "ClientError",
    "ApiError",
    "FormError",
    "SessionExpiredError",
    "ConnectionFailedError",
]
