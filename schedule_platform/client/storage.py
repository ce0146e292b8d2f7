"""Where the client keeps its session token.

Each backend offers the same three operations (``get``, ``set``, ``remove``).
:func:`select_token_storage` picks one once at startup; nothing else in the
client looks at the platform.
"""

import os
import sys
import time
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import jwt
import keyring
from keyring.errors import PasswordDeleteError

from schedule_platform.config import ClientSettings, TokenStore
from schedule_platform.logging import logger

KEYRING_SERVICE = "schedule_platform"
KEYRING_USERNAME = "session-token"
SECURE_STORE_PLATFORMS = {"darwin", "win32"}


@runtime_checkable
class TokenStorage(Protocol):
    """Persistence for one session token."""

    def get(self) -> Optional[str]:
        ...

    def set(self, token: str) -> None:
        ...

    def remove(self) -> None:
        ...


class MemoryTokenStorage:
    """Keeps the token for the life of the process only."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def remove(self) -> None:
        self._token = None


class FileTokenStorage:
    """Plain file readable only by the current user."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        os.chmod(self.path, 0o600)

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)


class KeyringTokenStorage:
    """The operating system's credential store (Keychain, Credential Locker, ...)."""

    def __init__(self, service: str = KEYRING_SERVICE, username: str = KEYRING_USERNAME):
        self.service = service
        self.username = username

    def get(self) -> Optional[str]:
        return keyring.get_password(self.service, self.username)

    def set(self, token: str) -> None:
        keyring.set_password(self.service, self.username, token)

    def remove(self) -> None:
        try:
            keyring.delete_password(self.service, self.username)
        except PasswordDeleteError:
            pass  # nothing stored


def select_token_storage(settings: ClientSettings, platform: Optional[str] = None) -> TokenStorage:
    """Build the token store for this process.

    An explicit ``token_store`` setting wins. With ``auto`` the OS credential
    store is used on macOS and Windows and a private file elsewhere.
    """
    platform = platform or sys.platform
    choice = settings.token_store
    if choice == TokenStore.AUTO:
        choice = TokenStore.KEYRING if platform in SECURE_STORE_PLATFORMS else TokenStore.FILE

    logger.debug("Using {} token storage", choice.value)
    if choice == TokenStore.KEYRING:
        return KeyringTokenStorage()
    if choice == TokenStore.MEMORY:
        return MemoryTokenStorage()
    return FileTokenStorage(settings.token_file)


def token_expiry(token: str) -> Optional[float]:
    """``exp`` claim of a token, read without checking its signature.

    Returns:
        The expiry as a Unix timestamp, or None if the token has none

    Raises:
        jwt.DecodeError: If the token is not a JWT
    """
    payload = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    exp = payload.get("exp")
    return float(exp) if exp is not None else None


def is_token_valid(storage: TokenStorage, now: Optional[float] = None) -> bool:
    """Local check of the stored token; expired or unreadable tokens are removed."""
    token = storage.get()
    if not token:
        return False

    try:
        exp = token_expiry(token)
    except jwt.InvalidTokenError as e:
        logger.warning("Discarding unreadable session token: {}", e)
        storage.remove()
        return False

    if exp is not None and exp < (now if now is not None else time.time()):
        storage.remove()
        return False
    return True
