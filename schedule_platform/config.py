"""Configuration management for schedule_platform.

Settings are read from environment variables (and an optional ``.env`` file)
through Pydantic Settings. The API server refuses to start without a
``JWT_SECRET``: constructing :class:`Settings` raises a validation error.

Example:
    >>> from schedule_platform.config import Settings
    >>> settings = Settings(jwt_secret="change-me")
    >>> settings.token_expire_hours
    24
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Runtime environment profiles."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class TokenStore(StrEnum):
    """Where the client keeps its session token."""

    AUTO = "auto"
    FILE = "file"
    KEYRING = "keyring"
    MEMORY = "memory"


class ClientSettings(BaseSettings):
    """Settings needed by the API client and CLI only.

    Attributes:
        api_url: Base URL the client talks to
        token_store: Client token storage backend
        token_file: Token file used by the file token store
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, production, testing)",
    )

    api_url: str = Field("http://localhost:5000", description="Base URL of the API server")
    token_store: TokenStore = Field(TokenStore.AUTO, description="Client token storage backend")
    token_file: Path = Field(
        Path("~/.schedule_platform/token"),
        description="Token file used by the file token store",
    )

    log_level: str = Field("INFO", description="Logging level")
    log_json: bool = Field(False, description="Emit JSON log lines")

    @field_validator("token_file", mode="before")
    @classmethod
    def expand_token_file(cls, v: str | Path) -> Path:
        return Path(v).expanduser()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class Settings(ClientSettings):
    """Server settings with environment variable support.

    Attributes:
        jwt_secret: Signing secret for session tokens (required)
        token_expire_hours: Lifetime of issued tokens
        database_url: Explicit SQLAlchemy URL; built from the ``db_*`` fields when unset
        db_pool_size: Maximum pooled database connections
        upload_dir: Directory holding uploaded images, served at ``/uploads``
    """

    # Auth
    jwt_secret: str = Field(..., description="Secret used to sign session tokens")
    jwt_algorithm: str = Field("HS256", description="Token signing algorithm")
    token_expire_hours: int = Field(24, ge=1, description="Session token lifetime in hours")

    # Database
    database_url: Optional[str] = Field(
        None,
        description="Full SQLAlchemy URL; overrides the individual db_* settings",
    )
    db_host: str = Field("localhost", description="MySQL host")
    db_user: str = Field("root", description="MySQL user")
    db_password: str = Field("", description="MySQL password")
    db_name: str = Field("schedule_db", description="MySQL database name")
    db_port: Optional[int] = Field(None, description="MySQL TCP port")
    db_socket_path: str = Field(
        "/tmp/mysql.sock",
        description="Unix socket used when connecting to localhost without a port",
    )
    db_pool_size: int = Field(10, ge=1, le=100, description="Connection pool size")

    # HTTP server
    host: str = Field("0.0.0.0", description="Listening interface")
    port: int = Field(5000, ge=1, le=65535, description="Listening port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Uploads
    upload_dir: Path = Field(Path("uploads"), description="Where uploaded images are stored")
    max_upload_bytes: int = Field(5 * 1024 * 1024, ge=1, description="Largest accepted image")

    @field_validator("jwt_secret")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        """Reject an empty signing secret."""
        if not v or not v.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return v

    @field_validator("upload_dir", mode="before")
    @classmethod
    def expand_upload_dir(cls, v: str | Path) -> Path:
        return Path(v).expanduser()

    @model_validator(mode="after")
    def apply_environment_profile(self) -> "Settings":
        """Adjust logging for the selected environment."""
        if self.environment == Environment.PRODUCTION:
            self.log_json = True
            if self.log_level == "DEBUG":
                self.log_level = "INFO"
        elif self.environment == Environment.TESTING:
            self.log_level = "ERROR"
            self.log_json = False
        return self

    @property
    def sqlalchemy_url(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.database_url:
            return self.database_url

        credentials = quote_plus(self.db_user)
        if self.db_password:
            credentials += ":" + quote_plus(self.db_password)

        if self.db_port:
            return f"mysql+pymysql://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
        if self.db_host == "localhost":
            return (
                f"mysql+pymysql://{credentials}@localhost/{self.db_name}"
                f"?unix_socket={self.db_socket_path}"
            )
        return f"mysql+pymysql://{credentials}@{self.db_host}/{self.db_name}"

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process.

    Raises:
        pydantic.ValidationError: If ``JWT_SECRET`` is missing or empty
    """
    return Settings()  # type: ignore[call-arg]


@lru_cache
def get_client_settings() -> ClientSettings:
    """Client-side settings; no server secret is needed."""
    return ClientSettings()
