"""Tests for configuration loading."""

import pydantic
import pytest

from schedule_platform.config import ClientSettings, Environment, Settings, TokenStore

DB_ENV_VARS = ["JWT_SECRET", "DATABASE_URL", "DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME", "DB_PORT"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def build(**values) -> Settings:
    values.setdefault("jwt_secret", "secret")
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class TestSecret:
    def test_missing_secret_refuses_to_start(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_blank_secret_is_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            build(jwt_secret="   ")

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-env")
        assert Settings(_env_file=None).jwt_secret == "from-env"  # type: ignore[call-arg]

    def test_client_settings_need_no_secret(self):
        settings = ClientSettings(_env_file=None, api_url="http://example.com:5000/")
        assert settings.api_url == "http://example.com:5000"


class TestDatabaseUrl:
    def test_explicit_url_wins(self):
        settings = build(database_url="sqlite:///x.db", db_port=3306)
        assert settings.sqlalchemy_url == "sqlite:///x.db"
        assert settings.is_sqlite

    def test_tcp_when_port_given(self):
        settings = build(db_user="app", db_password="p@ss", db_port=3306, db_host="db")
        assert settings.sqlalchemy_url == "mysql+pymysql://app:p%40ss@db:3306/schedule_db"

    def test_socket_for_localhost_without_port(self):
        settings = build(db_socket_path="/var/run/mysqld.sock")
        assert settings.sqlalchemy_url == (
            "mysql+pymysql://root@localhost/schedule_db?unix_socket=/var/run/mysqld.sock"
        )
        assert not settings.is_sqlite

    def test_remote_host_without_port(self):
        assert build(db_host="db.internal").sqlalchemy_url == "mysql+pymysql://root@db.internal/schedule_db"


class TestDefaults:
    def test_defaults(self):
        settings = build()
        assert settings.token_expire_hours == 24
        assert settings.port == 5000
        assert settings.db_pool_size == 10
        assert settings.max_upload_bytes == 5 * 1024 * 1024
        assert settings.token_store == TokenStore.AUTO
        assert settings.environment == Environment.DEVELOPMENT

    def test_testing_profile_quiets_logs(self):
        settings = build(environment="testing", log_level="DEBUG")
        assert settings.is_testing
        assert settings.log_level == "ERROR"

    def test_production_profile_uses_json_logs(self):
        settings = build(environment="production", log_level="DEBUG")
        assert settings.is_production
        assert settings.log_json is True
        assert settings.log_level == "INFO"
