"""Pytest configuration and shared fixtures for schedule_platform tests."""

import sys
from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from loguru import logger

from schedule_platform.config import Settings
from schedule_platform.main import create_app

TEST_SECRET = "test-secret-key-0123456789"
PASSWORD = "pw12345678"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# =============================================================================
# Test Configuration
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_loguru():
    """Keep test output quiet: errors only."""
    logger.remove()
    logger.add(sys.stderr, level="ERROR", format="{time} {level} {message}", catch=True)
    yield
    logger.remove()


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "environment": "testing",
        "database_url": f"sqlite:///{tmp_path / 'schedule_test.db'}",
        "upload_dir": tmp_path / "uploads",
        "token_store": "memory",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def app(settings: Settings) -> Generator[FastAPI, None, None]:
    application = create_app(settings)
    yield application
    application.state.database.dispose()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session(app: FastAPI):
    """Direct database access for assertions."""
    with app.state.database.session() as session:
        yield session


# =============================================================================
# User helpers
# =============================================================================


def signup(client: TestClient, name: str, email: str, password: str = PASSWORD):
    return client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})


def login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def make_user(client: TestClient) -> Callable[..., dict]:
    """Register and log in a user; returns id, token and auth headers."""

    def _make_user(name: str = "Alice", email: str = "a@x.com", password: str = PASSWORD) -> dict:
        response = signup(client, name, email, password)
        assert response.status_code == 201, response.text
        token = login(client, email, password).json()["token"]
        return {
            "id": response.json()["userId"],
            "name": name,
            "email": email,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make_user


@pytest.fixture
def alice(make_user) -> dict:
    return make_user("Alice", "a@x.com")


@pytest.fixture
def bob(make_user) -> dict:
    return make_user("Bob", "b@x.com")


def create_todo(client: TestClient, user: dict, content: str = "buy milk", date: str = "2024-01-01", image=None) -> int:
    files = {"image": image} if image else None
    data = {"date": date}
    if content is not None:
        data["content"] = content
    response = client.post("/api/todos", data=data, files=files, headers=user["headers"])
    assert response.status_code == 200, response.text
    return response.json()["todoId"]
