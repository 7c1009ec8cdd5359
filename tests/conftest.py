"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import mongomock
import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402

DEFAULT_PASSWORD = "Abcd1234!"


class _BaseTestConfig(Config):
    TESTING = True
    MONGO_URI = "mongodb://localhost:27017/task_manager_test"
    MONGO_DB_NAME = None
    JWT_SECRET = "test-secret"
    JWT_EXPIRES_IN = "7d"
    CORS_ORIGINS = "*"


def build_app(mongo_client=None, **overrides) -> Flask:
    """Build an app backed by an in-memory MongoDB, with config overrides."""

    class TestConfig(_BaseTestConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    if mongo_client is None:
        mongo_client = mongomock.MongoClient()
    return create_app(TestConfig, mongo_client=mongo_client)


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = build_app()
    yield application
    application.extensions["mongo"].close()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


def register(
    client: FlaskClient,
    name: str,
    email: str,
    password: str = DEFAULT_PASSWORD,
    role: str | None = None,
):
    payload = {
        "name": name,
        "email": email,
        "password": password,
        "confirmPassword": password,
    }
    if role is not None:
        payload["role"] = role
    return client.post("/api/v1/auth/register", json=payload)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(client: FlaskClient):
    """Register a user and return ``(token, user_summary)``."""

    def _make_user(name: str, email: str, role: str | None = None):
        response = register(client, name, email, role=role)
        assert response.status_code == 201, response.get_json()
        payload = response.get_json()
        return payload["token"], payload["user"]

    return _make_user
