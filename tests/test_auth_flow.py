"""Tests covering registration and login."""

from __future__ import annotations

import logging

import pytest
from flask.testing import FlaskClient

from conftest import DEFAULT_PASSWORD, register


def test_register_returns_token_and_summary(client: FlaskClient, app):
    response = register(client, "Ann", "Ann@X.com")

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["message"] == "User registered"
    assert payload["token"]
    user = payload["user"]
    assert set(user) == {"id", "name", "email", "role", "createdAt"}
    assert user["email"] == "ann@x.com"
    assert user["role"] == "USER"

    claims = app.extensions["token_issuer"].verify(payload["token"])
    assert claims == {"id": user["id"], "role": "USER"}


def test_register_never_stores_plain_password(client: FlaskClient, app):
    register(client, "Ann", "ann@x.com")

    stored = app.extensions["mongo"].collection("users").find_one({"email": "ann@x.com"})
    assert stored["password"] != DEFAULT_PASSWORD
    assert stored["password"].count("$") >= 2


def test_register_with_admin_role(client: FlaskClient):
    response = register(client, "Root", "root@x.com", role="ADMIN")

    assert response.status_code == 201
    assert response.get_json()["user"]["role"] == "ADMIN"


def test_register_rejects_null_role(client: FlaskClient):
    response = client.post(
        "/api/v1/auth/register",
        json={
            "name": "Ann",
            "email": "ann@x.com",
            "password": DEFAULT_PASSWORD,
            "confirmPassword": DEFAULT_PASSWORD,
            "role": None,
        },
    )

    assert response.status_code == 400
    assert response.get_json()["details"] == ['"role" must be a string']


def test_duplicate_email_is_conflict_regardless_of_case(client: FlaskClient):
    assert register(client, "Ann", "ann@x.com").status_code == 201

    response = register(client, "Ann Again", "ANN@x.COM")

    assert response.status_code == 409
    assert response.get_json() == {"message": "Email already registered"}


def test_unique_index_conflict_when_precheck_misses(client: FlaskClient, app, monkeypatch):
    """A racing registration that passes the lookup still hits the index."""

    assert register(client, "Ann", "ann@x.com").status_code == 201
    service = app.extensions["auth_service"]
    monkeypatch.setattr(service, "find_by_email", lambda email: None)

    response = register(client, "Ann", "ann@x.com")

    assert response.status_code == 409
    assert response.get_json()["message"] == "Email already registered"


def test_register_reports_every_violation(client: FlaskClient):
    response = client.post(
        "/api/v1/auth/register",
        json={
            "name": "A",
            "email": "not-an-email",
            "password": "short",
            "confirmPassword": "different",
            "role": "ROOT",
        },
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["message"] == "Validation error"
    details = payload["details"]
    assert '"name" length must be at least 2 characters long' in details
    assert '"email" must be a valid email' in details
    assert "Confirm password must match password" in details
    assert '"role" must be one of [USER, ADMIN]' in details
    assert any(message.startswith('"password"') for message in details)


def test_register_rejects_weak_password(client: FlaskClient):
    response = register(client, "Ann", "ann@x.com", password="abcdefgh1")

    assert response.status_code == 400
    assert response.get_json()["details"] == [
        "Password must include uppercase, lowercase, number, and special character"
    ]


def test_register_strips_unknown_fields(client: FlaskClient, app):
    response = client.post(
        "/api/v1/auth/register",
        json={
            "name": "Ann",
            "email": "ann@x.com",
            "password": DEFAULT_PASSWORD,
            "confirmPassword": DEFAULT_PASSWORD,
            "isSuperuser": True,
        },
    )

    assert response.status_code == 201
    stored = app.extensions["mongo"].collection("users").find_one({"email": "ann@x.com"})
    assert "isSuperuser" not in stored


def test_login_returns_token(client: FlaskClient):
    register(client, "Ann", "ann@x.com")

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "ANN@x.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["message"] == "Login successful"
    assert payload["token"]
    assert payload["user"]["email"] == "ann@x.com"


def test_successful_login_is_logged(client: FlaskClient, caplog):
    user_id = register(client, "Ann", "ann@x.com").get_json()["user"]["id"]

    with caplog.at_level(logging.INFO, logger="services.auth_service"):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ann@x.com", "password": DEFAULT_PASSWORD},
        )

    assert response.status_code == 200
    assert f"User {user_id} logged in" in caplog.text


def test_login_failures_do_not_reveal_which_credential_was_wrong(client: FlaskClient):
    register(client, "Ann", "ann@x.com")

    wrong_password = client.post(
        "/api/v1/auth/login", json={"email": "ann@x.com", "password": "Wrong1234!"}
    )
    unknown_email = client.post(
        "/api/v1/auth/login", json={"email": "nobody@x.com", "password": DEFAULT_PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()
    assert wrong_password.get_json() == {"message": "Invalid email or password"}


@pytest.mark.parametrize(
    "payload, status_code",
    [
        ({"email": "ann@x.com"}, 400),
        ({"password": DEFAULT_PASSWORD}, 400),
        ({"email": "ann@x.com", "password": "short"}, 400),
        ({"email": "ann@x.com", "password": "wrongpassword"}, 401),
    ],
)
def test_login_validation(client: FlaskClient, payload, status_code):
    register(client, "Ann", "ann@x.com")

    response = client.post("/api/v1/auth/login", json=payload)

    assert response.status_code == status_code
