"""Authentication blueprint providing register and login endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from services.auth_service import AuthService
from utils.request_validation import (
    LOGIN_SCHEMA,
    REGISTER_SCHEMA,
    parse_json_request,
    validate,
)

auth_bp = Blueprint("auth", __name__)


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new user and return a session token."""
    payload = validate(REGISTER_SCHEMA, parse_json_request(request))

    result = _auth_service().register(
        name=payload["name"],
        email=payload["email"],
        password=payload["password"],
        role=payload.get("role"),
    )
    return jsonify({"message": "User registered", **result}), HTTPStatus.CREATED


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a session token."""
    payload = validate(LOGIN_SCHEMA, parse_json_request(request))

    result = _auth_service().login(payload["email"], payload["password"])
    return jsonify({"message": "Login successful", **result}), HTTPStatus.OK
