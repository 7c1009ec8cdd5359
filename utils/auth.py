"""Bearer-token authentication and role gating for view functions."""

from __future__ import annotations

from functools import wraps

from flask import current_app, g, request
from werkzeug.exceptions import Forbidden, Unauthorized

from services.task_store import Requester
from utils.security import InvalidToken, TokenIssuer

TOKEN_MISSING = "Authorization token missing"
TOKEN_INVALID = "Invalid or expired token"


def get_token_issuer() -> TokenIssuer:
    return current_app.extensions["token_issuer"]


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise Unauthorized(TOKEN_MISSING)
    return token.strip()


def authenticate() -> Requester:
    """Verify the request's bearer token and attach the caller to ``g``."""

    token = _bearer_token()
    try:
        claims = get_token_issuer().verify(token)
    except InvalidToken:
        raise Unauthorized(TOKEN_INVALID)

    g.current_user = Requester(id=claims["id"], role=claims["role"])
    return g.current_user


def get_current_user() -> Requester:
    user = g.get("current_user")
    if user is None:
        raise Unauthorized(TOKEN_MISSING)
    return user


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        authenticate()
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: str):
    """Reject authenticated callers whose role is not in ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if get_current_user().role not in roles:
                raise Forbidden("Insufficient permissions")
            return view(*args, **kwargs)

        return wrapper

    return decorator
