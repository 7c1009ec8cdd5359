"""Password hashing and bearer token helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from werkzeug.security import check_password_hash, generate_password_hash


class InvalidToken(Exception):
    """Raised when a bearer token is malformed, forged, or expired."""


def hash_password(password: str) -> str:
    """Return a salted one-way digest of the password."""

    return generate_password_hash(password)


def verify_password(password: str, digest: str) -> bool:
    """Check a plain password against a stored digest.

    Raises ``ValueError`` when the stored digest is not a recognised format.
    """

    if not digest or "$" not in digest:
        raise ValueError("Malformed password digest.")
    return check_password_hash(digest, password)


class TokenIssuer:
    """Signs and verifies JWTs carrying a user id and role."""

    def __init__(self, secret: str, lifetime: timedelta, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self._algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, claims: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "id": str(claims["id"]),
            "role": claims["role"],
            "iat": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Dict[str, str]:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id", "role"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc
        return {"id": payload["id"], "role": payload["role"]}
