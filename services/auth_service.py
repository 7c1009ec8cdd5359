"""Registration and login orchestration."""

from __future__ import annotations

import logging
from typing import Optional

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError
from werkzeug.exceptions import Conflict, Unauthorized

from models.user import DEFAULT_ROLE, User, normalize_email
from utils.security import TokenIssuer

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email already registered"
INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Creates accounts and exchanges credentials for bearer tokens."""

    def __init__(self, users, token_issuer: TokenIssuer):
        self.users = users
        self.token_issuer = token_issuer

    def ensure_indexes(self) -> None:
        self.users.create_index(
            [("email", ASCENDING)], name="user_email_uq", unique=True
        )

    def find_by_email(self, email: str) -> Optional[User]:
        document = self.users.find_one({"email": normalize_email(email)})
        return User.from_document(document) if document else None

    def register(
        self, name: str, email: str, password: str, role: Optional[str] = None
    ) -> dict:
        user = User(name=name, email=email, role=role or DEFAULT_ROLE)

        # Fast path only; the unique index decides.
        if self.find_by_email(user.email) is not None:
            raise Conflict(EMAIL_TAKEN)

        user.set_password(password)
        try:
            result = self.users.insert_one(user.to_document())
        except DuplicateKeyError:
            raise Conflict(EMAIL_TAKEN)
        user.id = result.inserted_id

        logger.info("Registered user %s with role %s", user.id, user.role)
        return self._session_for(user)

    def login(self, email: str, password: str) -> dict:
        user = self.find_by_email(email)
        if user is None or not user.check_password(password):
            raise Unauthorized(INVALID_CREDENTIALS)
        logger.info("User %s logged in", user.id)
        return self._session_for(user)

    def _session_for(self, user: User) -> dict:
        token = self.token_issuer.issue({"id": user.id, "role": user.role})
        return {"token": token, "user": user.to_summary()}
