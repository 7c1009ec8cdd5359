"""User model definition."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId

from utils.security import hash_password, verify_password

COLLECTION = "users"
ROLES = ("USER", "ADMIN")
DEFAULT_ROLE = "USER"


class User:
    """Represents a registered account stored in the ``users`` collection."""

    def __init__(
        self,
        name: str,
        email: str,
        password_hash: str = "",
        role: str = DEFAULT_ROLE,
        id: Optional[ObjectId] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        now = utcnow()
        self.id = id
        self.name = name
        self.email = normalize_email(email)
        self.password_hash = password_hash
        self.role = role or DEFAULT_ROLE
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return verify_password(password, self.password_hash)

    @classmethod
    def from_document(cls, document: dict) -> "User":
        return cls(
            id=document["_id"],
            name=document.get("name", ""),
            email=document["email"],
            password_hash=document.get("password", ""),
            role=document.get("role", DEFAULT_ROLE),
            created_at=document.get("created_at"),
            updated_at=document.get("updated_at"),
        )

    def to_document(self) -> dict:
        document = {
            "name": self.name,
            "email": self.email,
            "password": self.password_hash,
            "role": self.role,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.id is not None:
            document["_id"] = self.id
        return document

    def to_summary(self) -> dict:
        """Public view of the user; never includes the password digest."""

        return {
            "id": str(self.id) if self.id is not None else None,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "createdAt": isoformat_utc(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision MongoDB stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace("+00:00", "Z")
