"""Task model definition."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId

from .user import isoformat_utc, utcnow

COLLECTION = "tasks"


class Task:
    """A to-do item owned by exactly one user."""

    def __init__(
        self,
        title: str,
        user: ObjectId,
        description: str = "",
        completed: bool = False,
        id: Optional[ObjectId] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        now = utcnow()
        self.id = id
        self.title = title
        self.description = description or ""
        self.completed = bool(completed)
        self.user = user
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    def is_owned_by(self, user_id) -> bool:
        return str(self.user) == str(user_id)

    @classmethod
    def from_document(cls, document: dict) -> "Task":
        return cls(
            id=document["_id"],
            title=document["title"],
            description=document.get("description", ""),
            completed=document.get("completed", False),
            user=document["user"],
            created_at=document.get("created_at"),
            updated_at=document.get("updated_at"),
        )

    def to_document(self) -> dict:
        document = {
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "user": self.user,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.id is not None:
            document["_id"] = self.id
        return document

    def to_dict(self) -> dict:
        """Serialize the task for JSON responses."""

        return {
            "_id": str(self.id) if self.id is not None else None,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "user": str(self.user),
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Task {self.id} {self.title!r}>"
