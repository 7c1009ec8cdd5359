"""Task persistence scoped by owner and role."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models.task import Task
from models.user import utcnow

ADMIN = "ADMIN"


@dataclass(frozen=True)
class Requester:
    """Identity attached to an authenticated request."""

    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


def parse_task_id(task_id: str) -> ObjectId:
    if not isinstance(task_id, str) or not ObjectId.is_valid(task_id):
        raise BadRequest("Invalid task id")
    return ObjectId(task_id)


def _owner_id(requester: Requester):
    # Tokens carry the id as a string; tasks reference the ObjectId.
    return ObjectId(requester.id) if ObjectId.is_valid(requester.id) else requester.id


class TaskStore:
    """CRUD over the ``tasks`` collection on behalf of a requester.

    Admins see and modify every task; everybody else is limited to the tasks
    they own. Ownership checks read the task and then write it without a
    transaction, so two concurrent writers race and the last write wins.
    """

    def __init__(self, tasks):
        self.tasks = tasks

    def ensure_indexes(self) -> None:
        self.tasks.create_index(
            [("user", ASCENDING), ("created_at", DESCENDING)], name="task_owner_created"
        )

    def list(self, requester: Requester) -> List[Task]:
        query = {} if requester.is_admin else {"user": _owner_id(requester)}
        cursor = self.tasks.find(query).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        return [Task.from_document(document) for document in cursor]

    def create(self, requester: Requester, fields: dict) -> Task:
        task = Task(
            title=fields["title"],
            description=fields.get("description") or "",
            completed=fields.get("completed", False),
            user=_owner_id(requester),
        )
        result = self.tasks.insert_one(task.to_document())
        task.id = result.inserted_id
        return task

    def get(self, task_id: str) -> Task:
        document = self.tasks.find_one({"_id": parse_task_id(task_id)})
        if document is None:
            raise NotFound("Task not found")
        return Task.from_document(document)

    def update(self, requester: Requester, task_id: str, fields: dict) -> Task:
        task = self.get(task_id)
        if not (requester.is_admin or task.is_owned_by(requester.id)):
            raise Forbidden("Not allowed to update this task")

        changes = {}
        if fields.get("title") is not None:
            changes["title"] = fields["title"]
        if fields.get("description") is not None:
            changes["description"] = fields["description"]
        if isinstance(fields.get("completed"), bool):
            changes["completed"] = fields["completed"]
        changes["updated_at"] = utcnow()

        document = self.tasks.find_one_and_update(
            {"_id": task.id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            # Deleted between the read and the write.
            raise NotFound("Task not found")
        return Task.from_document(document)

    def delete(self, requester: Requester, task_id: str) -> None:
        task = self.get(task_id)
        if not (requester.is_admin or task.is_owned_by(requester.id)):
            raise Forbidden("Not allowed to delete this task")
        self.tasks.delete_one({"_id": task.id})
