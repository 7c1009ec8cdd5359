"""Tests for the User and Task model helpers."""

from datetime import datetime, timezone

from bson import ObjectId

from models.task import Task
from models.user import User


def test_user_normalizes_email_and_defaults_role():
    user = User(name="Ann", email="  Ann@X.COM ")

    assert user.email == "ann@x.com"
    assert user.role == "USER"


def test_user_password_helpers():
    user = User(name="Ann", email="ann@x.com")
    user.set_password("Abcd1234!")

    assert user.password_hash != "Abcd1234!"
    assert user.check_password("Abcd1234!") is True
    assert user.check_password("Abcd1234?") is False


def test_user_summary_hides_password():
    user = User(
        name="Ann",
        email="ann@x.com",
        password_hash="scrypt:1$salt$hash",
        id=ObjectId(),
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )

    summary = user.to_summary()

    assert summary == {
        "id": str(user.id),
        "name": "Ann",
        "email": "ann@x.com",
        "role": "USER",
        "createdAt": "2024-01-02T03:04:05Z",
    }


def test_user_document_round_trip():
    user = User(name="Ann", email="ann@x.com", password_hash="digest", id=ObjectId())

    restored = User.from_document(user.to_document())

    assert restored.id == user.id
    assert restored.password_hash == "digest"


def test_task_serialization_treats_naive_times_as_utc():
    owner = ObjectId()
    task = Task(
        title="Buy milk",
        user=owner,
        id=ObjectId(),
        created_at=datetime(2024, 1, 2, 3, 4, 5),
    )

    data = task.to_dict()

    assert data["user"] == str(owner)
    assert data["description"] == ""
    assert data["completed"] is False
    assert data["createdAt"] == "2024-01-02T03:04:05Z"
    assert data["updatedAt"] == data["createdAt"]


def test_task_ownership_compares_ids_as_strings():
    owner = ObjectId()
    task = Task(title="Buy milk", user=owner)

    assert task.is_owned_by(str(owner))
    assert not task.is_owned_by(str(ObjectId()))
