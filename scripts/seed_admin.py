"""Seed an administrator user.

Usage: ``python scripts/seed_admin.py`` with ``MONGO_URI`` and ``JWT_SECRET``
set. ``ADMIN_NAME``, ``ADMIN_EMAIL`` and ``ADMIN_PASSWORD`` override the
defaults below.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from models.user import User, normalize_email, utcnow  # noqa: E402

ADMIN_NAME = "Administrator"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123!"


def seed_admin(app, name: str, email: str, password: str) -> str:
    """Create the admin account, or promote and reset it if it exists."""

    auth_service = app.extensions["auth_service"]
    users = auth_service.users
    email = normalize_email(email)

    existing = auth_service.find_by_email(email)
    if existing is None:
        admin = User(name=name, email=email, role="ADMIN")
        admin.set_password(password)
        users.insert_one(admin.to_document())
        return "created"

    existing.set_password(password)
    users.update_one(
        {"_id": existing.id},
        {
            "$set": {
                "role": "ADMIN",
                "password": existing.password_hash,
                "updated_at": utcnow(),
            }
        },
    )
    return "updated"


def main() -> None:
    app = create_app()
    mongo = app.extensions["mongo"]
    mongo.wait_until_connected()

    email = os.environ.get("ADMIN_EMAIL", ADMIN_EMAIL)
    action = seed_admin(
        app,
        name=os.environ.get("ADMIN_NAME", ADMIN_NAME),
        email=email,
        password=os.environ.get("ADMIN_PASSWORD", ADMIN_PASSWORD),
    )
    mongo.close()
    print(f"Admin user {action}: {normalize_email(email)}")


if __name__ == "__main__":
    main()
