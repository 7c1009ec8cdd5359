"""Tests for the admin seeding script."""

from __future__ import annotations

import mongomock
from pymongo.errors import ServerSelectionTimeoutError

from conftest import auth_headers, build_app
from scripts import seed_admin as seed_script
from scripts.seed_admin import seed_admin


class _CountingClient:
    """mongomock client that counts pings and fails the first one."""

    def __init__(self):
        self._inner = mongomock.MongoClient()
        self.pings = 0
        self.admin = self

    def __getitem__(self, name):
        return self._inner[name]

    def command(self, name):
        self.pings += 1
        if self.pings == 1:
            raise ServerSelectionTimeoutError("connection refused")
        return {"ok": 1.0}

    def close(self):
        pass


def test_seed_creates_admin_who_can_log_in(app, client):
    assert seed_admin(app, "Root", "Root@X.com", "AdminPass123!") == "created"

    response = client.post(
        "/api/v1/auth/login", json={"email": "root@x.com", "password": "AdminPass123!"}
    )

    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == "ADMIN"


def test_seed_promotes_existing_user(app, client, make_user):
    token, _ = make_user("Ann", "ann@x.com")

    assert seed_admin(app, "Ann", "ann@x.com", "NewPass123!") == "updated"

    login = client.post(
        "/api/v1/auth/login", json={"email": "ann@x.com", "password": "NewPass123!"}
    )
    assert login.get_json()["user"]["role"] == "ADMIN"
    admin_token = login.get_json()["token"]
    assert client.get("/api/v1/tasks", headers=auth_headers(admin_token)).status_code == 200


def test_main_reuses_the_factory_connect_thread(monkeypatch, capsys):
    mongo_client = _CountingClient()

    def create_app():
        app = build_app(mongo_client=mongo_client, DB_RETRY_INTERVAL=0.01)
        app.extensions["mongo"].start_background_connect()
        return app

    monkeypatch.setattr(seed_script, "create_app", create_app)
    monkeypatch.setenv("ADMIN_EMAIL", "Root@X.com")

    seed_script.main()

    assert mongo_client.pings == 2
    assert capsys.readouterr().out.strip() == "Admin user created: root@x.com"
    stored = mongo_client["task_manager_test"]["users"].find_one({"email": "root@x.com"})
    assert stored["role"] == "ADMIN"
