"""Database extension and model exports."""

from __future__ import annotations

import logging
import threading

from pymongo import MongoClient
from pymongo.errors import PyMongoError
from pymongo.uri_parser import parse_uri

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "task_manager"

DISCONNECTED = "disconnected"
CONNECTING = "connecting"
CONNECTED = "connected"


class MongoDB:
    """Flask extension owning the MongoDB client and its connection state.

    The client is created lazily by pymongo; :meth:`connect` pings the server
    and creates indexes. When the server is unreachable at startup,
    :meth:`start_background_connect` keeps retrying on a fixed interval so
    the HTTP listener can come up before the database does.
    """

    def __init__(self, app=None, client=None):
        self.client = None
        self.database = None
        self.state = DISCONNECTED
        self.retry_interval = 3.0
        self._on_connect = []
        self._stop = threading.Event()
        self._thread = None
        if app is not None:
            self.init_app(app, client=client)

    def init_app(self, app, client=None) -> None:
        uri = app.config["MONGO_URI"]
        if client is None:
            client = MongoClient(
                uri,
                tz_aware=True,
                connect=False,
                serverSelectionTimeoutMS=app.config.get(
                    "DB_SERVER_SELECTION_TIMEOUT_MS", 2000
                ),
            )
        db_name = app.config.get("MONGO_DB_NAME") or _database_from_uri(uri)

        self.client = client
        self.database = client[db_name]
        self.state = DISCONNECTED
        self.retry_interval = float(app.config.get("DB_RETRY_INTERVAL", 3))
        app.extensions["mongo"] = self

    @property
    def connected(self) -> bool:
        return self.state == CONNECTED

    def collection(self, name: str):
        return self.database[name]

    def on_connect(self, callback) -> None:
        """Register a callable run once the first ping succeeds."""

        self._on_connect.append(callback)

    def connect(self) -> bool:
        """Ping the server once; return whether the database is usable."""

        self.state = CONNECTING
        try:
            self.client.admin.command("ping")
            for callback in self._on_connect:
                callback()
        except PyMongoError as exc:
            self.state = DISCONNECTED
            logger.warning(
                "MongoDB not connected yet. Retrying in %ss... (%s)",
                self.retry_interval,
                exc,
            )
            return False

        self.state = CONNECTED
        logger.info("MongoDB connected")
        return True

    def connect_with_retry(self) -> None:
        while not self._stop.is_set():
            if self.connect():
                return
            self._stop.wait(self.retry_interval)

    def start_background_connect(self) -> threading.Thread:
        self._thread = threading.Thread(
            target=self.connect_with_retry, name="mongo-connect", daemon=True
        )
        self._thread.start()
        return self._thread

    def wait_until_connected(self, timeout: float | None = None) -> bool:
        """Block until the database answers; return whether it did.

        A running background connect thread is joined (bounded by
        ``timeout``) rather than racing it with a second retry loop.
        """

        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout)
        elif not self.connected:
            self.connect_with_retry()
        return self.connected

    def close(self) -> None:
        self._stop.set()
        if self.client is not None:
            self.client.close()
        self.state = DISCONNECTED


def _database_from_uri(uri: str) -> str:
    try:
        parsed = parse_uri(uri)
    except (PyMongoError, ValueError):
        return DEFAULT_DB_NAME
    return parsed.get("database") or DEFAULT_DB_NAME


from .user import User  # noqa: E402,F401
from .task import Task  # noqa: E402,F401

__all__ = ["MongoDB", "User", "Task"]
