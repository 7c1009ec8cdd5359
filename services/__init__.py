"""Business logic shared by the HTTP blueprints."""

from .auth_service import AuthService
from .task_store import Requester, TaskStore

__all__ = ["AuthService", "Requester", "TaskStore"]
