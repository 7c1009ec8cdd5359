"""Task blueprint: list, create, update and delete."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from services.task_store import ADMIN, TaskStore
from utils.auth import get_current_user, role_required, token_required
from utils.request_validation import (
    TASK_CREATE_SCHEMA,
    TASK_UPDATE_SCHEMA,
    parse_json_request,
    validate,
)

tasks_bp = Blueprint("tasks", __name__)


def _task_store() -> TaskStore:
    return current_app.extensions["task_store"]


@tasks_bp.route("", methods=["GET"])
@token_required
def list_tasks():
    tasks = _task_store().list(get_current_user())
    return jsonify({"data": [task.to_dict() for task in tasks]})


@tasks_bp.route("", methods=["POST"])
@token_required
def create_task():
    payload = validate(TASK_CREATE_SCHEMA, parse_json_request(request))
    task = _task_store().create(get_current_user(), payload)
    return jsonify({"message": "Task created", "data": task.to_dict()}), HTTPStatus.CREATED


@tasks_bp.route("/<task_id>", methods=["PUT"])
@token_required
def update_task(task_id: str):
    payload = validate(TASK_UPDATE_SCHEMA, parse_json_request(request))
    task = _task_store().update(get_current_user(), task_id, payload)
    return jsonify({"message": "Task updated", "data": task.to_dict()})


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@token_required
@role_required(ADMIN)
def delete_task(task_id: str):
    """Admin-only; the store's owner check never runs for other roles."""
    _task_store().delete(get_current_user(), task_id)
    return jsonify({"message": "Task deleted"})
