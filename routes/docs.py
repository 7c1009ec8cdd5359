"""Interactive API documentation (OpenAPI 3 document plus Swagger UI)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request, url_for

from utils.request_validation import ROLES

docs_bp = Blueprint("docs", __name__)

SWAGGER_UI_VERSION = "5"

_SWAGGER_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Task Manager API</title>
  <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@{version}/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@{version}/swagger-ui-bundle.js"></script>
  <script>
    window.ui = SwaggerUIBundle({{url: "{spec_url}", dom_id: "#swagger-ui"}});
  </script>
</body>
</html>
"""


def _json_body(schema_name: str) -> dict:
    return {
        "required": True,
        "content": {
            "application/json": {"schema": {"$ref": f"#/components/schemas/{schema_name}"}}
        },
    }


_TASK_ID_PARAM = {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
_BEARER = [{"bearerAuth": []}]


def build_openapi(server_url: str) -> dict:
    """Return the OpenAPI document describing the ``/api/v1`` routes."""

    task_fields = {
        "title": {"type": "string", "minLength": 2, "maxLength": 200},
        "description": {"type": "string", "maxLength": 1000},
        "completed": {"type": "boolean"},
    }
    return {
        "openapi": "3.0.0",
        "info": {"title": "Task Manager API", "version": "1.0.0"},
        "servers": [{"url": server_url}],
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
            },
            "schemas": {
                "RegisterRequest": {
                    "type": "object",
                    "required": ["name", "email", "password", "confirmPassword"],
                    "properties": {
                        "name": {"type": "string", "minLength": 2, "maxLength": 100},
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string", "minLength": 8, "maxLength": 128},
                        "confirmPassword": {"type": "string"},
                        "role": {"type": "string", "enum": list(ROLES)},
                    },
                },
                "LoginRequest": {
                    "type": "object",
                    "required": ["email", "password"],
                    "properties": {
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string"},
                    },
                },
                "Task": {
                    "type": "object",
                    "properties": {
                        "_id": {"type": "string"},
                        **task_fields,
                        "user": {"type": "string"},
                        "createdAt": {"type": "string", "format": "date-time"},
                        "updatedAt": {"type": "string", "format": "date-time"},
                    },
                },
                "TaskCreate": {
                    "type": "object",
                    "required": ["title"],
                    "properties": task_fields,
                },
                "TaskUpdate": {
                    "type": "object",
                    "minProperties": 1,
                    "properties": task_fields,
                },
                "Error": {
                    "type": "object",
                    "properties": {
                        "message": {"type": "string"},
                        "details": {"type": "array", "items": {"type": "string"}},
                    },
                },
            },
        },
        "paths": {
            "/health": {
                "get": {
                    "summary": "Health check",
                    "responses": {
                        "200": {"description": "Healthy"},
                        "503": {"description": "Database not connected"},
                    },
                }
            },
            "/auth/register": {
                "post": {
                    "summary": "Register",
                    "requestBody": _json_body("RegisterRequest"),
                    "responses": {
                        "201": {"description": "User registered"},
                        "400": {"description": "Validation error"},
                        "409": {"description": "Email already registered"},
                    },
                }
            },
            "/auth/login": {
                "post": {
                    "summary": "Login",
                    "requestBody": _json_body("LoginRequest"),
                    "responses": {
                        "200": {"description": "Login successful"},
                        "401": {"description": "Invalid credentials"},
                    },
                }
            },
            "/tasks": {
                "get": {
                    "summary": "Get tasks",
                    "security": _BEARER,
                    "responses": {
                        "200": {"description": "Task list"},
                        "401": {"description": "Unauthorized"},
                    },
                },
                "post": {
                    "summary": "Create task",
                    "security": _BEARER,
                    "requestBody": _json_body("TaskCreate"),
                    "responses": {
                        "201": {"description": "Task created"},
                        "400": {"description": "Validation error"},
                    },
                },
            },
            "/tasks/{id}": {
                "put": {
                    "summary": "Update task",
                    "security": _BEARER,
                    "parameters": [_TASK_ID_PARAM],
                    "requestBody": _json_body("TaskUpdate"),
                    "responses": {
                        "200": {"description": "Task updated"},
                        "400": {"description": "Invalid id or validation error"},
                        "403": {"description": "Forbidden"},
                        "404": {"description": "Not found"},
                    },
                },
                "delete": {
                    "summary": "Delete task (admin only)",
                    "security": _BEARER,
                    "parameters": [_TASK_ID_PARAM],
                    "responses": {
                        "200": {"description": "Task deleted"},
                        "400": {"description": "Invalid id"},
                        "403": {"description": "Forbidden"},
                        "404": {"description": "Not found"},
                    },
                },
            },
        },
    }


@docs_bp.route("", methods=["GET"])
@docs_bp.route("/", methods=["GET"])
def swagger_ui():
    page = _SWAGGER_PAGE.format(
        version=SWAGGER_UI_VERSION, spec_url=url_for("docs.openapi_document")
    )
    return page, 200, {"Content-Type": "text/html; charset=utf-8"}


@docs_bp.route("/openapi.json", methods=["GET"])
def openapi_document():
    return jsonify(build_openapi(request.host_url.rstrip("/") + "/api/v1"))
