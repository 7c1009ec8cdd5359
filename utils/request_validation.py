"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Pattern

from flask import Request
from werkzeug.exceptions import BadRequest

from utils.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^\w\s]).+$")
ROLES = ("USER", "ADMIN")


def parse_json_request(req: Request) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    return data


@dataclass(frozen=True)
class Field:
    """A single field rule inside a request schema."""

    kind: type = str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    allow_empty: bool = False
    pattern: Pattern[str] | None = None
    pattern_message: str | None = None
    choices: tuple | None = None
    matches: str | None = None
    matches_message: str | None = None


@dataclass(frozen=True)
class Schema:
    fields: Mapping[str, Field]
    min_fields: int = 0


def _type_name(kind: type) -> str:
    return {str: "a string", bool: "a boolean"}.get(kind, kind.__name__)


def _check_field(name: str, rule: Field, value: Any, payload: Mapping) -> list[str]:
    # bool is a subclass of int; keep the type check exact for booleans.
    if rule.kind is bool:
        if not isinstance(value, bool):
            return [f'"{name}" must be {_type_name(bool)}']
    elif not isinstance(value, rule.kind) or isinstance(value, bool):
        return [f'"{name}" must be {_type_name(rule.kind)}']

    errors = []
    if rule.kind is str:
        if value == "":
            if not rule.allow_empty:
                return [f'"{name}" is not allowed to be empty']
        else:
            if rule.min_length is not None and len(value) < rule.min_length:
                errors.append(
                    f'"{name}" length must be at least {rule.min_length} characters long'
                )
            if rule.max_length is not None and len(value) > rule.max_length:
                errors.append(
                    f'"{name}" length must be less than or equal to '
                    f"{rule.max_length} characters long"
                )
            if rule.pattern is not None and not rule.pattern.match(value):
                errors.append(rule.pattern_message or f'"{name}" has an invalid format')

    if rule.choices is not None and value not in rule.choices:
        errors.append(f'"{name}" must be one of [{", ".join(rule.choices)}]')

    if rule.matches is not None and value != payload.get(rule.matches):
        errors.append(rule.matches_message or f'"{name}" must match "{rule.matches}"')

    return errors


def validate(schema: Schema, payload: Mapping) -> dict:
    """Check ``payload`` against ``schema``.

    Every violation is collected before raising :class:`ValidationError`.
    On success the payload is returned with unknown keys stripped.
    """

    errors: list[str] = []
    cleaned: dict = {}

    for name, rule in schema.fields.items():
        if name not in payload:
            if rule.required:
                errors.append(f'"{name}" is required')
            continue
        value = payload[name]
        field_errors = _check_field(name, rule, value, payload)
        if field_errors:
            errors.extend(field_errors)
        else:
            cleaned[name] = value

    if schema.min_fields and len(cleaned) < schema.min_fields and not errors:
        errors.append(
            f"Request body must contain at least {schema.min_fields} of: "
            + ", ".join(schema.fields)
        )

    if errors:
        raise ValidationError(errors)
    return cleaned


_EMAIL = Field(
    required=True,
    pattern=EMAIL_RE,
    pattern_message='"email" must be a valid email',
)

REGISTER_SCHEMA = Schema(
    {
        "name": Field(required=True, min_length=2, max_length=100),
        "email": _EMAIL,
        "password": Field(
            required=True,
            min_length=8,
            max_length=128,
            pattern=PASSWORD_RE,
            pattern_message=(
                "Password must include uppercase, lowercase, number, "
                "and special character"
            ),
        ),
        "confirmPassword": Field(
            required=True,
            allow_empty=True,
            matches="password",
            matches_message="Confirm password must match password",
        ),
        "role": Field(choices=ROLES),
    }
)

LOGIN_SCHEMA = Schema(
    {
        "email": _EMAIL,
        "password": Field(required=True, min_length=8),
    }
)

TASK_CREATE_SCHEMA = Schema(
    {
        "title": Field(required=True, min_length=2, max_length=200),
        "description": Field(max_length=1000, allow_empty=True),
        "completed": Field(kind=bool),
    }
)

TASK_UPDATE_SCHEMA = Schema(
    {
        "title": Field(min_length=2, max_length=200),
        "description": Field(max_length=1000, allow_empty=True),
        "completed": Field(kind=bool),
    },
    min_fields=1,
)
