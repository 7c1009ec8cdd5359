"""HTTP error types shared by services and blueprints."""

from __future__ import annotations

from typing import Iterable

from werkzeug.exceptions import BadRequest


class ValidationError(BadRequest):
    """A 400 error that carries every violated rule, not just the first."""

    def __init__(self, details: Iterable[str], description: str = "Validation error"):
        super().__init__(description)
        self.details = list(details)
