"""
Schema Validation Utilities

Validates raw visit payloads against the packaged JSON schema before they
are turned into models.

Identity fields are checked by the editor when a visit is created; this
module is the same check applied at the file/API boundary, so records
edited outside the editor fail fast with every violation listed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_visit(data: dict[str, Any]) -> None:
    """
    Validate a raw visit payload against visit.schema.json.

    All violations are collected, not just the first one.

    Args:
        data: Visit dictionary (camelCase keys)

    Raises:
        ValidationError: If data is invalid. ``path`` points at the first
            violation; ``errors`` lists all of them.
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Visit must be an object, got {type(data).__name__}")

    schema = _load_schema("visit")
    validator = jsonschema.Draft202012Validator(schema)
    violations = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not violations:
        return

    errors = [_describe(e) for e in violations]
    first = violations[0]
    raise ValidationError(
        f"Visit failed validation: {errors[0]}",
        path=".".join(str(p) for p in first.absolute_path),
        errors=errors,
    )


def _describe(error: jsonschema.ValidationError) -> str:
    """Format one jsonschema error as 'path: message'."""
    path = ".".join(str(p) for p in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message
