"""
Serialization Utilities

To/from JSON utilities for visit records.

- `serialize_visit` / `deserialize_visit` convert between the Visit model
  and the editor's camelCase JSON shape
- Validation via schema before deserialization
- Outline sections are decoded into OutlineLines here, at the model
  boundary, and nowhere else
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.visit import Visit
from ..schemas.validator import validate_visit, ValidationError


def serialize_visit(visit: Visit) -> dict[str, Any]:
    """
    Serialize a Visit to a dictionary.

    Args:
        visit: Visit instance to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return visit.to_dict()


def deserialize_visit(data: dict[str, Any], *, validate: bool = True) -> Visit:
    """
    Deserialize a Visit from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first

    Returns:
        Visit instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If visitDate cannot be parsed
    """
    if validate:
        validate_visit(data)
    return Visit.from_dict(data)


def load_visit(path: Path, *, validate: bool = True) -> Visit:
    """
    Load a visit from a JSON file.

    Args:
        path: Path to the .json file
        validate: Whether to validate against the schema first

    Returns:
        Visit instance

    Raises:
        FileNotFoundError: If path does not exist
        ValidationError: If the file is not valid JSON or fails validation
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}", path=str(path)) from e
    return deserialize_visit(data, validate=validate)


def save_visit(visit: Visit, path: Path) -> None:
    """Write a visit to a JSON file (UTF-8, indented)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_visit(visit), f, indent=2, ensure_ascii=False)
