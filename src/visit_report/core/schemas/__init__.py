"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import validate_visit, ValidationError

__all__ = [
    "validate_visit",
    "ValidationError",
]
