"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_visit,
    deserialize_visit,
    load_visit,
    save_visit,
)

__all__ = [
    "serialize_visit",
    "deserialize_visit",
    "load_visit",
    "save_visit",
]
