"""
Core Models Package

Immutable data models for a site-visit record.

All models in this package are frozen dataclasses. The report engine
receives a Visit as a snapshot and never mutates it, so two exports of
different visits can run side by side without sharing state.

| Model | Holds |
|-------|-------|
| `Visit` | Identity fields, background, outline sections, photos |
| `OutlineLine` | One observation / follow-up entry and its bullet flag |
| `Photo` | Caption text and optional pixel size; bytes live in a repository |
"""

from .outline import OutlineLine, parse_outline, format_outline
from .photos import Photo, DEFAULT_ASPECT_RATIO
from .visit import Visit, IDENTITY_FIELDS

__all__ = [
    "OutlineLine",
    "parse_outline",
    "format_outline",
    "Photo",
    "DEFAULT_ASPECT_RATIO",
    "Visit",
    "IDENTITY_FIELDS",
]
