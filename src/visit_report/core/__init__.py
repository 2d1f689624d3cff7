"""
Visit Report Core Package

Shared data models and utilities for the report engine.

1. **Immutable Data Models**
   - Frozen dataclasses; a Visit is a read-only snapshot for one export

2. **Bullet encoding decoded once**
   - The stored tab / four-space prefix becomes `OutlineLine.is_bullet`
     at the model boundary; renderers never see raw whitespace

3. **Schema validation at the boundary**
   - `validate_visit()` checks raw payloads before they become models
"""

from .models import OutlineLine, Photo, Visit

__all__ = [
    "OutlineLine",
    "Photo",
    "Visit",
]
