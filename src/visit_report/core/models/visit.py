"""
Module: visit

Purpose:
    Provides the Visit dataclass - one site-visit record as handed to the
    report engine. The engine treats it as a read-only snapshot: nothing
    in the rendering pipeline mutates or reorders it.

Key Classes:
    - Visit: Identity fields, three text sections, ordered photos

Dependencies:
    - dataclasses (std)
    - datetime (std)
    - .outline: OutlineLine, parse_outline, format_outline
    - .photos: Photo

Used By:
    - builder.controller: Export coordinator
    - builder.output.report_model: Backend-agnostic report snapshot
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .outline import OutlineLine, format_outline, parse_outline
from .photos import Photo

# (attribute name, human-readable label) of the mandatory identity fields
IDENTITY_FIELDS: tuple[tuple[str, str], ...] = (
    ("client_name", "Client name"),
    ("site_name", "Site name"),
    ("project_no", "Project No."),
    ("visit_date", "Visit date"),
    ("prepared_by", "Prepared by"),
)


@dataclass(frozen=True)
class Visit:
    """
    Site visit record (immutable).

    Attributes:
        id: Record identifier
        client_name: Client the visit was for
        site_name: Site visited
        project_no: Project number
        visit_date: Date of the visit (None only for incomplete records)
        prepared_by: Author of the report
        background: Plain background paragraph (hard newlines kept)
        observations: Ordered outline lines
        followups: Ordered outline lines
        photos: Ordered photo references

    Example:
        >>> visit = Visit(id="v1", client_name="Acme", site_name="Plant 1",
        ...               project_no="P-100", visit_date=date(2024, 1, 15),
        ...               prepared_by="J. Doe")
        >>> visit.missing_identity_fields()
        []
    """

    id: str
    client_name: str
    site_name: str
    project_no: str
    visit_date: Optional[date]
    prepared_by: str
    background: str = ""
    observations: tuple[OutlineLine, ...] = ()
    followups: tuple[OutlineLine, ...] = ()
    photos: tuple[Photo, ...] = ()

    def __post_init__(self) -> None:
        """Normalize sequences to tuples so the snapshot stays immutable."""
        for name in ("observations", "followups", "photos"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def missing_identity_fields(self) -> list[str]:
        """
        List the mandatory identity fields that are blank.

        Returns:
            Human-readable labels of missing fields, in declaration order
        """
        missing = []
        for attr, label in IDENTITY_FIELDS:
            value = getattr(self, attr)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(label)
        return missing

    @property
    def photo_count(self) -> int:
        """Number of photos attached to the visit."""
        return len(self.photos)

    def to_dict(self) -> dict:
        """
        Serialize to the external JSON shape.

        Outline sections are written back to single strings using the
        tab-prefix bullet encoding.

        Returns:
            Dict representation
        """
        return {
            "id": self.id,
            "clientName": self.client_name,
            "siteName": self.site_name,
            "projectNo": self.project_no,
            "visitDate": self.visit_date.isoformat() if self.visit_date else "",
            "preparedBy": self.prepared_by,
            "background": self.background,
            "observations": format_outline(self.observations),
            "followups": format_outline(self.followups),
            "photos": [photo.to_dict() for photo in self.photos],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Visit:
        """
        Deserialize from the external JSON shape.

        Args:
            data: Dict with camelCase keys as stored by the editor

        Returns:
            Visit instance

        Raises:
            ValueError: If visitDate is present but not an ISO date
        """
        raw_date = data.get("visitDate") or ""
        # Stored values are either "YYYY-MM-DD" or a full ISO timestamp
        visit_date = date.fromisoformat(raw_date[:10]) if raw_date else None

        return cls(
            id=str(data.get("id") or ""),
            client_name=data.get("clientName") or "",
            site_name=data.get("siteName") or "",
            project_no=data.get("projectNo") or "",
            visit_date=visit_date,
            prepared_by=data.get("preparedBy") or "",
            background=data.get("background") or "",
            observations=parse_outline(data.get("observations")),
            followups=parse_outline(data.get("followups")),
            photos=tuple(Photo.from_dict(p) for p in data.get("photos") or ()),
        )

    def __repr__(self) -> str:
        return (
            f"Visit(id={self.id!r}, client={self.client_name!r}, "
            f"site={self.site_name!r}, photos={len(self.photos)})"
        )
