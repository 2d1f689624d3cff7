"""
Module: builder.output.base

Purpose:
    Common contract for report backends. A renderer turns a ReportModel
    plus a photo repository into the bytes of one finished document.

Key Classes:
    - ExportFormat: Supported output formats (extension, mime type)
    - ReportRenderer: Abstract backend
    - RenderError: Fatal packaging/serialization failure

Used By:
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
    - builder.controller: Renderer registry
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..images import PhotoRepository
    from .report_model import ReportModel


class RenderError(Exception):
    """Raised when a document cannot be assembled or serialized."""
    pass


class ExportFormat(Enum):
    """Output formats, valued by their lowercase name."""

    PDF = "pdf"
    DOCX = "docx"

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def label(self) -> str:
        """Upper-case name used in messages ("PDF", "DOCX")."""
        return self.name

    @classmethod
    def parse(cls, value: str) -> ExportFormat:
        """
        Parse a format name (case-insensitive, leading dot allowed).

        Raises:
            ValueError: If the name is not a supported format
        """
        key = value.strip().lower().lstrip(".")
        try:
            return cls(key)
        except ValueError:
            supported = ", ".join(f.value for f in cls)
            raise ValueError(f"Unsupported export format: {value!r} (expected {supported})") from None


_CONTENT_TYPES = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class ReportRenderer(ABC):
    """
    Abstract report backend.

    Implementations keep all per-document state local to one render()
    call, so a renderer instance may be shared between threads.
    """

    format: ExportFormat

    @abstractmethod
    def render(self, model: ReportModel, photos: PhotoRepository) -> bytes:
        """
        Render a report.

        Args:
            model: Report snapshot (labels and photo pages already resolved)
            photos: Source of photo bytes

        Returns:
            Complete document bytes

        Raises:
            RenderError: If the document cannot be serialized
        """
