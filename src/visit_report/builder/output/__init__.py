"""
Module: builder.output

Purpose:
    Report model and the PDF / DOCX backends that render it.

Key Classes:
    - ReportModel: Backend-agnostic report snapshot
    - ReportRenderer: Abstract backend
    - PdfRenderer: ReportLab backend
    - DocxRenderer: python-docx backend

Key Functions:
    - build_report_model(): Visit -> ReportModel
"""

from .base import ExportFormat, RenderError, ReportRenderer
from .report_model import (
    IdentityField,
    PhotoCaption,
    ReportModel,
    ReportSection,
    build_report_model,
)
from .pdf_renderer import PdfRenderer, RenderPhase
from .docx_renderer import DocxRenderer

__all__ = [
    "ExportFormat",
    "RenderError",
    "ReportRenderer",
    "IdentityField",
    "PhotoCaption",
    "ReportModel",
    "ReportSection",
    "build_report_model",
    "PdfRenderer",
    "RenderPhase",
    "DocxRenderer",
]
