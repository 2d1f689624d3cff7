"""
Module: builder

Purpose:
    Report export pipeline: turns a Visit into a paginated PDF or a
    DOCX document with identical content and numbering.

Key Functions:
    - export_document(): Main entry point for exporting a visit
    - build_report_model(): Shared report snapshot
    - resolve_outline(): Outline labels
    - plan_photo_pages(): Photo grid pagination

Key Classes:
    - ExportConfig: Configuration for exporting
    - ExportFormat: PDF / DOCX
    - PhotoRepository: Abstract photo access

Dependencies:
    - reportlab: PDF backend
    - python-docx: DOCX backend
    - PIL: Photo decoding
    - visit_report.core.models: Visit, OutlineLine, Photo

Used By:
    - visit_report.cli: Command-line export
"""

from .config import ExportConfig
from .numbering import LabelScheme, NumberingConfig, resolve_outline
from .layout import LayoutConfig, plan_photo_pages
from .images import DirectoryPhotoRepository, InMemoryPhotoRepository, PhotoRepository
from .output import ExportFormat, build_report_model
from .controller import (
    ExportError,
    ExportResult,
    build_filename,
    export_document,
    write_export,
)

__all__ = [
    # Config
    "ExportConfig",
    "LayoutConfig",
    "NumberingConfig",
    "LabelScheme",
    # Pipeline steps
    "resolve_outline",
    "plan_photo_pages",
    "build_report_model",
    # Photos
    "PhotoRepository",
    "InMemoryPhotoRepository",
    "DirectoryPhotoRepository",
    # Controller
    "ExportFormat",
    "export_document",
    "build_filename",
    "write_export",
    "ExportResult",
    "ExportError",
]
