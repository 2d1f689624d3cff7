"""
Module: builder.controller

Purpose:
    Orchestrate one report export.
    Validate identity → Resolve labels + plan photos → Render → Wrap

Key Functions:
    - export_document(): Main entry point for exporting a visit
    - build_filename(): Download filename for a visit and format
    - write_export(): Save an ExportResult to a folder

Key Classes:
    - ExportResult: Finished artifact
    - ExportError: The single error callers see

Dependencies:
    - builder.output: Report model and renderers
    - builder.images: Photo repository

Used By:
    - visit_report.cli
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from visit_report.core.models import Visit

from .config import ExportConfig
from .images import PhotoRepository
from .output import (
    DocxRenderer,
    ExportFormat,
    PdfRenderer,
    RenderError,
    ReportRenderer,
    build_report_model,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")

RENDERERS: Dict[ExportFormat, type[ReportRenderer]] = {
    ExportFormat.PDF: PdfRenderer,
    ExportFormat.DOCX: DocxRenderer,
}


class ExportError(Exception):
    """Error during report export."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Finished export (immutable).

    Attributes:
        filename: Suggested download name
        data: Document bytes
        content_type: MIME type of data
        format: Output format
        photo_page_count: Number of planned photo pages
        warnings: Non-fatal planning messages

    Example:
        >>> result = export_document(visit, ExportFormat.PDF, 6, photos=repo)
        >>> result.filename
        'Site_Visit_Report_AcmeCo_Site1_20240115.pdf'
    """

    filename: str
    data: bytes
    content_type: str
    format: ExportFormat
    photo_page_count: int = 0
    warnings: tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.data)


def export_document(
    visit: Visit,
    fmt: Union[ExportFormat, str],
    density: int,
    *,
    photos: PhotoRepository,
    config: Optional[ExportConfig] = None,
) -> ExportResult:
    """
    Export a visit as a PDF or DOCX document.

    Pipeline:
    1. Check the mandatory identity fields
    2. Resolve outline labels and plan photo pages (once)
    3. Render with the backend registered for fmt
    4. Wrap bytes with filename and content type

    Photos that fail to load become placeholders and never fail the
    export.

    Args:
        visit: Visit snapshot (not modified)
        fmt: ExportFormat or its name ("pdf", "docx")
        density: Photos per page (2 or 6)
        photos: Source of photo bytes
        config: Export configuration (defaults to ExportConfig())

    Returns:
        ExportResult

    Raises:
        ExportError: If the visit is incomplete or the document cannot be
            generated
    """
    config = config or ExportConfig()
    start_time = time.perf_counter()

    try:
        fmt = ExportFormat.parse(fmt) if isinstance(fmt, str) else fmt
    except ValueError as e:
        raise ExportError(str(e)) from e

    missing = visit.missing_identity_fields()
    if missing:
        raise ExportError(
            f"Cannot export {fmt.label}: missing required fields: {', '.join(missing)}"
        )

    logger.info(
        f"Exporting {visit!r} as {fmt.label} ({visit.photo_count} photos, {density} per page)"
    )

    try:
        model = build_report_model(visit, density, config)
    except ValueError as e:
        raise ExportError(f"Failed to generate {fmt.label} document: {e}") from e

    for warning in model.photo_layout.warnings:
        logger.info(warning)

    renderer = RENDERERS[fmt]()
    try:
        data = renderer.render(model, photos)
    except RenderError as e:
        logger.error(f"{fmt.label} rendering failed for {visit!r}: {e}")
        raise ExportError(f"Failed to generate {fmt.label} document") from e
    except Exception as e:
        logger.exception(f"Unexpected error rendering {fmt.label} for {visit!r}")
        raise ExportError(f"Failed to generate {fmt.label} document") from e

    result = ExportResult(
        filename=build_filename(visit, fmt, config.filename_prefix),
        data=data,
        content_type=fmt.content_type,
        format=fmt,
        photo_page_count=model.photo_layout.page_count,
        warnings=tuple(model.photo_layout.warnings),
    )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Exported {result.filename} ({result.size} bytes) in {elapsed:.2f}s")
    return result


def build_filename(
    visit: Visit,
    fmt: ExportFormat,
    prefix: str = "Site_Visit_Report",
) -> str:
    """
    Build the download filename.

    Client and site names keep only letters, digits, '_' and '-'.

    Example:
        >>> build_filename(visit, ExportFormat.DOCX)
        'Site_Visit_Report_AcmeCo_Site1_20240115.docx'
    """
    client = _UNSAFE_FILENAME_CHARS.sub("", visit.client_name)
    site = _UNSAFE_FILENAME_CHARS.sub("", visit.site_name)
    date_part = visit.visit_date.strftime("%Y%m%d") if visit.visit_date else ""
    return f"{prefix}_{client}_{site}_{date_part}{fmt.extension}"


def write_export(result: ExportResult, output_dir: Path) -> Path:
    """
    Write an export to output_dir/result.filename.

    Returns:
        Path of the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename
    path.write_bytes(result.data)
    logger.info(f"Wrote {path}")
    return path
