"""
Module: cli

Purpose:
    Command-line export of a stored visit.
    Reads a visit JSON file, loads photos from a folder (one file per
    photo id), and writes the PDF and/or DOCX report.

Key Functions:
    - main(): Entry point, returns a process exit code

Used By:
    - run_export.py
    - console script "visit-report"
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from visit_report import __version__
from visit_report.builder import (
    DirectoryPhotoRepository,
    ExportConfig,
    ExportError,
    ExportFormat,
    export_document,
    write_export,
)
from visit_report.builder.layout import SUPPORTED_DENSITIES
from visit_report.core.schemas import ValidationError
from visit_report.core.utils import load_visit

logger = logging.getLogger(__name__)

FORMAT_CHOICES = ("pdf", "docx", "both")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="visit-report",
        description="Export a site visit as a PDF and/or DOCX report",
    )
    parser.add_argument("visit", type=Path, help="Path to the visit JSON file")
    parser.add_argument(
        "--photos",
        type=Path,
        help="Folder with one image per photo id (default: <visit folder>/photos)",
    )
    parser.add_argument("--format", choices=FORMAT_CHOICES, default="pdf", help="Output format")
    parser.add_argument(
        "--density",
        type=int,
        choices=SUPPORTED_DENSITIES,
        default=6,
        help="Photos per page",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Folder to write the report(s) to",
    )
    parser.add_argument("--config", type=Path, help="JSON file with export settings")
    parser.add_argument("--brand", help="Organization name for the title bar and footer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ExportConfig.load(args.config) if args.config else ExportConfig()
        if args.brand is not None:
            config = replace(config, brand_name=args.brand)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid export settings: {e}")
        return 2

    try:
        visit = load_visit(args.visit)
    except ValidationError as e:
        logger.error(str(e))
        for detail in e.errors:
            logger.error(f"  {detail}")
        return 2
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {args.visit}: {e}")
        return 2

    photo_dir = args.photos or args.visit.parent / "photos"
    photos = DirectoryPhotoRepository(photo_dir)
    logger.info(f"Reading photos from {photos.root} ({len(photos.available_ids)} files)")

    formats = list(ExportFormat) if args.format == "both" else [ExportFormat.parse(args.format)]
    for fmt in formats:
        try:
            result = export_document(visit, fmt, args.density, photos=photos, config=config)
        except ExportError as e:
            logger.error(str(e))
            return 1
        path = write_export(result, args.output_dir)
        print(path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
