"""
Command-line entry point for table reconstruction.
Usage:
    tablegrid report.pdf --out-dir out --format csv --format html --ignore-text "Source:"
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ConfigValidationError, TableConfig
from .export import (
    draw_table_overlay,
    export_document_json,
    export_document_summary_csv,
    export_table_files,
)
from .ingest import IngestError, open_document, render_page
from .pipeline import DocumentResult, run_document

log = logging.getLogger(__name__)

OVERLAY_RESOLUTION = 150


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tablegrid",
        description="Reconstruct tables from the text layer of PDF files",
    )
    parser.add_argument("pdfs", nargs="+", type=Path, help="PDF file(s) to process")
    parser.add_argument(
        "--out-dir", type=Path, default=Path("tables"), help="Output directory"
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=["csv", "html", "json"],
        help="Output format (repeatable, default csv)",
    )
    parser.add_argument(
        "--separator", default=",", help="Cell separator for csv output"
    )
    parser.add_argument(
        "--pages", type=int, nargs="+", help="One-based page numbers (default all)"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=1.5,
        help="Max vertical distance for fragments on one row",
    )
    parser.add_argument(
        "--max-str-length",
        type=int,
        default=30,
        help="Longer fragments do not shape column boundaries",
    )
    parser.add_argument(
        "--ignore-text",
        dest="ignore_texts",
        action="append",
        default=[],
        help="Fragments containing this text do not shape columns (repeatable)",
    )
    parser.add_argument(
        "--no-titles",
        action="store_true",
        help="Disable the title-row column merge",
    )
    parser.add_argument(
        "--overlay",
        action="store_true",
        help="Also write a PNG per page showing tables and column bands",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _write_overlays(pdf_path: Path, doc: DocumentResult, out_dir: Path) -> None:
    scale = OVERLAY_RESOLUTION / 72.0
    pages = [pr for pr in doc.pages if pr.tables]
    if not pages:
        return
    with open_document(pdf_path) as pdf:
        for pr in pages:
            background = render_page(
                pdf.pages[pr.page_number - 1], pr.page_number, OVERLAY_RESOLUTION
            )
            draw_table_overlay(
                page_width=background.width / scale,
                page_height=background.height / scale,
                tables=pr.tables,
                out_path=out_dir / f"{pdf_path.stem}_p{pr.page_number}_overlay.png",
                scale=scale,
                background=background,
            )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = TableConfig(
            threshold=args.threshold,
            max_str_length=args.max_str_length,
            ignore_texts=args.ignore_texts,
            has_titles=not args.no_titles,
        )
    except ConfigValidationError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2

    formats: List[str] = args.formats or ["csv"]
    file_formats = [f for f in formats if f != "json"]
    status = 0
    for pdf_path in args.pdfs:
        stem = pdf_path.stem.replace(" ", "_")
        try:
            doc = run_document(pdf_path, cfg, pages=args.pages)
            if file_formats:
                export_table_files(
                    doc,
                    args.out_dir,
                    stem,
                    formats=file_formats,
                    separator=args.separator,
                )
            if "json" in formats:
                export_document_json(doc, args.out_dir / f"{stem}.json")
            export_document_summary_csv(doc, args.out_dir / f"{stem}_summary.csv")
            if args.overlay:
                _write_overlays(pdf_path, doc, args.out_dir)
        except (IngestError, ValueError) as exc:
            log.error("%s: %s", pdf_path, exc)
            status = 2
            continue

        log.info(
            "%s: %d pages, %d tables -> %s",
            pdf_path.name,
            doc.num_pages,
            doc.total_tables(),
            args.out_dir,
        )
    return status


if __name__ == "__main__":
    raise SystemExit(main())
