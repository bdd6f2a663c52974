"""Export module: write reconstructed tables to disk.

Per-table files use the serialisers on :class:`~tablegrid.models.PdfTable`
so file output is byte-identical to ``to_delimited_text()`` / ``to_html()``.

Usage::

    from tablegrid.export import export_table_files
    export_table_files(doc_result, Path("out"), "report", formats=("csv", "html"))
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Sequence

from ..models import PdfTable
from ..pipeline import DocumentResult

log = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "html")


def table_file_stem(stem: str, page_number: int, table: PdfTable) -> str:
    """File name (without suffix) for one table, e.g. ``report_p2_t1``."""
    return f"{stem}_p{page_number}_t{table.table_number}"


def export_table_files(
    doc: DocumentResult,
    out_dir: Path,
    stem: str,
    formats: Sequence[str] = ("csv",),
    separator: str = ",",
) -> List[Path]:
    """Write one file per table and format; return the written paths."""
    unknown = [f for f in formats if f not in EXPORT_FORMATS]
    if unknown:
        raise ValueError(f"Unknown export format(s): {unknown}")

    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for pr in doc.pages:
        for table in pr.tables:
            base = out_dir / table_file_stem(stem, pr.page_number, table)
            if "csv" in formats:
                path = base.with_suffix(".csv")
                # newline="" keeps the CRLF terminators intact
                with open(path, "w", newline="", encoding="utf-8") as f:
                    f.write(table.to_delimited_text(separator))
                written.append(path)
            if "html" in formats:
                path = base.with_suffix(".html")
                path.write_text(table.to_html(), encoding="utf-8")
                written.append(path)
    log.info("Exported %d file(s) to %s", len(written), out_dir)
    return written


def export_document_json(doc: DocumentResult, out_path: Path) -> Path:
    """Write ``doc.to_dict()`` as indented JSON."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(doc.to_dict(), indent=2), encoding="utf-8")
    return out_path


def export_document_summary_csv(doc: DocumentResult, out_path: Path) -> Path:
    """Write one CSV row per table with page, size and dropped counts."""
    fieldnames = [
        "page",
        "table",
        "rows",
        "cols",
        "dropped_fragments",
        "x0",
        "y_bottom",
        "x1",
        "y_top",
    ]
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for pr in doc.pages:
            for t in pr.tables:
                x0, y_bottom, x1, y_top = t.bbox
                writer.writerow(
                    {
                        "page": pr.page_number,
                        "table": t.table_number,
                        "rows": t.num_rows,
                        "cols": t.num_cols,
                        "dropped_fragments": t.dropped_fragments,
                        "x0": f"{x0:.1f}",
                        "y_bottom": f"{y_bottom:.1f}",
                        "x1": f"{x1:.1f}",
                        "y_top": f"{y_top:.1f}",
                    }
                )
    return out_path
