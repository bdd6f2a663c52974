"""Pipeline: per-page stage recording and document-level orchestration.

Each page runs two stages::

    extract (text layer → fragments) → reconstruct (fragments → tables)

Every stage produces a :class:`StageResult` with timing and counts.
:func:`run_document` opens the document once, walks pages strictly in
increasing order, and releases the document on every exit path.  Errors
are not swallowed: a :class:`~tablegrid.ingest.DocumentOpenError` or
:class:`~tablegrid.ingest.PageExtractionError` reaches the caller after the
document has been closed.
"""

from __future__ import annotations

import logging
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, Iterator, List, Optional, Sequence

from .config import TableConfig
from .grouping import extract_tables
from .ingest import PdfSource, open_document
from .models import PdfTable
from .textlayer import extract_page_fragments

logger = logging.getLogger("tablegrid.pipeline")

# Per-page stage sequence.
STAGE_ORDER: List[str] = ["extract", "reconstruct"]


# ── Stage result ───────────────────────────────────────────────────────


@dataclass
class StageResult:
    """Outcome record for a single pipeline stage."""

    stage: str
    ran: bool = False
    status: str = "pending"  # "success" | "failed"
    duration_ms: int = 0
    counts: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize stage result to a JSON-compatible dict."""
        d: Dict[str, Any] = {
            "stage": self.stage,
            "ran": self.ran,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }
        if self.counts:
            d["counts"] = self.counts
        if self.error is not None:
            d["error"] = self.error
        return d


@contextmanager
def run_stage(stage: str) -> Generator[StageResult, None, None]:
    """Context manager that wraps a pipeline stage with timing.

    Usage::

        with run_stage("extract") as sr:
            # … do the work …
            sr.counts["fragments"] = 1234

    A stage that exits normally is marked ``"success"``; an exception
    marks it ``"failed"``, records the error, and is re-raised.
    """
    sr = StageResult(stage=stage, ran=True)
    t0 = time.perf_counter()
    try:
        yield sr
        sr.status = "success"
    except Exception as exc:
        sr.status = "failed"
        sr.error = {
            "type": type(exc).__name__,
            "message": str(exc),
            "stack": traceback.format_exc(),
        }
        raise
    finally:
        sr.duration_ms = int((time.perf_counter() - t0) * 1000)


# ── Results ────────────────────────────────────────────────────────────


@dataclass
class PageResult:
    """Tables reconstructed from one page."""

    page_number: int
    tables: List[PdfTable] = field(default_factory=list)
    stages: Dict[str, StageResult] = field(default_factory=dict)
    num_fragments: int = 0

    @property
    def dropped_fragments(self) -> int:
        """Fragments on this page that matched no column band."""
        return sum(t.dropped_fragments for t in self.tables)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to ``{pageNumber, tables}``."""
        return {
            "pageNumber": self.page_number,
            "tables": [t.to_dict() for t in self.tables],
        }

    def to_summary_dict(self) -> Dict[str, Any]:
        """Return a lightweight summary with stage timings and counts."""
        return {
            "page": self.page_number,
            "stages": {n: sr.to_dict() for n, sr in self.stages.items()},
            "counts": {
                "fragments": self.num_fragments,
                "tables": len(self.tables),
                "dropped_fragments": self.dropped_fragments,
            },
        }


@dataclass
class DocumentResult:
    """Per-page results for a whole document."""

    source: Optional[str] = None
    num_pages: int = 0
    pages: List[PageResult] = field(default_factory=list)
    config: Optional[TableConfig] = None

    def tables(self) -> Iterator[PdfTable]:
        """Iterate every table in document order."""
        for pr in self.pages:
            yield from pr.tables

    def total_tables(self) -> int:
        return sum(len(pr.tables) for pr in self.pages)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to ``{numPages, pages}``."""
        return {
            "numPages": self.num_pages,
            "pages": [pr.to_dict() for pr in self.pages],
        }

    def to_summary_dict(self) -> Dict[str, Any]:
        """Serialize document result to a summary dict."""
        return {
            "source": self.source,
            "num_pages": self.num_pages,
            "pages_processed": len(self.pages),
            "total_tables": self.total_tables(),
            "config": self.config.to_dict() if self.config else None,
            "pages": [pr.to_summary_dict() for pr in self.pages],
        }


# ── Page runner ────────────────────────────────────────────────────────


def extract_page(
    page: "pdfplumber.page.Page",
    page_number: int,
    cfg: TableConfig | None = None,
) -> PageResult:
    """Run both stages on an already-opened pdfplumber Page."""
    if cfg is None:
        cfg = TableConfig()

    pr = PageResult(page_number=page_number)

    with run_stage("extract") as sr_ext:
        fpr = extract_page_fragments(page, page_number, cfg)
        sr_ext.counts = dict(fpr.diagnostics)
    pr.stages["extract"] = sr_ext
    pr.num_fragments = len(fpr.fragments)

    with run_stage("reconstruct") as sr_rec:
        pr.tables = extract_tables(fpr.fragments, cfg)
        sr_rec.counts = {
            "tables": len(pr.tables),
            "dropped_fragments": pr.dropped_fragments,
        }
    pr.stages["reconstruct"] = sr_rec

    logger.debug(
        "page %d: %d fragments -> %d tables",
        page_number,
        pr.num_fragments,
        len(pr.tables),
    )
    return pr


def _source_label(source: PdfSource) -> Optional[str]:
    if isinstance(source, (str, Path)):
        return str(source)
    return None


# ── Document-level runner ──────────────────────────────────────────────


def run_document(
    source: PdfSource,
    cfg: TableConfig | None = None,
    pages: Sequence[int] | None = None,
    password: Optional[str] = None,
) -> DocumentResult:
    """Reconstruct the tables of every page of *source*.

    Parameters
    ----------
    source : path, bytes or binary file object
        The PDF document.
    cfg : TableConfig, optional
        Reconstruction configuration.  Defaults to ``TableConfig()``.
    pages : sequence of int, optional
        One-based page numbers.  ``None`` = all pages.  Pages are always
        processed in increasing order.
    password : str, optional
        Password for encrypted documents.

    Raises
    ------
    DocumentOpenError
        The document cannot be opened.
    PageExtractionError
        A page's text layer cannot be read.
    """
    if cfg is None:
        cfg = TableConfig()

    dr = DocumentResult(source=_source_label(source), config=cfg)
    with open_document(source, password=password) as pdf:
        dr.num_pages = len(pdf.pages)
        if pages is None:
            numbers = list(range(1, dr.num_pages + 1))
        else:
            numbers = sorted(set(pages))
            bad = [n for n in numbers if not 1 <= n <= dr.num_pages]
            if bad:
                raise ValueError(
                    f"page numbers {bad} out of range 1..{dr.num_pages}"
                )
        for number in numbers:
            dr.pages.append(extract_page(pdf.pages[number - 1], number, cfg))

    logger.info(
        "run_document: %d pages, %d tables",
        len(dr.pages),
        dr.total_tables(),
    )
    return dr


# ── Convenience facade ─────────────────────────────────────────────────


class PdfDocument:
    """Stateful wrapper around :func:`run_document`.

    Usage::

        doc = PdfDocument({"threshold": 2.0, "ignoreTexts": "Source:"})
        doc.load("report.pdf")
        for table in doc.tables():
            print(table.to_delimited_text())
    """

    def __init__(self, options: TableConfig | Dict[str, Any] | None = None) -> None:
        if isinstance(options, TableConfig):
            self.config = options
        else:
            self.config = TableConfig.from_dict(options or {})
        self.num_pages = 0
        self.pages: List[PageResult] = []

    def load(self, source: PdfSource, password: Optional[str] = None) -> "PdfDocument":
        """Open *source* and reconstruct the tables of every page."""
        result = run_document(source, self.config, password=password)
        self.num_pages = result.num_pages
        self.pages = result.pages
        return self

    def tables(self) -> Iterator[PdfTable]:
        """Iterate every loaded table in document order."""
        for pr in self.pages:
            yield from pr.tables

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numPages": self.num_pages,
            "pages": [pr.to_dict() for pr in self.pages],
        }
