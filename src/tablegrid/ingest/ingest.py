"""Ingest stage: PDF acquisition, page metadata, and image rendering.

Centralises PDF opening so that downstream stages and the CLI never call
``pdfplumber.open()`` directly.  :func:`open_document` is the scoped
acquisition used by the pipeline: the handle is released exactly once,
whether page processing succeeds or fails.

Public API
----------
- :func:`open_document`: context manager yielding an open ``pdfplumber.PDF``
- :func:`ingest_pdf`: open + validate a PDF, return a :class:`PdfMeta`
- :func:`render_page`: render an open page to a PIL Image at a given DPI
- :func:`render_page_image`: open a PDF and render one of its pages
- :class:`PdfMeta`: lightweight PDF-level metadata container
- :class:`PageInfo`: per-page dimensions
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterator, List, Optional, Union

import pdfplumber
from PIL import Image

log = logging.getLogger(__name__)

PdfSource = Union[str, Path, bytes, bytearray, IO[bytes]]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class IngestError(Exception):
    """Raised when a PDF cannot be ingested."""


class DocumentOpenError(IngestError):
    """The source document cannot be opened or parsed."""


class PageExtractionError(IngestError):
    """Fragment retrieval failed for one page."""

    def __init__(self, page_number: int, message: str) -> None:
        super().__init__(f"page {page_number}: {message}")
        self.page_number = page_number


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------


@dataclass
class PageInfo:
    """Dimension metadata for a single PDF page."""

    number: int  # one-based page number
    width: float  # points
    height: float  # points

    def to_dict(self) -> dict:
        """Serialize page info to a JSON-compatible dict."""
        return {
            "number": self.number,
            "width": round(self.width, 3),
            "height": round(self.height, 3),
        }


@dataclass
class PdfMeta:
    """PDF-level metadata returned by :func:`ingest_pdf`.

    This is a lightweight descriptor; it does **not** hold the
    ``pdfplumber.PDF`` handle open.
    """

    path: Optional[Path]
    num_pages: int
    pages: List[PageInfo] = field(default_factory=list)
    file_size_bytes: int = 0
    pdf_metadata: dict = field(default_factory=dict)  # PDF info dict

    def page(self, number: int) -> PageInfo:
        """Return :class:`PageInfo` for one-based page *number*."""
        if number < 1:
            raise IndexError(f"page numbers start at 1, got {number}")
        return self.pages[number - 1]

    def to_dict(self) -> dict:
        """Serialize PDF metadata to a JSON-compatible dict."""
        d: dict = {
            "path": str(self.path) if self.path else None,
            "num_pages": self.num_pages,
            "file_size_bytes": self.file_size_bytes,
        }
        if self.pdf_metadata:
            d["pdf_metadata"] = self.pdf_metadata
        d["pages"] = [p.to_dict() for p in self.pages]
        return d


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _validate_pdf_path(pdf_path: Path) -> None:
    """Raise :class:`DocumentOpenError` for missing / empty / wrong-extension files."""
    if not pdf_path.exists():
        raise DocumentOpenError(f"File not found: {pdf_path}")
    if not pdf_path.is_file():
        raise DocumentOpenError(f"Not a file: {pdf_path}")
    if pdf_path.stat().st_size == 0:
        raise DocumentOpenError(f"Empty file: {pdf_path}")
    if pdf_path.suffix.lower() != ".pdf":
        raise DocumentOpenError(f"Not a PDF (suffix={pdf_path.suffix!r}): {pdf_path}")


def _describe(source: PdfSource) -> str:
    if isinstance(source, (str, Path)):
        return Path(source).name
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return "<stream>"


def _coerce_metadata(raw_meta: dict) -> dict:
    """Coerce a PDF info dict to plain strings (some values can be bytes)."""
    pdf_metadata = {}
    for k, v in raw_meta.items():
        if isinstance(v, bytes):
            v = v.decode("utf-8", errors="replace")
        pdf_metadata[str(k)] = str(v) if v is not None else ""
    return pdf_metadata


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@contextmanager
def open_document(
    source: PdfSource,
    password: Optional[str] = None,
) -> Iterator["pdfplumber.PDF"]:
    """Open *source* with pdfplumber and close it when the block exits.

    *source* may be a path, raw PDF bytes, or a binary file object.
    Failures while opening raise :class:`DocumentOpenError`; exceptions
    raised inside the ``with`` block propagate unchanged after the
    document has been closed.
    """
    if isinstance(source, (str, Path)):
        source = Path(source)
        _validate_pdf_path(source)
        stream: Union[Path, IO[bytes]] = source
    elif isinstance(source, (bytes, bytearray)):
        if not source:
            raise DocumentOpenError("Empty PDF byte string")
        stream = io.BytesIO(bytes(source))
    else:
        stream = source

    try:
        pdf = pdfplumber.open(stream, password=password)
    except Exception as exc:
        raise DocumentOpenError(f"Cannot open PDF {_describe(source)}: {exc}") from exc

    try:
        # pdfminer sets is_extractable = False on documents whose
        # permissions forbid text extraction.
        if hasattr(pdf, "doc") and getattr(pdf.doc, "is_extractable", True) is False:
            raise DocumentOpenError(
                f"PDF is password-protected or encrypted "
                f"(text extraction not permitted): {_describe(source)}"
            )
        yield pdf
    finally:
        pdf.close()
        log.debug("Closed %s", _describe(source))


def ingest_pdf(pdf_path: Path | str) -> PdfMeta:
    """Open and validate a PDF, returning a :class:`PdfMeta` descriptor.

    The PDF file handle is **closed** before returning.

    Raises
    ------
    DocumentOpenError
        When the file is missing, empty, or cannot be opened as a PDF.
    """
    pdf_path = Path(pdf_path)
    with open_document(pdf_path) as pdf:
        try:
            pages = [
                PageInfo(number=i, width=float(pg.width), height=float(pg.height))
                for i, pg in enumerate(pdf.pages, start=1)
            ]
            pdf_metadata = _coerce_metadata(pdf.metadata or {})
        except Exception as exc:
            raise DocumentOpenError(f"Cannot read PDF structure: {exc}") from exc

    file_size = pdf_path.stat().st_size
    meta = PdfMeta(
        path=pdf_path.resolve(),
        num_pages=len(pages),
        pages=pages,
        file_size_bytes=file_size,
        pdf_metadata=pdf_metadata,
    )
    log.info(
        "Ingested %s: %d pages, %.1f KB",
        pdf_path.name,
        meta.num_pages,
        file_size / 1024,
    )
    return meta


def render_page(
    page: "pdfplumber.page.Page",
    page_number: int,
    resolution: int = 150,
) -> Image.Image:
    """Render an already-opened page to an RGB PIL Image.

    Raises :class:`PageExtractionError` when pdfplumber cannot rasterise it.
    """
    try:
        img = page.to_image(resolution=resolution).original.copy()
    except Exception as exc:
        raise PageExtractionError(page_number, f"cannot render page: {exc}") from exc
    # pdfplumber may return RGBA in some cases
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img


def render_page_image(
    source: PdfSource,
    page_number: int,
    resolution: int = 150,
) -> Image.Image:
    """Render one-based page *page_number* to an RGB PIL Image."""
    with open_document(source) as pdf:
        return render_page(pdf.pages[page_number - 1], page_number, resolution)
