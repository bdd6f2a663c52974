"""Ingest stage: PDF acquisition, validation, metadata, and rendering.

Public API
----------
- :func:`open_document`: scoped open of a PDF; closes it on every exit path
- :func:`ingest_pdf`: open + validate a PDF, return :class:`PdfMeta`
- :func:`render_page`: render an open page to a PIL Image at a given DPI
- :func:`render_page_image`: open a PDF and render one of its pages
- :class:`PdfMeta`: PDF-level metadata container
- :class:`PageInfo`: per-page dimensions
- :class:`IngestError`: base of the errors below
- :class:`DocumentOpenError`: the document cannot be opened
- :class:`PageExtractionError`: a page's text layer cannot be read
"""

from .ingest import (
    DocumentOpenError,
    IngestError,
    PageExtractionError,
    PageInfo,
    PdfMeta,
    PdfSource,
    ingest_pdf,
    open_document,
    render_page,
    render_page_image,
)

__all__ = [
    "DocumentOpenError",
    "IngestError",
    "PageExtractionError",
    "PageInfo",
    "PdfMeta",
    "PdfSource",
    "ingest_pdf",
    "open_document",
    "render_page",
    "render_page_image",
]
