"""Table reconstruction from positioned PDF text fragments.

Frequently-used symbols are re-exported here for convenience.
For the individual reconstruction stages import from
:mod:`tablegrid.grouping`, e.g.::

    from tablegrid.grouping import extract_rows, infer_column_bands
"""

# ── Core models & config ──────────────────────────────────────────────

from .config import ConfigValidationError, TableConfig
from .grouping import extract_tables
from .ingest import (
    DocumentOpenError,
    IngestError,
    PageExtractionError,
    ingest_pdf,
    open_document,
)
from .models import ColumnBand, PdfTable, TableBlock, TextFragment
from .pipeline import (
    DocumentResult,
    PageResult,
    PdfDocument,
    StageResult,
    extract_page,
    run_document,
)

__all__ = [
    # Models & config
    "ColumnBand",
    "ConfigValidationError",
    "PdfTable",
    "TableBlock",
    "TableConfig",
    "TextFragment",
    # Reconstruction
    "extract_tables",
    # Ingest
    "DocumentOpenError",
    "IngestError",
    "PageExtractionError",
    "ingest_pdf",
    "open_document",
    # Pipeline
    "DocumentResult",
    "PageResult",
    "PdfDocument",
    "StageResult",
    "extract_page",
    "run_document",
]
