"""Page-level table reconstruction.

Composes the grouping stages in order::

    fragments → rows → table blocks → column bands → cells → title merge

Every stage is a pure function; :func:`extract_tables` never raises for a
list of well-formed fragments and returns ``[]`` for an empty page.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..config import TableConfig
from ..models import PdfTable, TableBlock, TextFragment
from .cells import assign_cells
from .columns import infer_column_bands
from .merge import merge_title_columns
from .rows import extract_rows
from .tables import split_tables

log = logging.getLogger(__name__)


def normalize_table(block: TableBlock, cfg: Optional[TableConfig] = None) -> PdfTable:
    """Turn one :class:`TableBlock` into a :class:`PdfTable`."""
    if cfg is None:
        cfg = TableConfig()

    bands = infer_column_bands(block.rows, cfg)
    grid, dropped = assign_cells(bands, block.rows)
    if cfg.has_titles:
        bands, grid = merge_title_columns(bands, grid)

    if dropped:
        log.warning(
            "table %d: %d fragment(s) matched no column and were dropped",
            block.table_number,
            dropped,
        )

    return PdfTable(
        table_number=block.table_number,
        num_rows=len(block.rows),
        num_cols=len(bands),
        data=tuple(grid),
        columns=tuple(bands),
        bbox=block.bbox(),
        dropped_fragments=dropped,
    )


def extract_tables(
    fragments: Iterable[TextFragment],
    cfg: Optional[TableConfig] = None,
) -> List[PdfTable]:
    """Reconstruct every table on a page from its text fragments."""
    if cfg is None:
        cfg = TableConfig()

    rows = extract_rows(fragments, cfg.threshold)
    blocks = split_tables(rows)
    return [normalize_table(block, cfg) for block in blocks]
