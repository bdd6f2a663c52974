"""Table segmentation: split the row sequence on large vertical gaps."""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..models import Row, TableBlock

log = logging.getLogger(__name__)


def starts_new_table(prev: Row, curr: Row) -> bool:
    """True when *curr* sits more than one line-height below *prev*.

    The next line is expected no lower than ``2 * y2 - y`` of the previous
    row's leftmost fragment, i.e. one fragment height under its bottom edge.
    """
    if not prev or not curr:
        return False
    p = prev[0]
    return curr[0].y < 2 * p.y2 - p.y


def split_tables(rows: Sequence[Row]) -> List[TableBlock]:
    """Partition *rows* into numbered :class:`TableBlock` objects.

    Blocks are numbered from 1 in document order and are never empty.
    """
    blocks: List[TableBlock] = []
    current: List[Row] = []
    for i, row in enumerate(rows):
        if current and starts_new_table(rows[i - 1], row):
            blocks.append(TableBlock(table_number=len(blocks) + 1, rows=tuple(current)))
            current = []
        current.append(row)
    if current:
        blocks.append(TableBlock(table_number=len(blocks) + 1, rows=tuple(current)))
    log.debug("split_tables: %d rows -> %d blocks", len(rows), len(blocks))
    return blocks
