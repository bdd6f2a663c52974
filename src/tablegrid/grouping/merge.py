"""Title-row column merge.

The column sweep sometimes splits one logical column in two: the title
row carries text in the left band while every data row below it only
fills the right band.  Such pairs are folded back into one column.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..models import Cell, ColumnBand

log = logging.getLogger(__name__)


def _filled(row: Sequence[Cell]) -> int:
    return sum(1 for cell in row if cell)


def find_title_row(grid: Sequence[Sequence[Cell]]) -> int:
    """Index of the first row with at most one non-empty cell.

    Returns ``len(grid)`` when there is no such row.
    """
    for t, row in enumerate(grid):
        if _filled(row) <= 1:
            return t
    return len(grid)


def merge_title_columns(
    bands: Sequence[ColumnBand],
    grid: Sequence[Sequence[Cell]],
) -> Tuple[List[ColumnBand], List[Tuple[Cell, ...]]]:
    """Merge falsely split column pairs; returns new ``(bands, grid)``.

    Pairs ``(i, i + 1)`` are checked left to right against the shrinking
    column list.  A pair merges when the title row fills ``i`` but not
    ``i + 1``, no data row fills ``i`` and some data row fills ``i + 1``.
    """
    out_bands = list(bands)
    rows: List[List[Cell]] = [list(row) for row in grid]
    t = find_title_row(rows)
    if t >= len(rows):
        return out_bands, [tuple(row) for row in rows]

    title = rows[t]
    data = rows[t + 1 :]

    i = 0
    while i < len(out_bands) - 1:
        title_left = title[i] if i < len(title) else None
        title_right = title[i + 1] if i + 1 < len(title) else None
        if (
            title_left
            and not title_right
            and not any(row[i] for row in data)
            and any(row[i + 1] for row in data)
        ):
            for row in data:
                if row[i + 1]:
                    row[i] = row[i + 1]
            for row in rows:
                del row[i + 1]
            del out_bands[i + 1]
            log.debug("merge_title_columns: merged column %d into %d", i + 1, i)
        i += 1

    return out_bands, [tuple(row) for row in rows]
