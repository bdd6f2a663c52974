"""Cell assignment: map row fragments onto column bands."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..models import Cell, ColumnBand, Row


def find_band(bands: Sequence[ColumnBand], frag) -> int:
    """Index of the first band overlapping *frag*, or ``-1``."""
    for i, band in enumerate(bands):
        if frag.intersects(band):
            return i
    return -1


def assign_row(bands: Sequence[ColumnBand], row: Row) -> Tuple[Tuple[Cell, ...], int]:
    """Build one grid row for *row*.

    Fragments sharing a band are joined with a single space in row order.
    Returns ``(cells, dropped)`` where *dropped* counts fragments that
    overlap no band and therefore contribute to no cell.
    """
    cells: List[Cell] = [None] * len(bands)
    dropped = 0
    for frag in row:
        idx = find_band(bands, frag)
        if idx < 0:
            dropped += 1
            continue
        if cells[idx]:
            cells[idx] = f"{cells[idx]} {frag.text}"
        else:
            cells[idx] = frag.text or None
    return tuple(cells), dropped


def assign_cells(
    bands: Sequence[ColumnBand],
    rows: Sequence[Row],
) -> Tuple[List[Tuple[Cell, ...]], int]:
    """Assign every row; returns ``(grid, dropped_total)``."""
    grid: List[Tuple[Cell, ...]] = []
    dropped = 0
    for row in rows:
        cells, n = assign_row(bands, row)
        grid.append(cells)
        dropped += n
    return grid, dropped
