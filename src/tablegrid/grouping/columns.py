"""Column boundary inference for one table block.

A probe coordinate is swept across the block's horizontal extent.  Every
candidate fragment the probe lands on either widens the first band it
overlaps or opens a new band.  Long strings and ignored texts (titles,
footnotes) do not take part, so they cannot stretch the column geometry.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..config import TableConfig
from ..models import ColumnBand, Row, TextFragment

log = logging.getLogger(__name__)


def _merge_into(bands: List[ColumnBand], frag: TextFragment) -> None:
    for i, band in enumerate(bands):
        if band.intersects(frag):
            bands[i] = band.union(frag)
            return
    bands.append(ColumnBand.from_fragment(frag))


def coalesce_bands(bands: Sequence[ColumnBand]) -> List[ColumnBand]:
    """Sort *bands* by x and fuse any that overlap."""
    result: List[ColumnBand] = []
    for band in sorted(bands, key=lambda b: b.x):
        if result and result[-1].intersects(band):
            result[-1] = result[-1].union(band)
        else:
            result.append(band)
    return result


def infer_column_bands(
    rows: Sequence[Row],
    cfg: Optional[TableConfig] = None,
) -> List[ColumnBand]:
    """Infer sorted, pairwise non-overlapping column bands for *rows*."""
    if cfg is None:
        cfg = TableConfig()

    frags = [frag for row in rows for frag in row]
    if not frags:
        return []

    min_x = min(f.x for f in frags)
    max_x = max(f.x2 for f in frags)
    step = (max_x - min_x) / cfg.column_probe_steps
    candidates = [f for f in frags if cfg.is_column_candidate(f.text)]

    bands: List[ColumnBand] = []
    hit = [False] * len(candidates)
    for k in range(cfg.column_probe_steps):
        probe = min_x + k * step
        for idx, frag in enumerate(candidates):
            if frag.x <= probe <= frag.x2:
                hit[idx] = True
                _merge_into(bands, frag)

    # Fragments narrower than one step can fall between probes.
    missed = [f for f, was_hit in zip(candidates, hit) if not was_hit]
    for frag in missed:
        _merge_into(bands, frag)

    result = coalesce_bands(bands)
    log.debug(
        "infer_column_bands: %d candidates (%d between probes) -> %d bands",
        len(candidates),
        len(missed),
        len(result),
    )
    return result
