"""Row assembly: cluster page fragments into text lines.

Fragments are consumed top-of-page first.  Each row is seeded by the first
remaining fragment (its *anchor*); following fragments join while their
``y`` stays within ``threshold`` of the anchor.  A fragment that is
vertically compatible but collides horizontally with a fragment already in
the row is deferred to the next row pass instead of being merged.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from ..models import Row, TextFragment

log = logging.getLogger(__name__)


def sort_fragments(fragments: Iterable[TextFragment]) -> List[TextFragment]:
    """Order fragments top-to-bottom (descending y), then left-to-right."""
    return sorted(fragments, key=lambda f: (-f.y, f.x))


def extract_next_row(
    remaining: Sequence[TextFragment],
    threshold: float = 1.5,
) -> Tuple[Row, List[TextFragment]]:
    """Split the next row off the front of *remaining*.

    Returns ``(row, rest)`` where *row* is sorted by ascending x and *rest*
    holds the deferred fragments (original order) followed by everything
    after the first vertically incompatible fragment.
    """
    if not remaining:
        return (), []

    anchor = remaining[0]
    row: List[TextFragment] = [anchor]
    deferred: List[TextFragment] = []

    stop = len(remaining)
    for i in range(1, len(remaining)):
        frag = remaining[i]
        if abs(frag.y - anchor.y) > threshold:
            stop = i
            break
        if frag.y == anchor.y or not any(placed.intersects(frag) for placed in row):
            row.append(frag)
        else:
            deferred.append(frag)

    rest = deferred + list(remaining[stop:])
    return tuple(sorted(row, key=lambda f: f.x)), rest


def extract_rows(
    fragments: Iterable[TextFragment],
    threshold: float = 1.5,
) -> List[Row]:
    """Cluster *fragments* into rows, top of page first.

    Every fragment lands in exactly one row.  Input order does not matter;
    fragments are sorted with :func:`sort_fragments` first.
    """
    remaining = sort_fragments(fragments)
    rows: List[Row] = []
    while remaining:
        row, remaining = extract_next_row(remaining, threshold)
        rows.append(row)
    log.debug("extract_rows: %d rows", len(rows))
    return rows
