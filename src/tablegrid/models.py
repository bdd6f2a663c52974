from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

Cell = Optional[str]


@dataclass(frozen=True)
class TextFragment:
    """A positioned string from the PDF text layer.

    Coordinates are page units with y increasing upward: ``(x, y)`` is the
    fragment origin, ``x2 = x + width`` and ``y2 = y - height``.
    Swapped bounds are normalised on construction so ``x <= x2`` and
    ``y2 <= y`` always hold.

    ``y`` sits on the glyphs' bottom edge, so on the page the text covers
    ``[y, top]`` vertically; ``y2`` is only the row/table layout measure.
    """

    x: float
    y: float
    x2: float
    y2: float
    text: str = ""

    def __post_init__(self) -> None:
        if self.x2 < self.x:
            x, x2 = self.x2, self.x
            object.__setattr__(self, "x", x)
            object.__setattr__(self, "x2", x2)
        if self.y2 > self.y:
            y, y2 = self.y2, self.y
            object.__setattr__(self, "y", y)
            object.__setattr__(self, "y2", y2)

    @property
    def width(self) -> float:
        return self.x2 - self.x

    @property
    def height(self) -> float:
        return self.y - self.y2

    @property
    def top(self) -> float:
        """Upper edge of the glyphs in page coordinates."""
        return self.y + self.height

    def intersects(self, other: "TextFragment | ColumnBand") -> bool:
        """Inclusive overlap test of the horizontal intervals."""
        return self.x <= other.x2 and self.x2 >= other.x

    def to_dict(self) -> Dict[str, Any]:
        """Serialize fragment to a JSON-compatible dict."""
        return {
            "x": self.x,
            "y": self.y,
            "x2": self.x2,
            "y2": self.y2,
            "text": self.text,
        }


Row = Tuple[TextFragment, ...]


@dataclass(frozen=True)
class ColumnBand:
    """Horizontal interval ``[x, x2]`` holding one inferred column."""

    x: float
    x2: float

    @classmethod
    def from_fragment(cls, frag: TextFragment) -> "ColumnBand":
        return cls(x=frag.x, x2=frag.x2)

    def intersects(self, other: "TextFragment | ColumnBand") -> bool:
        """Inclusive overlap test of the horizontal intervals."""
        return self.x <= other.x2 and self.x2 >= other.x

    def union(self, other: "TextFragment | ColumnBand") -> "ColumnBand":
        """Smallest band covering both intervals."""
        return ColumnBand(x=min(self.x, other.x), x2=max(self.x2, other.x2))

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "x2": self.x2}


@dataclass(frozen=True)
class TableBlock:
    """Rows judged to belong to one table, before column normalisation."""

    table_number: int
    rows: Tuple[Row, ...] = ()

    def fragments(self) -> List[TextFragment]:
        """All fragments of the block, row by row."""
        return [frag for row in self.rows for frag in row]

    def bbox(self) -> Tuple[float, float, float, float]:
        """Page-space extent of the glyphs as ``(x0, y_bottom, x1, y_top)``.

        Returns ``(0, 0, 0, 0)`` for a block without fragments.
        """
        frags = self.fragments()
        if not frags:
            return (0, 0, 0, 0)
        return (
            min(f.x for f in frags),
            min(f.y for f in frags),
            max(f.x2 for f in frags),
            max(f.top for f in frags),
        )


def _quote_cell(value: str, separator: str) -> str:
    """Quote *value* for delimited output when it needs it."""
    if '"' in value:
        return '"' + value.replace('"', '""') + '"'
    if separator in value or any(ch.isspace() for ch in value):
        return f'"{value}"'
    return value


@dataclass(frozen=True)
class PdfTable:
    """A reconstructed table: a numbered grid of optional cell strings.

    ``data`` holds ``num_rows`` rows of ``num_cols`` cells; ``None`` marks a
    cell no fragment was mapped to.  ``columns``, ``bbox`` and
    ``dropped_fragments`` are diagnostics carried from reconstruction.
    """

    table_number: int
    num_rows: int
    num_cols: int
    data: Tuple[Tuple[Cell, ...], ...] = ()
    columns: Tuple[ColumnBand, ...] = ()
    bbox: Tuple[float, float, float, float] = (0, 0, 0, 0)
    dropped_fragments: int = 0

    def cell(self, row: int, col: int) -> str:
        """Text of cell (*row*, *col*); empty string when absent."""
        if row >= len(self.data) or col >= len(self.data[row]):
            return ""
        return self.data[row][col] or ""

    def to_delimited_text(self, separator: str = ",") -> str:
        """Serialize as delimited text, one CRLF-terminated line per row.

        Cells containing the separator, whitespace or a double quote are
        wrapped in double quotes; embedded quotes are doubled.
        """
        out: List[str] = []
        for line in self.data:
            text = separator.join(
                _quote_cell(cell or "", separator) for cell in line
            )
            out.append(f"{text}\r\n")
        return "".join(out)

    def to_html(self) -> str:
        """Serialize as a minimal ``<table>`` element.

        Every row renders ``num_cols`` cells; empty cells become
        ``&nbsp;`` and ``<`` is the only character escaped.
        """
        parts = ["<table>"]
        for i in range(self.num_rows):
            parts.append("<tr>")
            for j in range(self.num_cols):
                text = (self.cell(i, j) or "&nbsp;").replace("<", "&lt;")
                parts.append(f"<td>{text}</td>")
            parts.append("</tr>")
        parts.append("</table>")
        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize table to a JSON-compatible dict."""
        return {
            "tableNumber": self.table_number,
            "numrows": self.num_rows,
            "numcols": self.num_cols,
            "data": [[cell or "" for cell in row] for row in self.data],
        }


@dataclass
class FragmentPageResult:
    """Fragments read from one page of the text layer."""

    fragments: List[TextFragment]
    page_width: float
    page_height: float
    diagnostics: Dict[str, Any] = field(default_factory=dict)
