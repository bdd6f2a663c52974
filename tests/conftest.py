"""Shared test fixtures for tablegrid."""

from unittest.mock import MagicMock

import pytest

from tablegrid.config import TableConfig
from tablegrid.models import TextFragment

# ── Helpers ────────────────────────────────────────────────────────────


def make_fragment(
    x: float,
    y: float,
    x2: float,
    y2: float,
    text: str = "",
) -> TextFragment:
    """Create a TextFragment (y grows upward, y2 = y - height)."""
    return TextFragment(x=x, y=y, x2=x2, y2=y2, text=text)


def make_word(
    x0: float,
    top: float,
    x1: float,
    bottom: float,
    text: str = "",
) -> dict:
    """Build a dict matching pdfplumber's extract_words output."""
    return {"x0": x0, "x1": x1, "top": top, "bottom": bottom, "text": text}


def make_page(words: list[dict], width: float = 612.0, height: float = 100.0):
    """Mock pdfplumber Page whose extract_words returns *words*."""
    page = MagicMock(width=width, height=height)
    page.extract_words.return_value = words
    return page


def make_pdf(pages: list) -> MagicMock:
    """Mock pdfplumber PDF holding *pages*."""
    pdf = MagicMock()
    pdf.pages = pages
    pdf.metadata = {}
    return pdf


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture
def default_cfg() -> TableConfig:
    """Return a default TableConfig."""
    return TableConfig()


@pytest.fixture
def grid_fragments() -> list[TextFragment]:
    """Two rows of two cells, five units tall, one table.

    Layout (y-up):
        "A" [0,5]   "B" [10,15]     y=10..5
        "C" [0,5]   "D" [10,15]     y=5..0
    """
    return [
        make_fragment(10, 5, 15, 0, "D"),
        make_fragment(0, 10, 5, 5, "A"),
        make_fragment(0, 5, 5, 0, "C"),
        make_fragment(10, 10, 15, 5, "B"),
    ]


@pytest.fixture
def title_split_fragments() -> list[TextFragment]:
    """A title over [0,8] with data only in [10,20] below it."""
    return [
        make_fragment(0, 30, 8, 25, "Results"),
        make_fragment(10, 24, 20, 19, "10"),
        make_fragment(10, 18, 20, 13, "20"),
        make_fragment(10, 12, 20, 7, "30"),
    ]


@pytest.fixture
def two_table_fragments() -> list[TextFragment]:
    """Two 2x1 row groups separated by a gap of several line heights."""
    return [
        make_fragment(0, 100, 10, 90, "a1"),
        make_fragment(20, 100, 30, 90, "b1"),
        make_fragment(0, 50, 10, 40, "a2"),
        make_fragment(20, 50, 30, 40, "b2"),
    ]


@pytest.fixture
def grid_words() -> list[dict]:
    """pdfplumber words for a 2x2 table on a 100-unit-high page."""
    return [
        make_word(50, 10, 80, 15, "Item"),
        make_word(120, 10, 150, 15, "Qty"),
        make_word(50, 20, 80, 25, "Apple"),
        make_word(120, 20, 150, 25, "3"),
    ]
