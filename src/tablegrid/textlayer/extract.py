"""Text-layer extraction: pdfplumber words to :class:`TextFragment`.

pdfplumber measures ``top``/``bottom`` from the top of the page.  The
reconstruction stages expect y to grow upward with ``y`` on the
fragment's lower edge and ``y2 = y - height``, so each word is mapped as::

    x  = x0                      x2 = x1
    y  = page_height - bottom    y2 = y - (bottom - top)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from ..config import TableConfig
from ..ingest import PageExtractionError
from ..models import FragmentPageResult, TextFragment

log = logging.getLogger(__name__)

# Control-character regex: U+0000–U+001F (except \t \n \r) plus BOM
_RE_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufeff]")


def _empty_diagnostics() -> Dict[str, Any]:
    """Return a zero-valued diagnostics dict with the full schema."""
    return {
        "words_raw": 0,
        "fragments_total": 0,
        "degenerate_skipped": 0,
        "control_char_cleaned": 0,
        "blank_dropped": 0,
    }


def _build_extract_words_kwargs(cfg: TableConfig) -> Dict[str, Any]:
    """Build ``pdfplumber.Page.extract_words`` keyword arguments."""
    kw: Dict[str, Any] = {
        "x_tolerance": cfg.x_tolerance,
        "y_tolerance": cfg.y_tolerance,
    }
    if cfg.keep_blank_chars:
        kw["keep_blank_chars"] = True
    if cfg.use_text_flow:
        kw["use_text_flow"] = True
    return kw


def word_to_fragment(
    w: dict,
    page_height: float,
    cfg: TableConfig,
    diag: Dict[str, Any],
) -> Optional[TextFragment]:
    """Convert a pdfplumber word dict → TextFragment.

    Returns ``None`` when the word should be dropped.
    """
    x0 = float(w.get("x0", 0.0))
    x1 = float(w.get("x1", 0.0))
    top = float(w.get("top", 0.0))
    bottom = float(w.get("bottom", 0.0))
    text = w.get("text", "")

    if x1 < x0 or bottom <= top:
        diag["degenerate_skipped"] += 1
        return None

    if cfg.filter_control_chars and _RE_CONTROL.search(text):
        text = _RE_CONTROL.sub("", text)
        diag["control_char_cleaned"] += 1

    if cfg.drop_blank_fragments and not text.strip():
        diag["blank_dropped"] += 1
        return None

    y = page_height - bottom
    return TextFragment(x=x0, y=y, x2=x1, y2=y - (bottom - top), text=text)


def extract_page_fragments(
    page: "pdfplumber.page.Page",
    page_number: int,
    cfg: TableConfig | None = None,
) -> FragmentPageResult:
    """Extract fragments from an already-opened pdfplumber Page.

    Parameters
    ----------
    page : pdfplumber.page.Page
        An opened page object.
    page_number : int
        One-based page number (used in log and error messages).
    cfg : TableConfig, optional
        Extraction configuration.  Defaults are used when ``None``.

    Raises
    ------
    PageExtractionError
        When pdfplumber fails to read the page's text layer.
    """
    if cfg is None:
        cfg = TableConfig()

    diag = _empty_diagnostics()
    try:
        page_w = float(page.width)
        page_h = float(page.height)
        words = page.extract_words(**_build_extract_words_kwargs(cfg))
    except Exception as exc:
        raise PageExtractionError(page_number, str(exc)) from exc

    diag["words_raw"] = len(words)
    fragments = []
    for w in words:
        frag = word_to_fragment(w, page_h, cfg, diag)
        if frag is not None:
            fragments.append(frag)
    diag["fragments_total"] = len(fragments)

    if not fragments:
        log.warning(
            "page %d: zero fragments extracted (blank or image-only page)",
            page_number,
        )
    if diag["control_char_cleaned"]:
        log.debug(
            "page %d: %d fragments had control characters removed",
            page_number,
            diag["control_char_cleaned"],
        )

    return FragmentPageResult(
        fragments=fragments,
        page_width=page_w,
        page_height=page_h,
        diagnostics=diag,
    )
