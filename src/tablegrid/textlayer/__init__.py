"""Text layer: positioned fragments from a PDF page.

Public API
----------
- :func:`extract_page_fragments`: fragments from an open pdfplumber Page
- :func:`word_to_fragment`: convert one pdfplumber word dict
"""

from .extract import extract_page_fragments, word_to_fragment

__all__ = [
    "extract_page_fragments",
    "word_to_fragment",
]
