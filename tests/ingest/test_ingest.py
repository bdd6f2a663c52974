"""Tests for tablegrid.ingest: scoped document acquisition and metadata."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from conftest import make_pdf

from tablegrid.ingest import (
    DocumentOpenError,
    IngestError,
    PageExtractionError,
    PageInfo,
    PdfMeta,
    ingest_pdf,
    open_document,
    render_page_image,
)

OPEN = "tablegrid.ingest.ingest.pdfplumber.open"


def _pdf_file(tmp_path) -> Path:
    f = tmp_path / "test.pdf"
    # Minimal PDF header so the path checks pass
    f.write_bytes(b"%PDF-1.4\n%%EOF")
    return f


# ── Containers ─────────────────────────────────────────────────────────


class TestPageInfo:
    def test_to_dict(self):
        d = PageInfo(number=2, width=612.0, height=792.0).to_dict()
        assert d == {"number": 2, "width": 612.0, "height": 792.0}


class TestPdfMeta:
    def test_page_accessor_one_based(self):
        pages = [PageInfo(1, 100, 200), PageInfo(2, 300, 400)]
        meta = PdfMeta(path=Path("test.pdf"), num_pages=2, pages=pages)
        assert meta.page(1).width == 100
        assert meta.page(2).height == 400

    def test_page_zero_rejected(self):
        meta = PdfMeta(path=None, num_pages=1, pages=[PageInfo(1, 1, 1)])
        with pytest.raises(IndexError):
            meta.page(0)

    def test_to_dict_without_metadata(self):
        d = PdfMeta(path=Path("x.pdf"), num_pages=0).to_dict()
        assert d["path"] == "x.pdf"
        assert "pdf_metadata" not in d


# ── Errors ─────────────────────────────────────────────────────────────


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(DocumentOpenError, IngestError)
        assert issubclass(PageExtractionError, IngestError)

    def test_page_number_kept(self):
        err = PageExtractionError(4, "boom")
        assert err.page_number == 4
        assert "page 4" in str(err)


# ── Path validation ────────────────────────────────────────────────────


class TestValidation:
    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentOpenError, match="not found"):
            with open_document(tmp_path / "nonexistent.pdf"):
                pass

    def test_directory_not_file(self, tmp_path):
        d = tmp_path / "subdir.pdf"
        d.mkdir()
        with pytest.raises(DocumentOpenError, match="Not a file"):
            with open_document(d):
                pass

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty.pdf"
        f.write_bytes(b"")
        with pytest.raises(DocumentOpenError, match="Empty file"):
            with open_document(f):
                pass

    def test_wrong_extension(self, tmp_path):
        f = tmp_path / "data.txt"
        f.write_text("hello")
        with pytest.raises(DocumentOpenError, match="Not a PDF"):
            with open_document(f):
                pass

    def test_empty_bytes(self):
        with pytest.raises(DocumentOpenError, match="Empty PDF"):
            with open_document(b""):
                pass

    def test_corrupt_pdf(self, tmp_path):
        """A file with .pdf extension but invalid contents."""
        f = tmp_path / "corrupt.pdf"
        f.write_bytes(b"this is not a pdf file at all")
        with pytest.raises(DocumentOpenError, match="Cannot open PDF"):
            with open_document(f):
                pass


# ── open_document with mock pdfplumber ─────────────────────────────────


class TestOpenDocument:
    def test_yields_and_closes(self, tmp_path):
        pdf = make_pdf([MagicMock()])
        with patch(OPEN, return_value=pdf) as mock_open:
            with open_document(_pdf_file(tmp_path)) as handle:
                assert handle is pdf
        mock_open.assert_called_once()
        pdf.close.assert_called_once()

    def test_closes_on_error_in_block(self, tmp_path):
        pdf = make_pdf([])
        with patch(OPEN, return_value=pdf):
            with pytest.raises(RuntimeError, match="caller"):
                with open_document(_pdf_file(tmp_path)):
                    raise RuntimeError("caller failure")
        pdf.close.assert_called_once()

    def test_open_failure_wrapped(self, tmp_path):
        with patch(OPEN, side_effect=ValueError("bad xref")):
            with pytest.raises(DocumentOpenError, match="bad xref"):
                with open_document(_pdf_file(tmp_path)):
                    pass

    def test_bytes_source(self):
        pdf = make_pdf([])
        with patch(OPEN, return_value=pdf) as mock_open:
            with open_document(b"%PDF-1.4\n%%EOF"):
                pass
        stream = mock_open.call_args[0][0]
        assert isinstance(stream, io.BytesIO)
        assert stream.getvalue() == b"%PDF-1.4\n%%EOF"
        pdf.close.assert_called_once()

    def test_file_object_source(self):
        pdf = make_pdf([])
        fp = io.BytesIO(b"%PDF-1.4")
        with patch(OPEN, return_value=pdf) as mock_open:
            with open_document(fp):
                pass
        assert mock_open.call_args[0][0] is fp

    def test_password_forwarded(self):
        with patch(OPEN, return_value=make_pdf([])) as mock_open:
            with open_document(b"%PDF", password="s3cret"):
                pass
        assert mock_open.call_args.kwargs["password"] == "s3cret"

    def test_not_extractable_rejected(self):
        pdf = make_pdf([])
        pdf.doc.is_extractable = False
        with patch(OPEN, return_value=pdf):
            with pytest.raises(DocumentOpenError, match="text extraction not permitted"):
                with open_document(b"%PDF"):
                    pass
        pdf.close.assert_called_once()


# ── ingest_pdf ─────────────────────────────────────────────────────────


class TestIngestPdf:
    def test_basic_ingest(self, tmp_path):
        pdf = make_pdf(
            [MagicMock(width=612.0, height=792.0), MagicMock(width=2448.0, height=1584.0)]
        )
        pdf.metadata = {"Title": "Quarterly", "Producer": b"Writer\x00"}
        with patch(OPEN, return_value=pdf):
            meta = ingest_pdf(_pdf_file(tmp_path))

        assert meta.num_pages == 2
        assert meta.page(2).width == 2448.0
        assert meta.pdf_metadata["Title"] == "Quarterly"
        assert "Writer" in meta.pdf_metadata["Producer"]
        assert meta.file_size_bytes > 0
        pdf.close.assert_called_once()

    def test_no_metadata(self, tmp_path):
        pdf = make_pdf([MagicMock(width=100.0, height=200.0)])
        pdf.metadata = None
        with patch(OPEN, return_value=pdf):
            meta = ingest_pdf(str(_pdf_file(tmp_path)))
        assert meta.pdf_metadata == {}


class TestRenderPageImage:
    def test_returns_rgb_copy(self):
        page = MagicMock()
        page.to_image.return_value.original = Image.new("RGBA", (20, 10))
        pdf = make_pdf([MagicMock(), page])
        with patch(OPEN, return_value=pdf):
            img = render_page_image(b"%PDF-1.4", 2, resolution=72)
        page.to_image.assert_called_once_with(resolution=72)
        assert img.mode == "RGB"
        assert img.size == (20, 10)
        pdf.close.assert_called_once()

    def test_render_failure_names_page(self):
        page = MagicMock()
        page.to_image.side_effect = RuntimeError("bad image stream")
        pdf = make_pdf([page])
        with patch(OPEN, return_value=pdf):
            with pytest.raises(PageExtractionError, match="bad image stream") as exc:
                render_page_image(b"%PDF-1.4", 1)
        assert exc.value.page_number == 1
        pdf.close.assert_called_once()
