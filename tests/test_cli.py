"""Tests for tablegrid.cli."""

from unittest.mock import MagicMock, patch

from conftest import make_pdf
from PIL import Image

from tablegrid.cli import build_parser, main
from tablegrid.ingest import DocumentOpenError
from tablegrid.models import PdfTable
from tablegrid.pipeline import DocumentResult, PageResult


def _doc():
    table = PdfTable(
        table_number=1, num_rows=1, num_cols=2, data=(("a", "b"),)
    )
    return DocumentResult(
        num_pages=1, pages=[PageResult(page_number=1, tables=[table])]
    )


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["a.pdf"])
        assert args.formats is None
        assert args.threshold == 1.5
        assert args.max_str_length == 30
        assert args.ignore_texts == []
        assert args.no_titles is False

    def test_repeatable(self):
        args = build_parser().parse_args(
            ["a.pdf", "--format", "csv", "--format", "json",
             "--ignore-text", "Source:", "--ignore-text", "Note"]
        )
        assert args.formats == ["csv", "json"]
        assert args.ignore_texts == ["Source:", "Note"]


class TestMain:
    def test_writes_outputs(self, tmp_path):
        with patch("tablegrid.cli.run_document", return_value=_doc()) as run:
            code = main(
                ["my report.pdf", "--out-dir", str(tmp_path),
                 "--format", "csv", "--format", "json", "--no-titles"]
            )
        assert code == 0
        cfg = run.call_args.args[1]
        assert cfg.has_titles is False
        assert (tmp_path / "my_report_p1_t1.csv").read_bytes() == b"a,b\r\n"
        assert (tmp_path / "my_report.json").exists()
        assert (tmp_path / "my_report_summary.csv").exists()

    def test_bad_config(self, tmp_path):
        with patch("tablegrid.cli.run_document") as run:
            code = main(["a.pdf", "--out-dir", str(tmp_path), "--threshold", "-1"])
        assert code == 2
        run.assert_not_called()

    def test_failed_pdf_does_not_stop_others(self, tmp_path):
        side_effect = [DocumentOpenError("File not found: a.pdf"), _doc()]
        with patch("tablegrid.cli.run_document", side_effect=side_effect) as run:
            code = main(["a.pdf", "b.pdf", "--out-dir", str(tmp_path)])
        assert code == 2
        assert run.call_count == 2
        assert (tmp_path / "b_p1_t1.csv").exists()
        assert not (tmp_path / "a_summary.csv").exists()


class TestOverlays:
    OPEN = "tablegrid.ingest.ingest.pdfplumber.open"

    def _pdf_file(self, tmp_path, name="plan.pdf"):
        f = tmp_path / name
        f.write_bytes(b"%PDF-1.4\n%%EOF")
        return f

    def _two_page_doc(self):
        table = PdfTable(table_number=1, num_rows=1, num_cols=1, data=(("a",),))
        return DocumentResult(
            num_pages=3,
            pages=[
                PageResult(page_number=1, tables=[table]),
                PageResult(page_number=2),
                PageResult(page_number=3, tables=[table]),
            ],
        )

    def test_document_opened_once(self, tmp_path):
        pdf_path = self._pdf_file(tmp_path)
        out = tmp_path / "out"
        pages = [MagicMock() for _ in range(3)]
        for page in pages:
            page.to_image.return_value.original = Image.new("RGB", (150, 150))
        pdf = make_pdf(pages)
        with patch("tablegrid.cli.run_document", return_value=self._two_page_doc()):
            with patch(self.OPEN, return_value=pdf) as opened:
                code = main([str(pdf_path), "--out-dir", str(out), "--overlay"])
        assert code == 0
        opened.assert_called_once()
        pdf.close.assert_called_once()
        pages[1].to_image.assert_not_called()
        assert (out / "plan_p1_overlay.png").exists()
        assert (out / "plan_p3_overlay.png").exists()

    def test_render_failure_reported(self, tmp_path):
        bad = self._pdf_file(tmp_path, "bad.pdf")
        good = self._pdf_file(tmp_path, "good.pdf")
        out = tmp_path / "out"
        page = MagicMock()
        page.to_image.return_value.original = Image.new("RGB", (150, 150))
        with patch("tablegrid.cli.run_document", side_effect=[_doc(), _doc()]):
            with patch(self.OPEN, side_effect=[OSError("truncated"), make_pdf([page])]):
                code = main(
                    [str(bad), str(good), "--out-dir", str(out), "--overlay"]
                )
        assert code == 2
        assert (out / "good_p1_t1.csv").exists()
