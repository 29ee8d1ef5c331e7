"""
Unit tests for the render_blocks script.
"""

import json

from scripts.render_blocks import load_blocks, main
from tests.fixtures.textract_responses import (
    SAMPLE_INVOICE_BLOCKS,
    SAMPLE_INVOICE_TABLES,
    SAMPLE_INVOICE_TEXT,
    paginate,
)


def save_pages(tmp_path, blocks, page_size):
    paths = []
    for index, response in enumerate(paginate(blocks, page_size), start=1):
        path = tmp_path / f"page{index}.json"
        path.write_text(json.dumps(response), encoding="utf-8")
        paths.append(path)
    return paths


class TestRenderBlocks:
    """Tests for the offline artifact renderer."""

    def test_load_blocks_concatenates_pages(self, tmp_path):
        paths = save_pages(tmp_path, SAMPLE_INVOICE_BLOCKS, page_size=10)

        assert load_blocks(paths) == SAMPLE_INVOICE_BLOCKS

    def test_writes_artifacts_to_directory(self, tmp_path):
        paths = save_pages(tmp_path, SAMPLE_INVOICE_BLOCKS, page_size=10)
        out = tmp_path / "out"

        exit_code = main([
            *(str(p) for p in paths),
            "--out", str(out),
            "--name", "invoice.pdf",
            "--api", "StartDocumentAnalysis",
        ])

        assert exit_code == 0
        assert sorted(p.name for p in out.iterdir()) == [
            "invoice-StartDocumentAnalysis.csv",
            "invoice-StartDocumentAnalysis.json",
            "invoice-StartDocumentAnalysis.txt",
        ]
        assert (out / "invoice-StartDocumentAnalysis.txt").read_text() == SAMPLE_INVOICE_TEXT
        assert (out / "invoice-StartDocumentAnalysis.csv").read_text() == SAMPLE_INVOICE_TABLES

    def test_prints_artifacts(self, tmp_path, capsys):
        paths = save_pages(tmp_path, SAMPLE_INVOICE_BLOCKS, page_size=100)

        assert main([str(p) for p in paths]) == 0

        printed = capsys.readouterr().out
        assert "===== text (document-StartDocumentTextDetection.txt) =====" in printed
        assert SAMPLE_INVOICE_TEXT in printed

    def test_nothing_to_render(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"JobStatus": "SUCCEEDED", "Blocks": []}))

        assert main([str(path)]) == 1
        assert "No text" in capsys.readouterr().err
