"""Tests for DOCX export."""

import tempfile
from io import BytesIO
from pathlib import Path

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.shared import Twips

from tabledit.adapters.docx_exporter import (
    DocxExporter,
    export_filename,
    next_available_path,
    write_export,
)
from tabledit.core.ports import ExportOptions

DOC = """# Report

Intro with **bold** text.

| name | qty |
|---|---|
| apple | 3 |
| pear | 5 |

- first
- second
"""


def _load(payload: bytes):
    return Document(BytesIO(payload))


def test_export_is_docx():
    """Test the payload is a zip-based DOCX."""
    payload = DocxExporter().export(DOC)
    assert payload[:2] == b"PK"


def test_tables_become_word_tables():
    """Test table blocks are written as Word tables."""
    doc = _load(DocxExporter().export(DOC))

    assert len(doc.tables) == 1
    table = doc.tables[0]
    assert len(table.rows) == 3
    assert table.cell(0, 0).text == "name"
    assert table.cell(2, 1).text == "5"


def test_prose_becomes_paragraphs():
    """Test headings, paragraphs and list items are kept."""
    doc = _load(DocxExporter().export(DOC))
    texts = [p.text for p in doc.paragraphs]

    assert "Report" in texts
    assert "Intro with bold text." in texts
    assert "first" in texts
    assert "second" in texts

    heading = next(p for p in doc.paragraphs if p.text == "Report")
    assert heading.style.name == "Heading 1"

    intro = next(p for p in doc.paragraphs if p.text.startswith("Intro"))
    assert any(run.bold for run in intro.runs if run.text == "bold")


def test_page_setup_defaults():
    """Test portrait with 720 twip margins by default."""
    section = _load(DocxExporter().export(DOC)).sections[0]

    assert section.orientation == WD_ORIENT.PORTRAIT
    assert section.left_margin == Twips(720)
    assert section.top_margin == Twips(720)


def test_landscape():
    """Test landscape swaps the page dimensions."""
    options = ExportOptions(orientation="landscape", margin_twips=1440)
    section = _load(DocxExporter().export(DOC, options)).sections[0]

    assert section.orientation == WD_ORIENT.LANDSCAPE
    assert section.page_width > section.page_height
    assert section.right_margin == Twips(1440)


def test_export_empty_document():
    """Test an empty document still exports."""
    doc = _load(DocxExporter().export(""))
    assert len(doc.tables) == 0


def test_export_filename():
    """Test export names are <stem>_<kind>.docx."""
    assert export_filename("report.md", "full") == "report_full.docx"
    assert export_filename(None, "condensed") == "document_condensed.docx"
    assert export_filename("my report (v2).md", "summary-table") == "my_report_v2_summary-table.docx"


def test_next_available_path():
    """Test existing files are not overwritten."""
    with tempfile.TemporaryDirectory() as tmpdir:
        out = Path(tmpdir)
        (out / "a_full.docx").write_bytes(b"x")

        assert next_available_path(out, "a_full.docx") == out / "a_full_1.docx"
        assert next_available_path(out, "b_full.docx") == out / "b_full.docx"


def test_write_export():
    """Test writing creates the directory and file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        target = write_export(b"PK", Path(tmpdir) / "out", "a_full.docx")

        assert target.exists()
        assert target.read_bytes() == b"PK"
