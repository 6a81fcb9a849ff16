"""Tests for the tabledit CLI."""

import json
import subprocess
import sys
from io import BytesIO

from docx import Document

SCENARIO_A = "Hello\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\nBye"


def run(*args, cwd=None, stdin=None):
    return subprocess.run(
        [sys.executable, "-m", "tabledit.cli", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        input=stdin,
    )


def test_segment_json(tmp_path):
    """Test listing blocks as JSON."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("--json", "segment", str(doc), cwd=tmp_path)

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert [b["id"] for b in data] == ["md-0", "tbl-7", "md-37"]
    assert [b["kind"] for b in data] == ["prose", "table", "prose"]
    assert data[1]["range"] == {"start": 7, "end": 37}


def test_segment_text(tmp_path):
    """Test the human readable listing."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("segment", str(doc), cwd=tmp_path)

    assert result.returncode == 0
    assert "tbl-7\ttable\t7-37\t3 lines" in result.stdout


def test_flatten(tmp_path):
    """Test flatten prints the reassembled document."""
    doc = tmp_path / "doc.md"
    doc.write_text("Just prose.\n")

    result = run("flatten", str(doc), cwd=tmp_path)

    assert result.returncode == 0
    assert result.stdout == "Just prose.\n"


def test_update_write(tmp_path):
    """Test update --write rewrites the file with the new block."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("update", str(doc), "tbl-7", "--text", "| x |\n|---|\n| 9 |", "--write", cwd=tmp_path)

    assert result.returncode == 0
    text = doc.read_text()
    assert "| x |\n|---|\n| 9 |" in text
    assert "| a | b |" not in text
    assert text.startswith("Hello")
    assert text.endswith("Bye")
    assert text == "Hello\n\n| x |\n|---|\n| 9 |\nBye"


def test_update_from_stdin(tmp_path):
    """Test the new text is read from stdin by default."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("update", str(doc), "md-37", cwd=tmp_path, stdin="Goodbye")

    assert result.returncode == 0
    assert result.stdout == "Hello\n\n| a | b |\n|---|---|\n| 1 | 2 |\nGoodbye"


def test_update_unknown_block(tmp_path):
    """Test a stale id is reported and the file left alone."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("update", str(doc), "tbl-0", "--text", "x", "--write", cwd=tmp_path)

    assert result.returncode == 1
    assert "not found" in result.stderr
    assert doc.read_text() == SCENARIO_A


def test_readonly_kind(tmp_path):
    """Test table edits are refused for condensed documents."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("--kind", "condensed", "set-cell", str(doc), "tbl-7", "1", "0", "x", cwd=tmp_path)

    assert result.returncode == 1
    assert "read-only" in result.stderr


def test_set_cell(tmp_path):
    """Test editing a single cell."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("set-cell", str(doc), "tbl-7", "1", "1", "99", cwd=tmp_path)

    assert result.returncode == 0
    assert "| 1 | 99 |" in result.stdout


def test_grid(tmp_path):
    """Test printing a table as rows."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("grid", str(doc), "tbl-7", cwd=tmp_path)

    assert result.returncode == 0
    assert json.loads(result.stdout) == {"header": ["a", "b"], "rows": [["1", "2"]]}


def test_render(tmp_path):
    """Test rendering prose to HTML."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    result = run("render", str(doc), cwd=tmp_path)

    assert result.returncode == 0
    assert "<p>Hello</p>" in result.stdout
    assert "<!-- tbl-7 (editable) -->" in result.stdout


def test_export(tmp_path):
    """Test export writes <stem>_<kind>.docx."""
    doc = tmp_path / "report.md"
    doc.write_text(SCENARIO_A)
    out = tmp_path / "out"

    result = run("export", str(doc), "--out", str(out), cwd=tmp_path)

    assert result.returncode == 0
    target = out / "report_full.docx"
    assert target.exists()
    assert len(Document(BytesIO(target.read_bytes())).tables) == 1


def test_missing_document(tmp_path):
    """Test a missing file is an error."""
    result = run("segment", str(tmp_path / "nope.md"), cwd=tmp_path)

    assert result.returncode == 1
    assert "Error:" in result.stderr


def test_repeated_cell_edits_keep_layout(tmp_path):
    """Test writing edits back leaves blank lines and block ids alone."""
    doc = tmp_path / "doc.md"
    doc.write_text(SCENARIO_A)

    for value in ("7", "8"):
        result = run("set-cell", str(doc), "tbl-7", "1", "0", value, "--write", cwd=tmp_path)
        assert result.returncode == 0

    assert doc.read_text() == "Hello\n\n| a | b |\n|---|---|\n| 8 | 2 |\n\nBye"

    result = run("--json", "segment", str(doc), cwd=tmp_path)
    assert [b["id"] for b in json.loads(result.stdout)] == ["md-0", "tbl-7", "md-37"]
