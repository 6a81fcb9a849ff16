"""Tests for the editing policy and per-block presentation."""

from tabledit.adapters.markdown_renderer import MarkdownRenderer
from tabledit.core.segmenter import segment
from tabledit.policy import always_editable, readonly_policy
from tabledit.view import present

SCENARIO_A = "Hello\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\nBye"


def test_default_readonly_kinds():
    """Test summary documents have read-only tables."""
    is_editable = readonly_policy()

    assert is_editable("full") is True
    assert is_editable("condensed") is False
    assert is_editable("summary-table") is False


def test_custom_readonly_kinds():
    """Test the read-only list is caller supplied."""
    is_editable = readonly_policy(["draft"])

    assert is_editable("draft") is False
    assert is_editable("condensed") is True
    assert always_editable("anything") is True


def test_present_blocks():
    """Test prose renders to HTML and tables become grids."""
    views = present(segment(SCENARIO_A), MarkdownRenderer(), readonly_policy(), "full")

    assert [v.kind for v in views] == ["prose", "table", "prose"]
    assert views[0].html == "<p>Hello</p>\n"
    assert views[1].html is None
    assert views[1].editable is True
    assert views[1].grid == {"header": ["a", "b"], "rows": [["1", "2"]]}
    assert views[2].html == "<p>Bye</p>\n"


def test_present_readonly_kind():
    """Test tables are flagged read-only for condensed documents."""
    views = present(segment(SCENARIO_A), MarkdownRenderer(), readonly_policy(), "condensed")
    assert views[1].editable is False


def test_view_to_dict():
    """Test serialised views carry html for prose, grid for tables."""
    views = present(segment(SCENARIO_A), MarkdownRenderer(), always_editable, "full")
    prose, table = views[0].to_dict(), views[1].to_dict()

    assert set(prose) == {"id", "kind", "text", "html"}
    assert set(table) == {"id", "kind", "text", "editable", "grid"}
    assert table["id"] == "tbl-7"
