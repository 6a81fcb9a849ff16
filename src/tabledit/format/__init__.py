"""Textual table helpers for the table-editing side of tabledit."""

from .table import TableGrid, parse_table, render_table, set_cell

__all__ = [
    "TableGrid",
    "parse_table",
    "render_table",
    "set_cell",
]
