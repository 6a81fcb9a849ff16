"""tabledit - segment Markdown documents into editable table and prose blocks."""

__version__ = "0.1.0"
