"""Grid view of a pipe table block, and back to text."""

import re
from dataclasses import dataclass, field

_CELL_SPLIT = re.compile(r"(?<!\\)\|")
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class TableGrid:
    header: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)

    @property
    def width(self) -> int:
        return max([len(self.header)] + [len(r) for r in self.rows])

    def to_dict(self) -> dict:
        return {"header": list(self.header), "rows": [list(r) for r in self.rows]}


def _is_delimiter(line: str) -> bool:
    stripped = line.strip()
    return "-" in stripped and not re.sub(r"[|:\-\s]", "", stripped)


def _split_row(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [c.strip().replace("\\|", "|") for c in _CELL_SPLIT.split(stripped)]


def parse_table(text: str) -> TableGrid:
    """
    Read a table block's text into header + body rows.

    The delimiter row (second line) is dropped. Ragged rows are kept as they
    are; nothing here validates the table.
    """
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if not lines:
        return TableGrid()

    grid = TableGrid(header=_split_row(lines[0]))
    body = lines[1:]
    if body and _is_delimiter(body[0]):
        body = body[1:]
    grid.rows = [_split_row(ln) for ln in body]
    return grid


def _escape_cell(value: str) -> str:
    # a row must stay on one line or the table splits in two
    return _LINE_BREAK.sub(" ", value).replace("|", "\\|")


def _format_row(cells: list[str], width: int) -> str:
    padded = [_escape_cell(c) for c in cells] + [""] * (width - len(cells))
    return "| " + " | ".join(padded) + " |"


def render_table(grid: TableGrid) -> str:
    """Write a grid as a pipe table that segments back into one table block."""
    width = grid.width
    if width == 0:
        return ""
    lines = [_format_row(grid.header, width), "|" + "---|" * width]
    lines.extend(_format_row(r, width) for r in grid.rows)
    return "\n".join(lines) + "\n"


def set_cell(text: str, row: int, column: int, value: str) -> str:
    """
    Return *text* with one cell replaced. Row 0 is the header row.

    Raises IndexError when (row, column) is outside the table.
    """
    grid = parse_table(text)
    if row < 0 or row > len(grid.rows) or column < 0 or column >= grid.width:
        raise IndexError(f"Cell ({row}, {column}) outside {len(grid.rows) + 1}x{grid.width} table")

    cells = grid.header if row == 0 else grid.rows[row - 1]
    if column >= len(cells):
        cells.extend([""] * (column + 1 - len(cells)))
    cells[column] = value
    return render_table(grid)
