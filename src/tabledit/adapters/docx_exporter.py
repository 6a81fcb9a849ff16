"""Export a flattened document to a standalone DOCX file."""
from __future__ import annotations

import logging
import re
from io import BytesIO
from pathlib import Path

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.shared import Twips
from markdown_it import MarkdownIt

from ..core.ports import Exporter, ExportOptions
from ..core.segmenter import segment
from ..errors import ExportError
from ..format.table import parse_table

logger = logging.getLogger(__name__)

_LIST_STYLES = {"bullet_list_open": "List Bullet", "ordered_list_open": "List Number"}


def _sanitize_stem(value: str) -> str:
    """Return a filesystem-safe stem for the generated document."""

    sanitized = re.sub(r"[^\w-]+", "_", value).strip("._")
    return sanitized or "document"


def export_filename(document_name: str | None, document_kind: str) -> str:
    stem = _sanitize_stem(Path(document_name or "").stem)
    return f"{stem}_{_sanitize_stem(document_kind)}.docx"


def next_available_path(directory: Path, filename: str) -> Path:
    candidate = directory / filename
    if not candidate.exists():
        return candidate

    stem = candidate.stem
    suffix = candidate.suffix
    counter = 1
    while True:
        updated = directory / f"{stem}_{counter}{suffix}"
        if not updated.exists():
            return updated
        counter += 1


def _remove_placeholder_paragraph(document) -> None:
    """Remove the placeholder paragraph that python-docx creates by default."""

    if document.paragraphs:
        element = document.paragraphs[0]._element  # type: ignore[attr-defined]
        parent = element.getparent()
        if parent is not None:
            parent.remove(element)


def _apply_page_setup(document, options: ExportOptions) -> None:
    for section in document.sections:
        landscape = options.orientation == "landscape"
        width, height = section.page_width, section.page_height
        if landscape != (width > height):
            section.page_width, section.page_height = height, width
        section.orientation = WD_ORIENT.LANDSCAPE if landscape else WD_ORIENT.PORTRAIT
        margin = Twips(options.margin_twips)
        section.top_margin = margin
        section.right_margin = margin
        section.bottom_margin = margin
        section.left_margin = margin


def _add_inline(paragraph, inline) -> None:
    bold = italic = False
    for child in inline.children or []:
        if child.type == "strong_open":
            bold = True
        elif child.type == "strong_close":
            bold = False
        elif child.type == "em_open":
            italic = True
        elif child.type == "em_close":
            italic = False
        elif child.type in ("softbreak", "hardbreak"):
            paragraph.add_run("\n" if child.type == "hardbreak" else " ")
        elif child.type in ("text", "code_inline"):
            run = paragraph.add_run(child.content)
            run.bold = bold or None
            run.italic = italic or None


def _append_table(document, text: str) -> None:
    grid = parse_table(text)
    width = grid.width
    if width == 0:
        return

    rows = [grid.header] + grid.rows
    docx_table = document.add_table(rows=len(rows), cols=width)
    docx_table.style = "Table Grid"

    for row_index, row in enumerate(rows):
        for column_index in range(width):
            value = row[column_index] if column_index < len(row) else ""
            cell = docx_table.cell(row_index, column_index)
            cell.text = value
            if row_index == 0:
                for run in cell.paragraphs[0].runs:
                    run.bold = True


class DocxExporter(Exporter):
    def __init__(self):
        self.md = MarkdownIt("commonmark", {"html": False})

    def _append_prose(self, document, text: str) -> None:
        tokens = self.md.parse(text)
        lists: list[str] = []
        quoted = 0
        i = 0
        while i < len(tokens):
            tok = tokens[i]
            if tok.type in _LIST_STYLES:
                lists.append(_LIST_STYLES[tok.type])
            elif tok.type in ("bullet_list_close", "ordered_list_close"):
                lists.pop()
            elif tok.type == "blockquote_open":
                quoted += 1
            elif tok.type == "blockquote_close":
                quoted -= 1
            elif tok.type == "heading_open":
                level = int(tok.tag[1:])
                heading = document.add_heading(level=level)
                _add_inline(heading, tokens[i + 1])
                i += 2
            elif tok.type == "paragraph_open":
                style = lists[-1] if lists else ("Quote" if quoted else None)
                paragraph = document.add_paragraph(style=style)
                _add_inline(paragraph, tokens[i + 1])
                i += 2
            elif tok.type in ("fence", "code_block"):
                document.add_paragraph(tok.content.rstrip("\n"))
            i += 1

    def export(self, text: str, options: ExportOptions | None = None) -> bytes:
        """Build a DOCX from Markdown: tables become Word tables, the rest paragraphs."""
        options = options or ExportOptions()
        try:
            document = Document()
            _remove_placeholder_paragraph(document)
            _apply_page_setup(document, options)

            for block in segment(text):
                if block.is_table:
                    _append_table(document, block.text)
                else:
                    self._append_prose(document, block.text)

            buffer = BytesIO()
            document.save(buffer)
        except (KeyError, ValueError, OSError) as e:
            raise ExportError(f"DOCX export failed: {e}") from e

        payload = buffer.getvalue()
        logger.info("Exported %d chars to %d bytes of DOCX", len(text), len(payload))
        return payload


def write_export(payload: bytes, out_dir: Path, filename: str) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    target = next_available_path(out_dir, filename)
    target.write_bytes(payload)
    return target
