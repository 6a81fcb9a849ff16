"""Split a Markdown document into prose and table blocks."""

import logging
import re

from .model import Block, BlockKind, Range, make_block_id

logger = logging.getLogger(__name__)

_EOL = r"(?:\r?\n|\r)"
_ROW = r"\|[^\r\n]*\|"

# header row at the start of a line, delimiter row of pipes and hyphen runs,
# then any further rows. No colons, spaces or indentation in the delimiter.
# The lookbehind accepts \n, \r\n and bare \r line starts.
TABLE_RE = re.compile(
    rf"(?<![^\r\n]){_ROW}{_EOL}?\|(?:-+\|)+{_EOL}?(?:{_ROW}{_EOL}?)*"
)


def _prose(document: str, start: int, end: int, keep_blank_gaps: bool) -> Block | None:
    text = document[start:end]
    if not text:
        return None
    if not keep_blank_gaps and not text.strip():
        return None
    return Block(
        id=make_block_id(BlockKind.PROSE, start),
        kind=BlockKind.PROSE,
        text=text,
        range=Range(start, end),
    )


def segment(document: str, keep_blank_gaps: bool = False) -> list[Block]:
    """
    Partition *document* into an ordered list of blocks.

    Table regions are matched greedily and never overlap; the text between
    them becomes prose. Gaps that are empty (or only whitespace, unless
    ``keep_blank_gaps``) are dropped. A document with no table region comes
    back as a single prose block, verbatim.

    Never raises for string input.
    """
    blocks: list[Block] = []
    last = 0

    for m in TABLE_RE.finditer(document):
        gap = _prose(document, last, m.start(), keep_blank_gaps)
        if gap is not None:
            blocks.append(gap)
        blocks.append(
            Block(
                id=make_block_id(BlockKind.TABLE, m.start()),
                kind=BlockKind.TABLE,
                text=m.group(0),
                range=Range(m.start(), m.end()),
            )
        )
        last = m.end()

    if not blocks:
        if document:
            blocks.append(
                Block(
                    id=make_block_id(BlockKind.PROSE, 0),
                    kind=BlockKind.PROSE,
                    text=document,
                    range=Range(0, len(document)),
                )
            )
    else:
        tail = _prose(document, last, len(document), keep_blank_gaps)
        if tail is not None:
            blocks.append(tail)

    logger.debug(
        "Segmented %d chars into %d blocks (%d tables)",
        len(document),
        len(blocks),
        sum(1 for b in blocks if b.is_table),
    )
    return blocks


def kinds(blocks: list[Block]) -> list[BlockKind]:
    return [b.kind for b in blocks]
