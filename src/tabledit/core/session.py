"""Stateful holder of the current block sequence."""

import logging
from collections.abc import Iterator
from dataclasses import replace

from .model import Block, BlockId
from .segmenter import segment

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n\n"


class DocumentSession:
    """
    Holds the blocks of one loaded document.

    - ``load`` replaces the whole sequence (the only way count, order or kind change)
    - ``update_block`` swaps the text of one block, addressed by id
    - ``snapshot`` / ``flatten`` / ``splice`` are read-only and may be called at any time
    - ``flatten`` joins blocks for rendering and export; ``splice`` rebuilds the
      source text for writing edits back

    Not thread-safe: callers delivering events concurrently must serialize
    calls into a session.
    """

    def __init__(self, separator: str = DEFAULT_SEPARATOR, keep_blank_gaps: bool = False):
        self.separator = separator
        self.keep_blank_gaps = keep_blank_gaps
        self._blocks: list[Block] | None = None
        self._source = ""

    @property
    def is_loaded(self) -> bool:
        return self._blocks is not None

    def load(self, document: str) -> tuple[Block, ...]:
        self._blocks = segment(document, keep_blank_gaps=self.keep_blank_gaps)
        self._source = document
        logger.debug("Loaded document: %d blocks", len(self._blocks))
        return self.snapshot()

    def get(self, block_id: BlockId) -> Block | None:
        for block in self._blocks or []:
            if block.id == block_id:
                return block
        return None

    def update_block(self, block_id: BlockId, text: str) -> bool:
        """
        Replace the text of the block with ``block_id``.

        Unknown (stale) ids and an unloaded session are a no-op; returns
        whether a block was changed.
        """
        if self._blocks is None:
            return False
        for i, block in enumerate(self._blocks):
            if block.id == block_id:
                self._blocks[i] = replace(block, text=text)
                return True
        logger.debug("Ignoring update for unknown block %s", block_id)
        return False

    def snapshot(self) -> tuple[Block, ...]:
        return tuple(self._blocks or ())

    def flatten(self) -> str:
        return self.separator.join(b.text for b in self._blocks or ())

    def splice(self) -> str:
        """
        The loaded document with each block's source range swapped for its
        current text. Text outside the blocks (dropped blank gaps) is kept as
        it was, so unedited blocks keep their offsets and ids.
        """
        parts: list[str] = []
        pos = 0
        for block in self._blocks or ():
            parts.append(self._source[pos:block.range.start])
            parts.append(block.text)
            pos = block.range.end
        parts.append(self._source[pos:])
        return "".join(parts)

    def __len__(self) -> int:
        return len(self._blocks or ())

    def __iter__(self) -> Iterator[Block]:
        return iter(self.snapshot())
