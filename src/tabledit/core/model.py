from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

BlockId = str


class BlockKind(str, Enum):
    PROSE = "prose"
    TABLE = "table"

    @property
    def prefix(self) -> str:
        return "tbl" if self is BlockKind.TABLE else "md"


@dataclass(frozen=True)
class Range:
    start: int  # char offsets in the text the block was segmented from
    end: int


@dataclass(frozen=True)
class Block:
    id: BlockId
    kind: BlockKind
    text: str
    range: Range

    @property
    def is_table(self) -> bool:
        return self.kind is BlockKind.TABLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "text": self.text,
            "range": {"start": self.range.start, "end": self.range.end},
        }


def make_block_id(kind: BlockKind, offset: int) -> BlockId:
    """Ids are derived from kind + start offset, so they are unique per pass."""
    return f"{kind.prefix}-{offset}"
