"""Per-block presentation: tables as editable grids, prose as rendered HTML."""

from dataclasses import dataclass, field
from typing import Any

from .core.model import Block
from .core.ports import EditablePolicy, ProseRenderer
from .format.table import parse_table


@dataclass
class BlockView:
    id: str
    kind: str
    text: str
    html: str | None = None
    editable: bool = False
    grid: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "kind": self.kind, "text": self.text}
        if self.html is not None:
            out["html"] = self.html
        else:
            out["editable"] = self.editable
            out["grid"] = self.grid
        return out


def present_block(
    block: Block,
    renderer: ProseRenderer,
    is_editable: EditablePolicy,
    document_kind: str,
) -> BlockView:
    if block.is_table:
        return BlockView(
            id=block.id,
            kind=block.kind.value,
            text=block.text,
            editable=is_editable(document_kind),
            grid=parse_table(block.text).to_dict(),
        )
    return BlockView(
        id=block.id,
        kind=block.kind.value,
        text=block.text,
        html=renderer.render(block.text),
    )


def present(
    blocks: tuple[Block, ...],
    renderer: ProseRenderer,
    is_editable: EditablePolicy,
    document_kind: str,
) -> list[BlockView]:
    return [present_block(b, renderer, is_editable, document_kind) for b in blocks]
