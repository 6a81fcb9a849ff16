from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

# Is a table in a document of this kind (e.g. "full", "condensed") editable?
EditablePolicy = Callable[[str], bool]


class ProseRenderer(Protocol):
    """
    Turn a prose block's Markdown into sanitized, displayable HTML.
    Output is opaque to the core.
    """

    def render(self, text: str) -> str:
        pass


@dataclass(frozen=True)
class ExportOptions:
    orientation: str = "portrait"  # "portrait" | "landscape"
    margin_twips: int = 720


class Exporter(Protocol):
    """
    Convert a flattened document into a binary artifact.
    """

    def export(self, text: str, options: ExportOptions) -> bytes:
        pass


class StorageStrategy(Protocol):
    """
    Where input documents come from; the session itself keeps no state on disk.
    """

    def read_document(self, name: str) -> str:
        pass

    def write_document(self, name: str, contents: str) -> None:
        pass
