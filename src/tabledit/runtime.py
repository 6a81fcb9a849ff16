"""Runtime wiring helper for the CLI and API."""

import threading
from dataclasses import dataclass, field
from pathlib import Path

from .adapters.docx_exporter import DocxExporter
from .adapters.fs_storage import FsStorage
from .adapters.markdown_renderer import MarkdownRenderer
from .config import TableditConfig, load_config
from .core.ports import EditablePolicy, ExportOptions
from .core.session import DocumentSession
from .policy import always_editable, readonly_policy


@dataclass
class Runtime:
    """Container for all wired components."""
    session: DocumentSession
    storage: FsStorage
    renderer: MarkdownRenderer
    exporter: DocxExporter
    is_editable: EditablePolicy
    config: TableditConfig
    document_kind: str
    document_name: str | None = None
    # load/update/flatten from watcher threads and API handlers go through this
    lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def export_options(self) -> ExportOptions:
        return ExportOptions(
            orientation=self.config.export.orientation,
            margin_twips=self.config.export.margin_twips,
        )

    def load_from_storage(self, name: str | None = None) -> None:
        """(Re)load the named document into the session."""
        name = name or self.document_name
        if name is None:
            raise ValueError("No document to load")
        text = self.storage.read_document(name)
        with self.lock:
            self.session.load(text)
            self.document_name = name


def build_runtime(
    document: Path | None = None,
    config_path: Path | None = None,
    document_kind: str | None = None,
) -> Runtime:
    """Build and wire all components, loading ``document`` if given."""
    document_dir = document.parent if document else None
    config = load_config(config_path=config_path, document_dir=document_dir)

    session = DocumentSession(
        separator=config.segment.separator,
        keep_blank_gaps=config.segment.keep_blank_gaps,
    )
    rt = Runtime(
        session=session,
        storage=FsStorage(Path.cwd()),
        renderer=MarkdownRenderer(),
        exporter=DocxExporter(),
        is_editable=(
            readonly_policy(config.editing.readonly_kinds)
            if config.editing.readonly_kinds
            else always_editable
        ),
        config=config,
        document_kind=document_kind or config.editing.default_kind,
    )
    if document is not None:
        rt.load_from_storage(str(document))
    return rt
