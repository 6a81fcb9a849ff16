from pathlib import Path

from ..core.ports import StorageStrategy
from ..errors import DocumentNotFound


class FsStorage(StorageStrategy):
    """Documents are files under ``root``; line endings are kept as written."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, name: str) -> Path:
        p = Path(name)
        return p if p.is_absolute() else self.root / p

    def read_document(self, name: str) -> str:
        p = self._path(name)
        if not p.exists():
            raise DocumentNotFound(f"Document not found: {p}")
        with open(p, encoding="utf-8", newline="") as f:
            return f.read()

    def write_document(self, name: str, contents: str) -> None:
        p = self._path(name)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8", newline="") as f:
            f.write(contents)
