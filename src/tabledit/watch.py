"""Watch mode - reload the session whenever the source document changes."""

import json
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import TableditError

logger = logging.getLogger(__name__)


class DebounceHandler(FileSystemEventHandler):
    """Collapse bursts of events on one file into a single reload."""

    def __init__(self, document: Path, on_change: Callable[[], None], debounce_ms: int = 150):
        super().__init__()
        self.document = document.resolve()
        self.on_change = on_change
        self.debounce_ms = debounce_ms

        self.pending = False
        self.last_event_time = 0.0

    def _matches(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(str(p)).resolve() == self.document for p in paths)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in ("created", "modified", "moved"):
            return
        if self._matches(event):
            self.pending = True
            self.last_event_time = time.time()

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.pending:
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        if not self.pending:
            return
        self.pending = False
        if self.on_change:
            self.on_change()


def watch_document(
    runtime: Any,
    document: Path,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch a document and reload the runtime's session on every change.

    Args:
        runtime: Runtime holding the session
        document: Path to the Markdown document
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not document.exists():
        print(f"Error: Document not found: {document}", file=sys.stderr)
        return 1

    running = True

    def handle_change() -> None:
        start_time = time.time()
        try:
            runtime.load_from_storage(str(document))
        except (TableditError, OSError, UnicodeDecodeError) as e:
            logger.warning("Reload of %s failed: %s", document, e)
            if json_output:
                print(json.dumps({"type": "error", "message": str(e)}), flush=True)
            else:
                print(f"Error: {e}", file=sys.stderr, flush=True)
            return

        blocks = runtime.session.snapshot()
        duration_ms = int((time.time() - start_time) * 1000)
        if json_output:
            event = {
                "type": "reload",
                "blocks": [{"id": b.id, "kind": b.kind.value} for b in blocks],
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            tables = sum(1 for b in blocks if b.is_table)
            print(
                f"Reloaded: {len(blocks)} blocks, {tables} tables ({duration_ms}ms)",
                flush=True,
            )

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(document, handle_change, debounce_ms)
    observer = Observer()
    observer.schedule(handler, str(document.resolve().parent), recursive=False)

    if not quiet and not json_output:
        print(f"Watching {document} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
