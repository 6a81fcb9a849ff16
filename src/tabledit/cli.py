"""CLI for tabledit - edit the tables of a Markdown document block by block."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.docx_exporter import export_filename, write_export
from .format.table import parse_table, set_cell
from .runtime import build_runtime
from .view import present


def _emit(args: argparse.Namespace, rt: Any) -> None:
    """Write the edited document back to the file or to stdout."""
    text = rt.session.splice()
    if args.write:
        rt.storage.write_document(str(args.file), text)
        if not args.quiet:
            print(f"Wrote {args.file}", file=sys.stderr)
    else:
        sys.stdout.write(text)


def _check_editable(rt: Any, block_id: str) -> int:
    block = rt.session.get(block_id)
    if block is None:
        print(f"Block {block_id} not found", file=sys.stderr)
        return 1
    if block.is_table and not rt.is_editable(rt.document_kind):
        print(f"Tables are read-only for '{rt.document_kind}' documents", file=sys.stderr)
        return 1
    return 0


def cmd_segment(args: argparse.Namespace, rt: Any) -> int:
    """List the blocks of a document."""
    blocks = rt.session.snapshot()
    if args.json:
        print(json.dumps([b.to_dict() for b in blocks], indent=2, ensure_ascii=False))
        return 0

    for b in blocks:
        lines = len(b.text.splitlines())
        print(f"{b.id}\t{b.kind.value}\t{b.range.start}-{b.range.end}\t{lines} lines")
    return 0


def cmd_flatten(args: argparse.Namespace, rt: Any) -> int:
    """Print the document reassembled from its blocks."""
    sys.stdout.write(rt.session.flatten())
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Render prose blocks to HTML and show tables as grids."""
    views = present(rt.session.snapshot(), rt.renderer, rt.is_editable, rt.document_kind)
    if args.json:
        print(json.dumps([v.to_dict() for v in views], indent=2, ensure_ascii=False))
        return 0

    for v in views:
        if v.html is not None:
            print(v.html, end="")
        else:
            mode = "editable" if v.editable else "read-only"
            print(f"<!-- {v.id} ({mode}) -->")
            print(v.text, end="" if v.text.endswith("\n") else "\n")
    return 0


def cmd_update(args: argparse.Namespace, rt: Any) -> int:
    """Replace one block's text."""
    rc = _check_editable(rt, args.block_id)
    if rc:
        return rc

    text = args.text if args.text is not None else sys.stdin.read()
    rt.session.update_block(args.block_id, text)
    _emit(args, rt)
    return 0


def cmd_set_cell(args: argparse.Namespace, rt: Any) -> int:
    """Edit one cell of a table block."""
    rc = _check_editable(rt, args.block_id)
    if rc:
        return rc

    block = rt.session.get(args.block_id)
    if not block.is_table:
        print(f"Block {args.block_id} is not a table", file=sys.stderr)
        return 1

    rt.session.update_block(args.block_id, set_cell(block.text, args.row, args.column, args.value))
    _emit(args, rt)
    return 0


def cmd_grid(args: argparse.Namespace, rt: Any) -> int:
    """Print a table block as JSON rows."""
    block = rt.session.get(args.block_id)
    if block is None or not block.is_table:
        print(f"Table block {args.block_id} not found", file=sys.stderr)
        return 1
    print(json.dumps(parse_table(block.text).to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_export(args: argparse.Namespace, rt: Any) -> int:
    """Export the document as DOCX."""
    payload = rt.exporter.export(rt.session.flatten(), rt.export_options)
    out_dir = args.out if args.out else rt.config.export.out
    filename = export_filename(str(args.file), rt.document_kind)
    target = write_export(payload, Path(out_dir), filename)
    if not args.quiet:
        print(target)
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Reload the document whenever it changes on disk."""
    from .watch import watch_document

    return watch_document(
        rt,
        args.file,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    token_arg = getattr(args, "token", "auto")
    token = None

    if token_arg == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == "none":
        print("Warning: Running without authentication. Only use in trusted environments.")
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    host = args.host or rt.config.api.host
    port = args.port or rt.config.api.port

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def _version_text() -> str:
    return (
        f"tabledit {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabledit", description="Edit the tables of a Markdown document"
    )
    parser.add_argument(
        "--version", action="version", version=_version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/tabledit.toml, <doc dir>/tabledit.toml)",
    )
    parser.add_argument(
        "--kind",
        default=None,
        help="Document kind, e.g. full, condensed, summary-table (default: from config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    def add_file(p: argparse.ArgumentParser) -> None:
        p.add_argument("file", type=Path, help="Markdown document")

    add_file(subparsers.add_parser("segment", help="List prose and table blocks"))
    add_file(subparsers.add_parser("flatten", help="Print the reassembled document"))
    add_file(subparsers.add_parser("render", help="Render blocks for display"))

    parser_grid = subparsers.add_parser("grid", help="Print a table block as rows")
    add_file(parser_grid)
    parser_grid.add_argument("block_id", help="Block id, e.g. tbl-7")

    parser_update = subparsers.add_parser("update", help="Replace the text of one block")
    add_file(parser_update)
    parser_update.add_argument("block_id", help="Block id, e.g. tbl-7")
    parser_update.add_argument(
        "--text", default=None, help="New block text (default: read stdin)"
    )
    parser_update.add_argument(
        "--write", action="store_true", help="Write the result back to the file"
    )

    parser_cell = subparsers.add_parser("set-cell", help="Edit one cell of a table block")
    add_file(parser_cell)
    parser_cell.add_argument("block_id", help="Table block id, e.g. tbl-7")
    parser_cell.add_argument("row", type=int, help="Row index (0 = header)")
    parser_cell.add_argument("column", type=int, help="Column index")
    parser_cell.add_argument("value", help="New cell value")
    parser_cell.add_argument(
        "--write", action="store_true", help="Write the result back to the file"
    )

    parser_export = subparsers.add_parser("export", help="Export to Word (.docx)")
    add_file(parser_export)
    parser_export.add_argument(
        "--out", type=Path, default=None, help="Output directory (default: from config)"
    )

    parser_watch = subparsers.add_parser("watch", help="Reload the document on change")
    add_file(parser_watch)
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=150,
        help="Debounce window in milliseconds (default: 150)"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    add_file(parser_serve)
    parser_serve.add_argument(
        "--host", default=None, help="Host to bind to (default: from config)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=None, help="Port to bind to (default: from config)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true", help="Enable CORS (default: false)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    handlers = {
        "segment": cmd_segment,
        "flatten": cmd_flatten,
        "render": cmd_render,
        "grid": cmd_grid,
        "update": cmd_update,
        "set-cell": cmd_set_cell,
        "export": cmd_export,
        "watch": cmd_watch,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        rt = build_runtime(document=args.file, config_path=args.config, document_kind=args.kind)
        exit_code = handler(args, rt)
        sys.exit(exit_code)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
