"""FastAPI application for the tabledit local JSON API."""

import logging
import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Response, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..adapters.docx_exporter import export_filename
from ..core.model import Block
from ..errors import DocumentNotFound, ExportError
from ..format.table import set_cell
from ..view import present, present_block

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentIn(BaseModel):
    text: str
    kind: str | None = None
    name: str | None = None


class BlockTextIn(BaseModel):
    text: str


class CellIn(BaseModel):
    row: int
    column: int
    value: str


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance holding the document session
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="tabledit API",
        description="Edit the tables of a Markdown document block by block",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    def _views() -> list[dict[str, Any]]:
        blocks = runtime.session.snapshot()
        views = present(blocks, runtime.renderer, runtime.is_editable, runtime.document_kind)
        return [v.to_dict() for v in views]

    def _require_block(block_id: str) -> Block:
        block = runtime.session.get(block_id)
        if block is None:
            raise HTTPException(status_code=404, detail=f"Block {block_id} not found")
        return block

    def _block_view(block_id: str) -> dict[str, Any]:
        block = _require_block(block_id)
        view = present_block(block, runtime.renderer, runtime.is_editable, runtime.document_kind)
        return view.to_dict()

    def _require_editable(block: Block) -> None:
        if block.is_table and not runtime.is_editable(runtime.document_kind):
            raise HTTPException(
                status_code=403,
                detail=f"Tables are read-only for '{runtime.document_kind}' documents",
            )

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "loaded": runtime.session.is_loaded,
            "blocks": len(runtime.session),
        }

    # Handlers that take runtime.lock are plain def so they run in the threadpool.
    @app.post("/document")  # type: ignore[misc]
    def load_document(
        payload: DocumentIn, auth: None = Depends(verify_token)
    ) -> list[dict[str, Any]]:
        """Replace the whole block sequence with a new document."""
        with runtime.lock:
            runtime.session.load(payload.text)
            if payload.kind:
                runtime.document_kind = payload.kind
            if payload.name:
                runtime.document_name = payload.name
        return _views()

    @app.post("/document/reload")  # type: ignore[misc]
    def reload_document(auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Re-read the source document from disk."""
        if runtime.document_name is None:
            raise HTTPException(status_code=404, detail="No source document")
        try:
            runtime.load_from_storage()
        except DocumentNotFound as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        return _views()

    @app.get("/document")  # type: ignore[misc]
    def get_document(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Flattened document text."""
        with runtime.lock:
            text = runtime.session.flatten()
        return {"name": runtime.document_name, "kind": runtime.document_kind, "text": text}

    @app.get("/blocks")  # type: ignore[misc]
    async def list_blocks(auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        return _views()

    @app.get("/blocks/{block_id}")  # type: ignore[misc]
    async def get_block(block_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        return _block_view(block_id)

    @app.put("/blocks/{block_id}")  # type: ignore[misc]
    def update_block(
        block_id: str, payload: BlockTextIn, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Replace the text of one block; other blocks are untouched."""
        with runtime.lock:
            _require_editable(_require_block(block_id))
            runtime.session.update_block(block_id, payload.text)
            return _block_view(block_id)

    @app.put("/blocks/{block_id}/cells")  # type: ignore[misc]
    def update_cell(
        block_id: str, payload: CellIn, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Edit one cell of a table block."""
        with runtime.lock:
            block = _require_block(block_id)
            if not block.is_table:
                raise HTTPException(status_code=400, detail=f"Block {block_id} is not a table")
            _require_editable(block)
            try:
                text = set_cell(block.text, payload.row, payload.column, payload.value)
            except IndexError as e:
                raise HTTPException(status_code=400, detail=str(e)) from e
            runtime.session.update_block(block_id, text)
            return _block_view(block_id)

    @app.post("/export")  # type: ignore[misc]
    def export(auth: None = Depends(verify_token)) -> Response:
        """Export the flattened document as DOCX."""
        with runtime.lock:
            text = runtime.session.flatten()
        try:
            payload = runtime.exporter.export(text, runtime.export_options)
        except ExportError as e:
            logger.error("Export failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e)) from e

        filename = export_filename(runtime.document_name, runtime.document_kind)
        return Response(
            content=payload,
            media_type=DOCX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
