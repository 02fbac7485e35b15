"""FastAPI application exposing ingestion and retrieval-augmented answers."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from watchfolder_rag import __version__
from watchfolder_rag.config import settings
from watchfolder_rag.errors import DocumentValidationError, TransportError
from watchfolder_rag.generation.responder import QueryResponder
from watchfolder_rag.ingestion.chunker import validate_chunk_params
from watchfolder_rag.ingestion.coordinator import IngestionCoordinator
from watchfolder_rag.ingestion.loader import document_from_upload

logger = logging.getLogger(__name__)


# ── Request / Response schemas ────────────────────────────────────────
class AskRequest(BaseModel):
    """Incoming question from the user."""

    prompt: str = Field(min_length=1)


class AskResponse(BaseModel):
    """Whole answer returned by ``/ask``."""

    model_config = ConfigDict(populate_by_name=True)

    answer: str = Field(alias="Answer")
    model: str = Field(alias="Model")


# ── Component wiring ──────────────────────────────────────────────────
def build_components() -> tuple[IngestionCoordinator, QueryResponder]:
    """Build the default coordinator and responder from the global settings."""
    from watchfolder_rag.generation.llm import get_generator
    from watchfolder_rag.ingestion.embedder import get_embedder
    from watchfolder_rag.retrieval.chroma_store import ChromaVectorStore
    from watchfolder_rag.retrieval.retriever import SemanticRetriever

    logger.info("[Config] Connecting to provider at: %s", settings.ai_endpoint)
    embedder = get_embedder()
    store = ChromaVectorStore(settings.chroma_collection)
    coordinator = IngestionCoordinator(
        embedder,
        store,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )
    retriever = None
    if settings.retrieval_enabled:
        retriever = SemanticRetriever(
            store,
            embedder,
            default_k=settings.retrieval_k,
            score_threshold=settings.score_threshold,
        )
    return coordinator, QueryResponder(get_generator(), retriever)


def create_app(
    coordinator: IngestionCoordinator | None = None,
    responder: QueryResponder | None = None,
) -> FastAPI:
    """Create the API.  Missing components are built from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        validate_chunk_params(settings.chunk_size, settings.chunk_overlap)
        if app.state.coordinator is None or app.state.responder is None:
            default_coordinator, default_responder = build_components()
            app.state.coordinator = app.state.coordinator or default_coordinator
            app.state.responder = app.state.responder or default_responder
        yield

    app = FastAPI(
        title="Watch-folder RAG API",
        version=__version__,
        description="Upload documents into the knowledge base and ask grounded questions.",
        lifespan=lifespan,
    )
    app.state.coordinator = coordinator
    app.state.responder = responder

    @app.exception_handler(DocumentValidationError)
    async def _validation_error(request: Request, exc: DocumentValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(TransportError)
    async def _transport_error(request: Request, exc: TransportError) -> JSONResponse:
        logger.error("Upstream call failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    # ── Routes ────────────────────────────────────────────────────────
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/ready")
    def ready(request: Request) -> JSONResponse:
        """Readiness probe — 503 until the vector store answers."""
        if request.app.state.coordinator.store.health_check():
            return JSONResponse(status_code=200, content={"status": "ready"})
        return JSONResponse(status_code=503, content={"status": "unavailable"})

    @app.post("/upload")
    def upload(request: Request, file: UploadFile | None = File(None)) -> JSONResponse:
        """Index an uploaded text file.

        Returns 200 when every chunk was indexed and 502 with the same
        report body when only some were.
        """
        payload = file.file.read() if file is not None else None
        document = document_from_upload(file.filename if file is not None else None, payload)
        report = request.app.state.coordinator.ingest(document)

        if report.ok:
            message = f"Successfully indexed {document.source_id}"
        else:
            message = f"Partially indexed {document.source_id}"
        status = 200 if report.ok else 502
        return JSONResponse(status_code=status, content={"message": message, **report.model_dump()})

    @app.post("/ask", response_model=AskResponse)
    def ask(request: Request, body: AskRequest) -> AskResponse:
        """Return the whole answer in one response."""
        answer = request.app.state.responder.respond(body.prompt)
        return AskResponse(answer=answer.answer, model=answer.model)

    @app.post("/ask/stream")
    def ask_stream(request: Request, body: AskRequest) -> StreamingResponse:
        """Stream answer fragments as ``text/plain``, one write per fragment."""
        fragments = request.app.state.responder.respond_streaming(body.prompt)
        return StreamingResponse(_guard_stream(fragments), media_type="text/plain")

    return app


def _guard_stream(fragments: Iterator[str]) -> Iterator[str]:
    """End the stream quietly if the provider fails mid-answer."""
    try:
        yield from fragments
    except Exception:
        logger.exception("Answer stream aborted")


app = create_app()


def main() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
