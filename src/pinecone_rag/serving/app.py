"""FastAPI application exposing ingestion and retrieval as a REST API."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pinecone_rag import __version__
from pinecone_rag.config import load_settings
from pinecone_rag.exceptions import ConfigurationError, TransportError
from pinecone_rag.ingestion.pipeline import IngestionPipeline
from pinecone_rag.retrieval.retriever import Retriever

app = FastAPI(
    title="Pinecone RAG API",
    version=__version__,
    description="REST interface to the Pinecone-backed retrieval pipeline.",
)


# ── Dependencies ──────────────────────────────────────────────────────
@lru_cache(maxsize=1)
def get_retriever() -> Retriever:
    return Retriever.from_settings(load_settings())


@lru_cache(maxsize=1)
def get_pipeline() -> IngestionPipeline:
    return IngestionPipeline.from_settings(load_settings())


# ── Request / Response schemas ────────────────────────────────────────
class QueryRequest(BaseModel):
    """Incoming question from the user."""

    query: str = Field(min_length=1)
    namespace: str | None = None


class QueryResponse(BaseModel):
    """Raw chat response plus the context that was retrieved for it."""

    answer: str
    context: list[str] = []
    retrieval_status: str


class IngestTextRequest(BaseModel):
    text: str = Field(min_length=1)
    namespace: str | None = None
    source: str = "inline"


class IngestResponse(BaseModel):
    namespace: str
    units: int
    embedded: int
    skipped: int
    failed: int
    upsert_status: str


# ── Error mapping ─────────────────────────────────────────────────────
@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(TransportError)
async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": exc.message})


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/query", response_model=QueryResponse)
def query(request: QueryRequest, retriever: Retriever = Depends(get_retriever)) -> QueryResponse:
    """Answer a question from the retrieved context."""
    result = retriever.answer(request.query, namespace=request.namespace)
    return QueryResponse(
        answer=result.body,
        context=result.context,
        retrieval_status=result.retrieval.status.value,
    )


@app.post("/ingest/text", response_model=IngestResponse)
def ingest_text(
    request: IngestTextRequest, pipeline: IngestionPipeline = Depends(get_pipeline)
) -> IngestResponse:
    """Chunk, embed and store a piece of text."""
    report = pipeline.ingest_text(request.text, namespace=request.namespace, source=request.source)
    return IngestResponse(
        namespace=report.namespace,
        units=report.units,
        embedded=report.embedded,
        skipped=report.skipped,
        failed=len(report.failed),
        upsert_status=report.upsert.status.value if report.upsert else "not-run",
    )
