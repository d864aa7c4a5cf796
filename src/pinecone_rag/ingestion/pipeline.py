"""Ingestion pipeline: extract → chunk → embed → upsert.

One run loads one document (or one inline text) into a namespace.  Units
are embedded through a bounded thread pool; a unit whose embedding fails
is reported and left out of the batch rather than stored with an empty
vector.  There is no checkpointing: an interrupted run is simply repeated,
and the stable record ids make the repeat overwrite instead of duplicate.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from pinecone_rag.clients._http import build_session
from pinecone_rag.clients.embeddings import EmbeddingClient
from pinecone_rag.clients.pinecone import PineconeClient
from pinecone_rag.ingestion.chunker import SplitPolicy, chunk_pages
from pinecone_rag.ingestion.loader import extract_pages, resolve_document_path
from pinecone_rag.models import EmbeddingRecord, UpsertResult

if TYPE_CHECKING:
    import requests

    from pinecone_rag.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class IngestionReport:
    """What happened to each unit of one ingestion run.

    Attributes
    ----------
    namespace / source:
        Where the records went and where they came from.
    pages:
        Number of pages read (1 for inline text).
    units:
        Units produced by the chunker, placeholders included.
    skipped:
        Empty units dropped before embedding.
    embedded:
        Units that got a vector and were sent to the store.
    failed:
        Text of every unit whose embedding failed.
    upsert:
        Outcome of the batch upsert.
    """

    namespace: str
    source: str
    pages: int = 0
    units: int = 0
    skipped: int = 0
    embedded: int = 0
    failed: list[str] = field(default_factory=list)
    upsert: UpsertResult | None = None

    @property
    def ok(self) -> bool:
        return not self.failed and (self.upsert is None or self.upsert.ok)

    def summary(self) -> str:
        status = self.upsert.status.value if self.upsert else "not-run"
        return (
            f"Ingested {self.embedded}/{self.units} units from {self.source} "
            f"into namespace '{self.namespace}' (skipped={self.skipped}, "
            f"failed={len(self.failed)}, upsert={status})"
        )


class IngestionPipeline:
    """Composes chunker, embedding client and vector-store client."""

    def __init__(
        self,
        settings: Settings,
        embedder: EmbeddingClient,
        store: PineconeClient,
    ) -> None:
        self._settings = settings
        self._embedder = embedder
        self._store = store

    @classmethod
    def from_settings(
        cls, settings: Settings, session: requests.Session | None = None
    ) -> IngestionPipeline:
        """Build the pipeline with one shared HTTP session for both clients."""
        session = session or build_session()
        return cls(settings, EmbeddingClient(settings, session), PineconeClient(settings, session))

    # -- public API -----------------------------------------------------------

    def ingest_document(self, path: str | Path, namespace: str | None = None) -> IngestionReport:
        """Load the PDF at *path* (relative to the knowledge base) into *namespace*."""
        resolved = resolve_document_path(path, self._settings.knowledge_base_dir)
        pages = extract_pages(resolved)
        return self.ingest_pages(pages, namespace=namespace, source=resolved.name)

    def ingest_text(
        self, text: str, namespace: str | None = None, source: str = "inline"
    ) -> IngestionReport:
        """Store a free-standing piece of text, chunked like a one-page document."""
        return self.ingest_pages([text], namespace=namespace, source=source)

    def ingest_pages(
        self,
        pages: Sequence[str | None],
        namespace: str | None = None,
        source: str = "unknown",
    ) -> IngestionReport:
        """Chunk, embed and upsert already-extracted page texts.

        ``None`` entries mark pages whose extraction failed.
        """
        namespace = namespace or self._settings.default_namespace
        chunks = chunk_pages(
            pages,
            source=source,
            max_chars=self._settings.max_chunk_chars,
            policy=SplitPolicy(self._settings.split_policy),
        )
        report = IngestionReport(namespace=namespace, source=source, pages=len(pages), units=len(chunks))

        if self._settings.skip_empty_chunks:
            kept = [c for c in chunks if c.page_content.strip()]
            report.skipped = len(chunks) - len(kept)
        else:
            kept = chunks

        vectors = self._embed_all([c.page_content for c in kept])

        records: list[EmbeddingRecord] = []
        for chunk, values in zip(kept, vectors):
            if not values:
                report.failed.append(chunk.page_content)
                continue
            records.append(EmbeddingRecord.from_chunk(namespace, chunk, values))
        report.embedded = len(records)

        if report.failed:
            logger.warning("%d of %d units failed to embed", len(report.failed), len(kept))

        report.upsert = self._store.upsert(namespace, records)
        logger.info(report.summary())
        return report

    # -- internals ------------------------------------------------------------

    def _embed_all(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* keeping input order; failures come back as ``[]``."""
        workers = min(self._settings.embed_concurrency, len(texts))
        if workers <= 1:
            return [self._embedder.try_embed(t) for t in texts]
        logger.info("Embedding %d units with %d workers", len(texts), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="embed") as pool:
            return list(pool.map(self._embedder.try_embed, texts))
