"""Pinecone REST client — namespaced upsert / query and index provisioning.

Failure handling follows one rule across all operations: a request that
cannot be sent raises :class:`~pinecone_rag.exceptions.TransportError`;
a request the service rejects (or answers with an unusable body) is
logged and comes back as a ``DEGRADED`` result.  Callers that need strict
guarantees check ``result.ok``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from pinecone_rag.clients._http import build_session, is_success, post_json
from pinecone_rag.models import (
    EmbeddingRecord,
    IndexResult,
    OperationStatus,
    QueryMatch,
    QueryResult,
    UpsertResult,
)

if TYPE_CHECKING:
    import requests

    from pinecone_rag.config import Settings

logger = logging.getLogger(__name__)


class PineconeClient:
    """Client for one Pinecone index.

    Parameters
    ----------
    settings:
        Supplies the API key, index host and index provisioning defaults.
    session:
        Shared ``requests`` session; a fresh one is created when omitted.
    """

    service = "pinecone"

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._session = session or build_session()

    # -- data plane -----------------------------------------------------------

    def upsert(self, namespace: str, records: Sequence[EmbeddingRecord]) -> UpsertResult:
        """Send *records* to *namespace* as a single batch.

        An empty batch is a no-op that reports success without a request.
        """
        if not records:
            logger.info("Nothing to upsert into namespace %s", namespace)
            return UpsertResult(namespace=namespace, status=OperationStatus.OK)

        body = {"vectors": [r.to_wire() for r in records], "namespace": namespace}
        response = self._post("/vectors/upsert", body)

        if not is_success(response):
            error = f"status {response.status_code}: {response.text}"
            logger.error("Failed to upsert vectors to namespace %s: %s", namespace, error)
            return UpsertResult(namespace=namespace, status=OperationStatus.DEGRADED, error=error)

        count = len(records)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("upsertedCount"), int):
            count = payload["upsertedCount"]
        logger.info("Vectors upserted successfully to namespace %s (%d)", namespace, count)
        return UpsertResult(namespace=namespace, status=OperationStatus.OK, upserted_count=count)

    def query(
        self,
        namespace: str,
        vector: Sequence[float],
        top_k: int = 5,
        include_values: bool = False,
        include_metadata: bool = True,
    ) -> QueryResult:
        """Return up to *top_k* matches for *vector* within *namespace*.

        Ranking and tie-breaking are the service's; the order is kept as
        returned.  Any service-side failure yields an empty, ``DEGRADED``
        result.
        """
        if not vector:
            logger.warning("Skipping query on namespace %s: empty query vector", namespace)
            return self._degraded_query(namespace, "empty query vector")

        body = {
            "namespace": namespace,
            "vector": list(vector),
            "topK": top_k,
            "includeValues": include_values,
            "includeMetadata": include_metadata,
        }
        response = self._post("/query", body)

        if not is_success(response):
            error = f"status {response.status_code}: {response.text}"
            logger.error("Failed to query vector from namespace %s: %s", namespace, error)
            return self._degraded_query(namespace, error)

        try:
            raw_matches = response.json()["matches"]
            matches = [QueryMatch.model_validate(m) for m in raw_matches]
        except (ValueError, KeyError, TypeError) as exc:
            # pydantic's ValidationError is a ValueError
            error = f"malformed query response: {exc}"
            logger.error("Failed to query vector from namespace %s: %s", namespace, error)
            return self._degraded_query(namespace, error)

        logger.debug("Query on namespace %s returned %d matches", namespace, len(matches))
        return QueryResult(namespace=namespace, status=OperationStatus.OK, matches=matches)

    def describe_index_stats(self) -> dict[str, Any]:
        """Return index statistics (per-namespace vector counts), ``{}`` on failure."""
        response = self._post("/describe_index_stats", {})
        if not is_success(response):
            logger.error(
                "Failed to describe index stats: status %d: %s",
                response.status_code,
                response.text,
            )
            return {}
        try:
            stats = response.json()
        except ValueError:
            logger.error("Index stats response is not JSON")
            return {}
        return stats if isinstance(stats, dict) else {}

    # -- control plane --------------------------------------------------------

    def create_index(self, name: str | None = None, dimension: int | None = None) -> IndexResult:
        """Provision a serverless index.

        Whether re-creating an existing index is an error is up to the
        service; a rejection comes back as ``DEGRADED``.
        """
        s = self._settings
        name = name or s.pinecone_index_name
        body = {
            "name": name,
            "dimension": dimension or s.embedding_dimension,
            "metric": s.pinecone_metric,
            "spec": {"serverless": {"cloud": s.pinecone_cloud, "region": s.pinecone_region}},
        }
        url = f"{s.pinecone_control_url.rstrip('/')}/indexes"
        response = post_json(
            self._session,
            self.service,
            url,
            body,
            headers=self._headers(),
            timeout=s.request_timeout,
        )
        if is_success(response):
            logger.info("Index %s created successfully", name)
            return IndexResult(name=name, status=OperationStatus.OK)

        error = f"status {response.status_code}: {response.text}"
        logger.error("Failed to create index %s: %s", name, error)
        return IndexResult(name=name, status=OperationStatus.DEGRADED, error=error)

    # -- internals ------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {"Api-Key": self._settings.pinecone_api_key}

    def _post(self, path: str, body: dict[str, Any]) -> requests.Response:
        return post_json(
            self._session,
            self.service,
            f"{self._settings.index_base_url}{path}",
            body,
            headers=self._headers(),
            timeout=self._settings.request_timeout,
        )

    @staticmethod
    def _degraded_query(namespace: str, error: str) -> QueryResult:
        return QueryResult(namespace=namespace, status=OperationStatus.DEGRADED, error=error)
