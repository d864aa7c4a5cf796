"""OpenAI-compatible embedding client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pinecone_rag.clients._http import build_session, is_success, post_json
from pinecone_rag.exceptions import ResponseShapeError, ServiceError

if TYPE_CHECKING:
    import requests

    from pinecone_rag.config import Settings

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Turns one text into one embedding vector, one request per call.

    Parameters
    ----------
    settings:
        Supplies the API key, endpoint, model and expected dimension.
    session:
        Shared ``requests`` session; a fresh one is created when omitted.
    """

    service = "embeddings"

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._session = session or build_session()

    @property
    def dimension(self) -> int:
        return self._settings.embedding_dimension

    def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*.

        Empty text is sent as-is; the service decides what it means.

        Raises
        ------
        TransportError
            The request could not be sent.
        ServiceError
            Non-success status; the message carries status code and body.
        ResponseShapeError
            No ``data[0].embedding`` in the body, or its length differs from
            the configured dimension.
        """
        response = post_json(
            self._session,
            self.service,
            self._settings.embeddings_url,
            {"input": text, "model": self._settings.embedding_model},
            headers={"Authorization": f"Bearer {self._settings.openai_api_key}"},
            timeout=self._settings.request_timeout,
        )
        if not is_success(response):
            raise ServiceError(self.service, response.status_code, response.text)

        try:
            embedding = response.json()["data"][0]["embedding"]
        except ValueError as exc:
            raise ResponseShapeError(self.service, "body is not JSON") from exc
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseShapeError(self.service, "no embedding at data[0]") from exc

        if not isinstance(embedding, list) or len(embedding) != self.dimension:
            size = len(embedding) if isinstance(embedding, list) else "non-list"
            raise ResponseShapeError(
                self.service, f"expected {self.dimension} dimensions, got {size}"
            )
        return [float(v) for v in embedding]

    def try_embed(self, text: str) -> list[float]:
        """Like :meth:`embed`, but service and shape errors yield ``[]``.

        Used by the pipelines so a single bad unit does not abort a batch.
        Transport errors still propagate.
        """
        try:
            return self.embed(text)
        except (ServiceError, ResponseShapeError) as exc:
            logger.error("Error generating embeddings: %s", exc)
            return []
