"""Retriever — query embedding, similarity search and answer generation.

Usage::

    from pinecone_rag.config import load_settings
    from pinecone_rag.retrieval.retriever import Retriever

    retriever = Retriever.from_settings(load_settings())
    result = retriever.answer("What does Tanmay like?")
    print(result.body)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pinecone_rag.clients._http import build_session
from pinecone_rag.clients.chat import ChatClient
from pinecone_rag.clients.embeddings import EmbeddingClient
from pinecone_rag.clients.pinecone import PineconeClient
from pinecone_rag.models import OperationStatus, QueryResult
from pinecone_rag.retrieval.prompts import build_messages

if TYPE_CHECKING:
    import requests
    from langchain_core.messages import BaseMessage

    from pinecone_rag.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class Answer:
    """Raw chat response together with the retrieval it was built from."""

    query: str
    body: str
    retrieval: QueryResult

    @property
    def context(self) -> list[str]:
        return self.retrieval.texts


class Retriever:
    """Composes the embedding client, the vector store and the chat client.

    Parameters
    ----------
    settings:
        Supplies the default namespace, ``top_k`` and system prompt.
    embedder / store:
        Clients used for the query embedding and similarity search.
    chat:
        Needed only by :meth:`answer`.
    """

    def __init__(
        self,
        settings: Settings,
        embedder: EmbeddingClient,
        store: PineconeClient,
        chat: ChatClient | None = None,
    ) -> None:
        self._settings = settings
        self._embedder = embedder
        self._store = store
        self._chat = chat

    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session | None = None) -> Retriever:
        session = session or build_session()
        return cls(
            settings,
            EmbeddingClient(settings, session),
            PineconeClient(settings, session),
            ChatClient(settings, session),
        )

    # -- public API -----------------------------------------------------------

    def retrieve(
        self, query: str, namespace: str | None = None, top_k: int | None = None
    ) -> QueryResult:
        """Embed *query* and return the closest stored units in *namespace*.

        If the query cannot be embedded the store is not contacted and an
        empty ``DEGRADED`` result is returned.
        """
        namespace = namespace or self._settings.default_namespace
        vector = self._embedder.try_embed(query)
        if not vector:
            return QueryResult(
                namespace=namespace,
                status=OperationStatus.DEGRADED,
                error="query embedding failed",
            )
        return self._store.query(
            namespace, vector, top_k=top_k or self._settings.top_k, include_values=False
        )

    def augment(self, query: str, namespace: str | None = None) -> list[BaseMessage]:
        """Return the message list for *query* with retrieved context woven in."""
        messages, _ = self._augment(query, namespace)
        return messages

    def answer(self, query: str, namespace: str | None = None) -> Answer:
        """Retrieve, augment and send the prompt to the chat endpoint."""
        if self._chat is None:
            raise RuntimeError("Retriever was built without a chat client")
        messages, retrieval = self._augment(query, namespace)
        body = self._chat.complete(messages)
        return Answer(query=query, body=body, retrieval=retrieval)

    # -- internals ------------------------------------------------------------

    def _augment(
        self, query: str, namespace: str | None
    ) -> tuple[list[BaseMessage], QueryResult]:
        retrieval = self.retrieve(query, namespace)
        if not retrieval.ok:
            logger.warning(
                "Retrieval degraded for namespace %s (%s); prompting without context",
                retrieval.namespace,
                retrieval.error,
            )
        messages = build_messages(query, retrieval.matches, self._settings.system_prompt)
        return messages, retrieval
