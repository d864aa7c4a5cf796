"""
Clients — thin HTTP wrappers around the external services.

- :class:`EmbeddingClient` — text → embedding vector.
- :class:`PineconeClient` — namespaced upsert / query against the index.
- :class:`ChatClient` — message list → raw chat-completion response.
"""

from pinecone_rag.clients.chat import ChatClient
from pinecone_rag.clients.embeddings import EmbeddingClient
from pinecone_rag.clients.pinecone import PineconeClient

__all__ = ["ChatClient", "EmbeddingClient", "PineconeClient"]
