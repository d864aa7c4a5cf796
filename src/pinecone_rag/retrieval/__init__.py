"""
Retrieval — query embedding, similarity search and prompt augmentation.

Public surface
--------------
- :class:`Retriever` — embed → query → augment → chat.
- :class:`Answer` — chat response plus the retrieval behind it.
- :func:`build_augmented_prompt`, :func:`build_messages` — prompt assembly.
"""

from pinecone_rag.retrieval.prompts import build_augmented_prompt, build_messages
from pinecone_rag.retrieval.retriever import Answer, Retriever

__all__ = [
    "Answer",
    "Retriever",
    "build_augmented_prompt",
    "build_messages",
]
