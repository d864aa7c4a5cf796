"""Domain models for stored records, query matches and operation outcomes.

Records and matches cross the wire, so they are Pydantic models.  The
outcome types are plain dataclasses: they never leave the process and only
exist so callers can tell "no matches" apart from "the store call failed".
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from langchain_core.documents import Document


def stable_record_id(namespace: str, source: str, page: int | None, chunk_index: int) -> str:
    """Return a deterministic vector id for one chunk.

    Identical text at two positions gets two ids; re-ingesting the same
    document overwrites its previous vectors instead of duplicating them.
    """
    key = f"{namespace}|{source}|{page if page is not None else '-'}|{chunk_index}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]


class EmbeddingRecord(BaseModel):
    """One vector ready for upsert.

    Attributes
    ----------
    id:
        Vector id in the index (see :func:`stable_record_id`).
    values:
        The embedding.
    metadata:
        Payload stored next to the vector; ``"text"`` holds the chunk.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return str(self.metadata.get("text", self.id))

    @classmethod
    def from_chunk(cls, namespace: str, chunk: Document, values: list[float]) -> EmbeddingRecord:
        meta = chunk.metadata
        source = str(meta.get("source", "unknown"))
        page = meta.get("page")
        chunk_index = int(meta.get("chunk_index", 0))
        return cls(
            id=stable_record_id(namespace, source, page, chunk_index),
            values=values,
            metadata={
                "text": chunk.page_content,
                "source": source,
                "page": page if page is not None else -1,
                "chunk_index": chunk_index,
            },
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the index's upsert item shape."""
        item: dict[str, Any] = {"id": self.id, "values": list(self.values)}
        if self.metadata:
            item["metadata"] = dict(self.metadata)
        return item


class QueryMatch(BaseModel):
    """A single similarity-query hit as returned by the index."""

    model_config = ConfigDict(extra="ignore")

    id: str
    score: float | None = None
    values: list[float] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def text(self) -> str:
        """Stored chunk text; records written with text-as-id fall back to the id."""
        text = self.metadata.get("text")
        return text if isinstance(text, str) else self.id


class OperationStatus(str, Enum):
    """Outcome of a call against a remote service."""

    OK = "ok"
    DEGRADED = "degraded"


@dataclass
class UpsertResult:
    namespace: str
    status: OperationStatus
    upserted_count: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is OperationStatus.OK


@dataclass
class QueryResult:
    """Matches of one similarity query, in the order the index returned them.

    Iterating, indexing or taking ``len()`` of the result works on
    ``matches`` directly, so it can be used wherever a match list is
    expected.
    """

    namespace: str
    status: OperationStatus
    matches: list[QueryMatch] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is OperationStatus.OK

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.matches]

    def __iter__(self) -> Iterator[QueryMatch]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __getitem__(self, index: int) -> QueryMatch:
        return self.matches[index]


@dataclass
class IndexResult:
    name: str
    status: OperationStatus
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is OperationStatus.OK
