"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import math
from typing import Any

import pytest

from pinecone_rag.config import Settings, load_settings


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fake HTTP layer ────────────────────────────────────────────────────


class FakeResponse:
    """Just enough of ``requests.Response`` for the clients."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else repr(payload))

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def _cosine(a: list[float], b: list[float]) -> float:
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(x * x for x in b))
    if not na or not nb:
        return 0.0
    return sum(x * y for x, y in zip(a, b)) / (na * nb)


class FakeServiceSession:
    """In-memory stand-in for the embedding, index and chat services.

    Requests are routed on the URL suffix.  ``fail`` maps a suffix to a
    status code to force application errors.
    """

    def __init__(self, embeddings: dict[str, list[float]] | None = None, chat_reply: str = "") -> None:
        self.embeddings: dict[str, list[float]] = embeddings or {}
        self.chat_reply = chat_reply
        self.namespaces: dict[str, dict[str, dict[str, Any]]] = {}
        self.fail: dict[str, int] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def calls_to(self, suffix: str) -> list[dict[str, Any]]:
        return [body for url, body in self.calls if url.endswith(suffix)]

    def post(self, url: str, json: dict[str, Any] | None = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
        body = json or {}
        self.calls.append((url, body))
        for suffix, status in self.fail.items():
            if url.endswith(suffix):
                return FakeResponse(status, text=f"forced failure {status}")

        if url.endswith("/embeddings"):
            vector = self.embeddings.get(body["input"])
            if vector is None:
                return FakeResponse(400, text=f"no embedding for {body['input']!r}")
            return FakeResponse(200, {"data": [{"embedding": vector, "index": 0}]})

        if url.endswith("/vectors/upsert"):
            ns = self.namespaces.setdefault(body.get("namespace", ""), {})
            for item in body["vectors"]:
                ns[item["id"]] = item
            return FakeResponse(200, {"upsertedCount": len(body["vectors"])})

        if url.endswith("/query"):
            ns = self.namespaces.get(body.get("namespace", ""), {})
            scored = sorted(
                ((_cosine(body["vector"], item["values"]), item) for item in ns.values()),
                key=lambda pair: pair[0],
                reverse=True,
            )[: body["topK"]]
            matches = []
            for score, item in scored:
                match: dict[str, Any] = {"id": item["id"], "score": score}
                if body.get("includeValues"):
                    match["values"] = item["values"]
                if body.get("includeMetadata") and "metadata" in item:
                    match["metadata"] = item["metadata"]
                matches.append(match)
            return FakeResponse(200, {"matches": matches, "namespace": body.get("namespace", "")})

        if url.endswith("/describe_index_stats"):
            stats = {name: {"vectorCount": len(items)} for name, items in self.namespaces.items()}
            return FakeResponse(200, {"namespaces": stats, "dimension": 2})

        if url.endswith("/indexes"):
            return FakeResponse(201, {"name": body["name"], "dimension": body["dimension"]})

        if url.endswith("/chat/completions"):
            return FakeResponse(200, text=self.chat_reply)

        return FakeResponse(404, text=f"unrouted {url}")


# ── Fixtures ───────────────────────────────────────────────────────────


@pytest.fixture()
def make_settings():
    """Factory for :class:`Settings` that ignores any local ``.env`` file."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "openai_api_key": "sk-test",
            "pinecone_api_key": "pc-test",
            "pinecone_index_host": "test-index.svc.pinecone.io",
            "embedding_dimension": 2,
            "embed_concurrency": 1,
        }
        values.update(overrides)
        return load_settings(_env_file=None, **values)

    return _make


@pytest.fixture()
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture()
def fake_services() -> FakeServiceSession:
    return FakeServiceSession(
        embeddings={"A": [1.0, 0.0], "B": [0.0, 1.0]},
        chat_reply='{"choices": [{"message": {"content": "A"}}]}',
    )


@pytest.fixture()
def response_factory():
    return FakeResponse
