"""Unit tests for the Pinecone client and record models."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
from langchain_core.documents import Document

from pinecone_rag.clients.pinecone import PineconeClient
from pinecone_rag.exceptions import TransportError
from pinecone_rag.models import EmbeddingRecord, OperationStatus, QueryMatch, stable_record_id


def _record(text: str, values: list[float], index: int = 0) -> EmbeddingRecord:
    chunk = Document(page_content=text, metadata={"source": "cv.pdf", "page": 1, "chunk_index": index})
    return EmbeddingRecord.from_chunk("ns1", chunk, values)


# ── Record models ──────────────────────────────────────────────────────


class TestModels:
    def test_stable_id_is_deterministic(self) -> None:
        assert stable_record_id("ns1", "cv.pdf", 1, 0) == stable_record_id("ns1", "cv.pdf", 1, 0)

    def test_identical_text_gets_distinct_ids(self) -> None:
        first = _record("same", [1.0, 0.0], index=0)
        second = _record("same", [1.0, 0.0], index=1)
        assert first.id != second.id

    def test_namespace_is_part_of_the_key(self) -> None:
        assert stable_record_id("ns1", "cv.pdf", 1, 0) != stable_record_id("ns2", "cv.pdf", 1, 0)

    def test_text_travels_as_metadata(self) -> None:
        record = _record("Rust is fast", [1.0, 0.0])
        wire = record.to_wire()
        assert wire["metadata"]["text"] == "Rust is fast"
        assert wire["values"] == [1.0, 0.0]
        assert record.text == "Rust is fast"

    def test_match_text_falls_back_to_id(self) -> None:
        assert QueryMatch(id="legacy text as id").text == "legacy text as id"
        assert QueryMatch(id="k", metadata={"text": "payload"}).text == "payload"

    def test_match_accepts_null_metadata(self) -> None:
        assert QueryMatch.model_validate({"id": "x", "metadata": None}).metadata == {}


# ── Against the in-memory fake index ───────────────────────────────────


class TestAgainstFakeIndex:
    @pytest.fixture()
    def client(self, settings, fake_services) -> PineconeClient:
        return PineconeClient(settings, fake_services)

    def test_empty_upsert_is_successful_no_op(self, client, fake_services) -> None:
        result = client.upsert("ns1", [])
        assert result.ok
        assert result.upserted_count == 0
        assert fake_services.calls == []

    def test_upsert_then_query_round_trip(self, client) -> None:
        records = [_record("A", [1.0, 0.0], 0), _record("B", [0.0, 1.0], 1)]
        assert client.upsert("ns1", records).upserted_count == 2

        result = client.query("ns1", records[0].values, top_k=1)
        assert result.ok
        assert len(result) == 1
        assert result[0].id == records[0].id
        assert result[0].text == "A"

    def test_query_empty_namespace_returns_empty(self, client) -> None:
        result = client.query("nobody-home", [1.0, 0.0])
        assert result.ok
        assert list(result) == []

    def test_queries_never_cross_namespaces(self, client) -> None:
        client.upsert("ns1", [_record("A", [1.0, 0.0])])
        assert len(client.query("ns2", [1.0, 0.0])) == 0

    def test_query_request_shape(self, client, fake_services) -> None:
        client.query("ns1", [1.0, 0.0], top_k=5, include_values=False)
        url, body = fake_services.calls[-1]
        assert url == "https://test-index.svc.pinecone.io/query"
        assert body == {
            "namespace": "ns1",
            "vector": [1.0, 0.0],
            "topK": 5,
            "includeValues": False,
            "includeMetadata": True,
        }

    def test_upsert_request_shape(self, client, fake_services) -> None:
        record = _record("A", [1.0, 0.0])
        client.upsert("ns1", [record])
        url, body = fake_services.calls[-1]
        assert url == "https://test-index.svc.pinecone.io/vectors/upsert"
        assert body["namespace"] == "ns1"
        assert body["vectors"] == [record.to_wire()]

    def test_upsert_failure_is_degraded_not_raised(self, client, fake_services) -> None:
        fake_services.fail["/vectors/upsert"] = 400
        result = client.upsert("ns1", [_record("A", [1.0, 0.0])])
        assert result.status is OperationStatus.DEGRADED
        assert "400" in result.error

    def test_query_failure_is_degraded_and_empty(self, client, fake_services) -> None:
        fake_services.fail["/query"] = 503
        result = client.query("ns1", [1.0, 0.0])
        assert not result.ok
        assert list(result) == []
        assert "503" in result.error

    def test_empty_vector_is_not_sent(self, client, fake_services) -> None:
        result = client.query("ns1", [])
        assert result.status is OperationStatus.DEGRADED
        assert fake_services.calls == []

    def test_create_index_body(self, client, fake_services) -> None:
        result = client.create_index()
        assert result.ok
        url, body = fake_services.calls[-1]
        assert url == "https://api.pinecone.io/indexes"
        assert body == {
            "name": "resume-collection",
            "dimension": 2,
            "metric": "cosine",
            "spec": {"serverless": {"cloud": "aws", "region": "us-east-1"}},
        }

    def test_create_index_rejection_is_degraded(self, client, fake_services) -> None:
        fake_services.fail["/indexes"] = 409
        result = client.create_index(name="dup")
        assert result.name == "dup"
        assert result.status is OperationStatus.DEGRADED

    def test_describe_index_stats(self, client) -> None:
        client.upsert("ns1", [_record("A", [1.0, 0.0])])
        assert client.describe_index_stats()["namespaces"]["ns1"]["vectorCount"] == 1


# ── Malformed responses and transport failures ─────────────────────────


class TestFailureModes:
    @pytest.fixture()
    def session(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture()
    def client(self, settings, session) -> PineconeClient:
        return PineconeClient(settings, session)

    def test_api_key_header(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(200, {"matches": []})
        client.query("ns1", [1.0, 0.0])
        assert session.post.call_args.kwargs["headers"] == {"Api-Key": "pc-test"}

    def test_missing_matches_key_degrades(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(200, {"results": []})
        result = client.query("ns1", [1.0, 0.0])
        assert result.status is OperationStatus.DEGRADED
        assert list(result) == []

    def test_non_json_query_body_degrades(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(200, text="not json")
        assert client.query("ns1", [1.0, 0.0]).status is OperationStatus.DEGRADED

    def test_invalid_match_degrades(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(200, {"matches": [{"score": 0.3}]})
        assert client.query("ns1", [1.0, 0.0]).status is OperationStatus.DEGRADED

    def test_order_is_kept_as_returned(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(
            200, {"matches": [{"id": "low", "score": 0.1}, {"id": "high", "score": 0.9}]}
        )
        assert [m.id for m in client.query("ns1", [1.0, 0.0])] == ["low", "high"]

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.upsert("ns1", [_record("A", [1.0, 0.0])]),
            lambda c: c.query("ns1", [1.0, 0.0]),
            lambda c: c.create_index(),
        ],
    )
    def test_transport_errors_are_fatal(self, client, session, call) -> None:
        session.post.side_effect = requests.ConnectionError("unreachable")
        with pytest.raises(TransportError):
            call(client)

    def test_stats_failure_returns_empty(self, client, session, response_factory) -> None:
        session.post.return_value = response_factory(500, text="boom")
        assert client.describe_index_stats() == {}
