"""Command-line entry point.

Examples
--------
    pinecone-rag create-index
    pinecone-rag stats
    pinecone-rag ingest Tanmay_Sharma.pdf --namespace ns1
    pinecone-rag ingest-text "Tanmay likes to code low level stuff in Rust."
    pinecone-rag ask "What does Tanmay like?"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from pinecone_rag.clients.pinecone import PineconeClient
from pinecone_rag.config import Settings, load_settings
from pinecone_rag.exceptions import ConfigurationError, TransportError
from pinecone_rag.ingestion.pipeline import IngestionPipeline
from pinecone_rag.retrieval.retriever import Retriever

logger = logging.getLogger("pinecone_rag")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pinecone-rag",
        description="Retrieval-augmented generation over a Pinecone index",
    )
    parser.add_argument("--namespace", default=None, help="Index namespace (default: settings)")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("create-index", help="Provision the serverless index")
    sub.add_parser("stats", help="Show per-namespace vector counts")

    ingest = sub.add_parser("ingest", help="Load a PDF from the knowledge base")
    ingest.add_argument("document", help="File name relative to the knowledge base, or a path")

    ingest_text = sub.add_parser("ingest-text", help="Store a piece of text")
    ingest_text.add_argument("text")

    ask = sub.add_parser("ask", help="Answer a question from the stored context")
    ask.add_argument("query")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "create-index":
        result = PineconeClient(settings).create_index()
        return 0 if result.ok else 1

    if args.command == "stats":
        stats = PineconeClient(settings).describe_index_stats()
        print(json.dumps(stats, indent=2))
        return 0 if stats else 1

    if args.command in ("ingest", "ingest-text"):
        pipeline = IngestionPipeline.from_settings(settings)
        if args.command == "ingest":
            report = pipeline.ingest_document(args.document, namespace=args.namespace)
        else:
            report = pipeline.ingest_text(args.text, namespace=args.namespace)
        for text in report.failed:
            print(f"Error generating embeddings for unit: {text[:80]!r}", file=sys.stderr)
        print(report.summary())
        return 0 if report.ok else 1

    answer = Retriever.from_settings(settings).answer(args.query, namespace=args.namespace)
    print(answer.body)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc.message}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args, settings)
    except TransportError as exc:
        logger.error("%s", exc.message)
        return 1
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
