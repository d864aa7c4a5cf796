"""
Serving — FastAPI application for the retrieval pipeline.

Exposes question answering and text ingestion over HTTP so the pipeline
can run as a standalone container.
"""
