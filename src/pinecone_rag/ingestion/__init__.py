"""
Ingestion — PDF extraction, line chunking, embedding and upsert.

This module turns a document from the knowledge base into vectors stored
under a namespace of the Pinecone index.
"""
