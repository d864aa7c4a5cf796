"""pinecone-rag — minimal retrieval-augmented generation over a Pinecone index."""

__version__ = "0.1.0"
