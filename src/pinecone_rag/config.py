"""Settings loaded once from the environment / ``.env`` file.

Three values are required: the OpenAI API key, the Pinecone API key and the
Pinecone index host.  :func:`load_settings` turns their absence into a
:class:`~pinecone_rag.exceptions.ConfigurationError` before any client is
built, so a misconfigured run fails before the first network call.

The resulting :class:`Settings` object is passed explicitly into every
client; nothing below this module reads the environment.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings

from pinecone_rag.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Credentials / endpoints (required)
    openai_api_key: str = Field(min_length=1, description="Bearer token for embeddings and chat")
    pinecone_api_key: str = Field(min_length=1, description="Pinecone Api-Key header value")
    pinecone_index_host: str = Field(
        min_length=1,
        validation_alias=AliasChoices("pinecone_index_host", "pinecone_url"),
        description="Data-plane host of the index, with or without scheme",
    )

    # Embedding
    embedding_model: str = "text-embedding-ada-002"
    embedding_dimension: int = Field(default=1536, gt=0)
    embeddings_url: str = "https://api.openai.com/v1/embeddings"

    # Chat
    chat_model: str = "gpt-3.5-turbo"
    chat_url: str = "https://api.openai.com/v1/chat/completions"
    system_prompt: str = "You are a helpful assistant!"

    # Vector store
    pinecone_control_url: str = "https://api.pinecone.io"
    pinecone_index_name: str = "resume-collection"
    pinecone_metric: str = "cosine"
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"
    default_namespace: str = "ns1"

    # Ingestion / retrieval
    knowledge_base_dir: str = "./knowledge-base"
    max_chunk_chars: int = Field(default=512, gt=0)
    split_policy: Literal["recursive", "single"] = "recursive"
    embed_concurrency: int = Field(default=4, ge=1)
    skip_empty_chunks: bool = True
    top_k: int = Field(default=5, gt=0)

    # Transport; ``None`` waits indefinitely.
    request_timeout: float | None = None

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def index_base_url(self) -> str:
        """Index host as an absolute URL without a trailing slash."""
        host = self.pinecone_index_host.rstrip("/")
        if host.startswith(("http://", "https://")):
            return host
        return f"https://{host}"


def load_settings(**overrides: Any) -> Settings:
    """Build :class:`Settings`, failing loudly on missing credentials.

    Keyword arguments override environment values (``_env_file=None``
    disables ``.env`` lookup, which tests rely on).

    Raises
    ------
    ConfigurationError
        When a required variable is absent or empty, or a value fails
        validation.  The message names every offending variable.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        names = sorted({str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")})
        raise ConfigurationError(
            "Missing or invalid configuration: " + ", ".join(names),
            details={"variables": names},
        ) from exc
