"""Exception hierarchy.

Four kinds of failure are distinguished:

* :class:`ConfigurationError` – a credential or endpoint is missing.
  Fatal, raised before any work starts.
* :class:`TransportError` – a request could not be sent or no response
  arrived.  Fatal for the call in progress; never retried.
* :class:`ServiceError` – the service answered with a non-success status.
* :class:`ResponseShapeError` – the service answered, but the body lacks
  the expected fields.

The pipelines convert the last two into logged, degraded results.
"""

from __future__ import annotations

from typing import Any


class RAGError(Exception):
    """Base exception for all pinecone-rag errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RAGError):
    """Raised when required configuration is missing or invalid."""


class TransportError(RAGError):
    """Raised when a remote service cannot be reached."""

    def __init__(self, service: str, url: str, reason: str) -> None:
        self.service = service
        self.url = url
        super().__init__(f"{service} request to {url} failed: {reason}", {"service": service})


class ServiceError(RAGError):
    """Raised when a remote service answers with a non-success status."""

    def __init__(self, service: str, status_code: int, body: str) -> None:
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(f"{service} request failed with status {status_code}: {body}")


class ResponseShapeError(RAGError):
    """Raised when a response body lacks the expected fields."""

    def __init__(self, service: str, reason: str) -> None:
        self.service = service
        super().__init__(f"Unexpected {service} response: {reason}")
