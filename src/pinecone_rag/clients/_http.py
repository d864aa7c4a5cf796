"""Shared ``requests`` plumbing for the service clients."""

from __future__ import annotations

from typing import Any

import requests

from pinecone_rag.exceptions import TransportError


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def post_json(
    session: requests.Session,
    service: str,
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str],
    timeout: float | None,
) -> requests.Response:
    """POST *payload* as JSON; transport failures become :class:`TransportError`."""
    try:
        return session.post(url, json=payload, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise TransportError(service, url, str(exc)) from exc


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300
