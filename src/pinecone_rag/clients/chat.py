"""Chat-completion client.

The reply is returned as the raw response body; parsing the model's answer
is left to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence, Union

from langchain_core.messages import BaseMessage

from pinecone_rag.clients._http import build_session, is_success, post_json

if TYPE_CHECKING:
    import requests

    from pinecone_rag.config import Settings

logger = logging.getLogger(__name__)

ChatMessage = Union[BaseMessage, Mapping[str, Any]]

CHAT_ROLES = frozenset({"system", "user", "assistant"})

# LangChain message ``type`` -> chat API role
_ROLE_BY_TYPE = {"system": "system", "human": "user", "ai": "assistant"}


def to_wire_message(message: ChatMessage) -> dict[str, str]:
    """Convert a LangChain message or ``{role, content}`` mapping to the wire shape."""
    if isinstance(message, BaseMessage):
        role = _ROLE_BY_TYPE.get(message.type)
        content = message.content
    else:
        role = message.get("role")
        content = message.get("content")
    if role not in CHAT_ROLES:
        raise ValueError(f"Unsupported chat message role: {role!r}")
    if not isinstance(content, str):
        raise ValueError(f"Chat message content must be text, got {type(content).__name__}")
    return {"role": role, "content": content}


class ChatClient:
    """Sends an ordered message list to the chat-completion endpoint."""

    service = "chat"

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._session = session or build_session()

    def build_payload(self, messages: Sequence[ChatMessage]) -> dict[str, Any]:
        return {
            "model": self._settings.chat_model,
            "messages": [to_wire_message(m) for m in messages],
        }

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        """Return the response body for *messages* verbatim.

        The status code is not inspected beyond a log line; transport
        failures raise :class:`~pinecone_rag.exceptions.TransportError`.
        """
        response = post_json(
            self._session,
            self.service,
            self._settings.chat_url,
            self.build_payload(messages),
            headers={"Authorization": f"Bearer {self._settings.openai_api_key}"},
            timeout=self._settings.request_timeout,
        )
        if not is_success(response):
            logger.warning("Chat completion returned status %d", response.status_code)
        return response.text
