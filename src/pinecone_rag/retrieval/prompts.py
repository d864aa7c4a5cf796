"""Prompt assembly for retrieval-augmented answers."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from pinecone_rag.models import QueryMatch

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant!"

AUGMENTED_PROMPT_TEMPLATE = """\
Using the context below, answer the query.

Context: {context}

Query: {query}
"""

MatchLike = Union[QueryMatch, Mapping[str, Any]]


def _match_text(match: MatchLike) -> str:
    if not isinstance(match, QueryMatch):
        match = QueryMatch.model_validate(match)
    return match.text


def format_context(matches: Iterable[MatchLike]) -> str:
    """One matched text per line, in the order the store returned them."""
    return "\n".join(_match_text(m) for m in matches)


def build_augmented_prompt(query: str, matches: Iterable[MatchLike]) -> str:
    """Weave the retrieved texts and *query* into the fixed template.

    With no matches the context section is empty and the model answers
    from the query alone.
    """
    return AUGMENTED_PROMPT_TEMPLATE.format(context=format_context(matches), query=query)


def build_messages(
    query: str,
    matches: Iterable[MatchLike],
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> list[BaseMessage]:
    """Return the system persona followed by the augmented user prompt."""
    return [
        SystemMessage(content=system_prompt),
        HumanMessage(content=build_augmented_prompt(query, matches)),
    ]
