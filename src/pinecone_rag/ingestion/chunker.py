"""Line-based text chunking.

A page is split on line boundaries first; a line longer than the bound is
then cut into a head of exactly ``max_chars`` characters followed by the
remainder.  Two policies exist for the remainder:

* ``SplitPolicy.RECURSIVE`` (default) keeps cutting until every unit fits.
* ``SplitPolicy.SINGLE`` cuts once, so a line longer than ``2 * max_chars``
  leaves an over-length tail.  Kept for parity with indexes built that way.

Empty units are never dropped here: a page whose extraction failed becomes
one empty placeholder so page accounting stays intact.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from langchain_core.documents import Document

DEFAULT_MAX_CHARS = 512


class SplitPolicy(str, Enum):
    RECURSIVE = "recursive"
    SINGLE = "single"


def split_line(
    line: str,
    max_chars: int = DEFAULT_MAX_CHARS,
    policy: SplitPolicy = SplitPolicy.RECURSIVE,
) -> list[str]:
    """Cut one line into units of at most *max_chars* characters.

    Concatenating the returned units always gives back *line*.
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")
    if len(line) <= max_chars:
        return [line]
    if SplitPolicy(policy) is SplitPolicy.SINGLE:
        return [line[:max_chars], line[max_chars:]]
    return [line[start : start + max_chars] for start in range(0, len(line), max_chars)]


def _lines(text: str) -> list[str]:
    # Only "\n" separates lines; "\r\n" endings lose the "\r".
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def chunk_page(
    text: str | None,
    max_chars: int = DEFAULT_MAX_CHARS,
    policy: SplitPolicy = SplitPolicy.RECURSIVE,
) -> list[str]:
    """Split the text of one page into ordered text units.

    Parameters
    ----------
    text:
        Page text, or ``None`` when extraction failed for the page.
    max_chars:
        Upper bound on unit length.
    policy:
        How over-length lines are cut (see module docstring).

    Returns
    -------
    list[str]
        ``[""]`` for a failed page, otherwise one or more units per line.
    """
    if text is None:
        return [""]
    units: list[str] = []
    for line in _lines(text):
        units.extend(split_line(line, max_chars, policy))
    return units


def chunk_pages(
    pages: Sequence[str | None],
    *,
    source: str = "unknown",
    max_chars: int = DEFAULT_MAX_CHARS,
    policy: SplitPolicy = SplitPolicy.RECURSIVE,
) -> list[Document]:
    """Chunk a whole document into LangChain ``Document`` units.

    Each unit carries ``source``, the 1-based ``page`` and a ``chunk_index``
    that runs across the whole document.
    """
    chunks: list[Document] = []
    for page_number, text in enumerate(pages, start=1):
        for unit in chunk_page(text, max_chars, policy):
            chunks.append(
                Document(
                    page_content=unit,
                    metadata={
                        "source": source,
                        "page": page_number,
                        "chunk_index": len(chunks),
                    },
                )
            )
    return chunks
