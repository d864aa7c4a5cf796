"""Document loading — PDF page text via ``pypdf``."""

from __future__ import annotations

import logging
from pathlib import Path

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def resolve_document_path(name: str | Path, knowledge_base_dir: str | Path) -> Path:
    """Resolve *name* against the knowledge-base directory.

    Absolute paths are returned unchanged.  Raises ``FileNotFoundError``
    when the resolved file does not exist.
    """
    path = Path(name)
    if not path.is_absolute():
        path = Path(knowledge_base_dir) / path
    if not path.is_file():
        raise FileNotFoundError(f"Document not found: {path}")
    return path


def extract_pages(path: str | Path) -> list[str | None]:
    """Return the text of every page of the PDF at *path*, in page order.

    A page whose text cannot be extracted is returned as ``None`` so the
    chunker can keep a placeholder for it; an unreadable file raises.
    """
    reader = PdfReader(str(path))
    pages: list[str | None] = []
    for number, page in enumerate(reader.pages, start=1):
        try:
            pages.append(page.extract_text() or "")
        except Exception:
            logger.warning("Text extraction failed for %s page %d", path, number, exc_info=True)
            pages.append(None)
    logger.info("Extracted %d pages from %s", len(pages), path)
    return pages
