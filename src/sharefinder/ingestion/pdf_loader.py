"""PDF text extraction.

Uses PyMuPDF (fitz) to read PDF renditions straight from memory.
"""

from __future__ import annotations

import logging
from typing import Iterator

import fitz  # PyMuPDF

from sharefinder.errors import ExtractionError
from sharefinder.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


def iter_text_parts(data: bytes) -> Iterator[str]:
    """Yield text content from PDF bytes page by page."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ExtractionError(f"Unable to parse PDF: {exc}") from exc

    try:
        for index in range(len(doc)):
            try:
                page = doc[index]
                text = page.get_text() or ""
                normalized = normalize_whitespace(text.splitlines())
                if normalized:
                    yield normalized + "\n"
            except Exception as exc:  # pragma: no cover
                LOGGER.warning("Failed to read page %s: %s", index, exc)
    finally:
        doc.close()


def extract_pdf_text(data: bytes) -> str:
    """Return the text of every page of a PDF document."""
    if not data:
        raise ExtractionError("Unable to parse PDF: empty document")
    return "".join(iter_text_parts(data))
