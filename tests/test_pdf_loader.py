"""Tests for PDF text extraction."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from conftest import make_pdf
from sharefinder.errors import ExtractionError
from sharefinder.ingestion.pdf_loader import extract_pdf_text, iter_text_parts


class TestIterTextParts:
    """Test iter_text_parts function."""

    @patch("sharefinder.ingestion.pdf_loader.fitz")
    def test_iter_text_parts_multiple_pages(self, mock_fitz: MagicMock) -> None:
        """Should extract text from each page in order."""
        pages = []
        for text in ("Page 1", "Page 2", "Page 3"):
            page = MagicMock()
            page.get_text.return_value = text
            pages.append(page)

        mock_doc = MagicMock()
        mock_doc.__len__ = MagicMock(return_value=3)
        mock_doc.__getitem__ = MagicMock(side_effect=lambda i: pages[i])
        mock_fitz.open.return_value = mock_doc

        parts = list(iter_text_parts(b"%PDF-dummy"))

        assert parts == ["Page 1\n", "Page 2\n", "Page 3\n"]
        mock_fitz.open.assert_called_once_with(stream=b"%PDF-dummy", filetype="pdf")
        mock_doc.close.assert_called_once()

    @patch("sharefinder.ingestion.pdf_loader.fitz")
    def test_skips_blank_pages(self, mock_fitz: MagicMock) -> None:
        """Should not yield anything for pages without text."""
        blank = MagicMock()
        blank.get_text.return_value = "   \n  "
        mock_doc = MagicMock()
        mock_doc.__len__ = MagicMock(return_value=1)
        mock_doc.__getitem__ = MagicMock(return_value=blank)
        mock_fitz.open.return_value = mock_doc

        assert list(iter_text_parts(b"%PDF-dummy")) == []

    @patch("sharefinder.ingestion.pdf_loader.fitz")
    def test_open_failure_raises_extraction_error(self, mock_fitz: MagicMock) -> None:
        mock_fitz.open.side_effect = RuntimeError("cannot open broken document")

        with pytest.raises(ExtractionError, match="cannot open broken document"):
            list(iter_text_parts(b"garbage"))


class TestExtractPdfText:
    """Test extract_pdf_text against real PDF bytes."""

    def test_extracts_text(self) -> None:
        data = make_pdf("Quarterly revenue grew", "Costs were flat")

        text = extract_pdf_text(data)

        assert "Quarterly revenue grew" in text
        assert "Costs were flat" in text

    def test_empty_bytes(self) -> None:
        with pytest.raises(ExtractionError):
            extract_pdf_text(b"")

    def test_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionError):
            extract_pdf_text(b"this is not a pdf at all")
