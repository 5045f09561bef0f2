"""Tests for file format classification."""

from __future__ import annotations

import pytest

from sharefinder.ingestion.formats import CONVERTIBLE_EXTENSIONS, classify, needs_conversion
from sharefinder.models import ClassifiedFormat


class TestClassify:
    """Test classify function."""

    def test_plain_text(self) -> None:
        """Should map .txt to plain text."""
        assert classify("report.txt") is ClassifiedFormat.PLAIN_TEXT

    def test_delimited_text(self) -> None:
        """Should map .csv to delimited text."""
        assert classify("numbers.csv") is ClassifiedFormat.DELIMITED_TEXT

    @pytest.mark.parametrize("extension", sorted(CONVERTIBLE_EXTENSIONS))
    def test_convertible_documents(self, extension: str) -> None:
        """Should map every allow-listed office/PDF extension to convertible."""
        assert classify(f"file{extension}") is ClassifiedFormat.CONVERTIBLE_DOCUMENT

    @pytest.mark.parametrize("name", ["REPORT.TXT", "Data.Csv", "Slides.PPTX", "Scan.PDF"])
    def test_case_insensitive(self, name: str) -> None:
        """Should ignore extension case."""
        assert classify(name) is classify(name.lower())

    @pytest.mark.parametrize(
        "name", ["image.png", "archive.zip", "notes.md", "README", "", "book.xlsx", "page.aspx"]
    )
    def test_unknown_is_unsupported(self, name: str) -> None:
        """Should map anything outside the allow-lists to unsupported."""
        assert classify(name) is ClassifiedFormat.UNSUPPORTED

    def test_only_last_extension_counts(self) -> None:
        """Should classify by the final suffix."""
        assert classify("report.pdf.txt") is ClassifiedFormat.PLAIN_TEXT
        assert classify("notes.txt.png") is ClassifiedFormat.UNSUPPORTED

    def test_deterministic(self) -> None:
        """Should return the same variant on repeated calls."""
        names = ["a.txt", "b.csv", "c.docx", "d.png"]
        assert [classify(n) for n in names] == [classify(n) for n in names]


class TestNeedsConversion:
    """Test needs_conversion function."""

    def test_pdf_is_fetched_directly(self) -> None:
        assert needs_conversion("manual.pdf") is False

    def test_office_documents_are_converted(self) -> None:
        assert needs_conversion("memo.docx") is True
        assert needs_conversion("deck.PPT") is True

    def test_non_convertible(self) -> None:
        assert needs_conversion("notes.txt") is False
        assert needs_conversion("image.png") is False
