"""Map file names to a content handling strategy."""

from __future__ import annotations

from pathlib import PurePath

from sharefinder.models import ClassifiedFormat

PDF_EXTENSION = ".pdf"

# Sources Graph can render as PDF via ``/content?format=pdf``, plus PDF itself.
# https://learn.microsoft.com/en-us/graph/api/driveitem-get-content-format
CONVERTIBLE_EXTENSIONS = frozenset(
    {
        ".pdf",
        ".doc",
        ".docx",
        ".odp",
        ".ods",
        ".odt",
        ".pot",
        ".potm",
        ".potx",
        ".pps",
        ".ppsx",
        ".ppsxm",
        ".ppt",
        ".pptm",
        ".pptx",
        ".rtf",
    }
)

_SIMPLE_FORMATS = {
    ".txt": ClassifiedFormat.PLAIN_TEXT,
    ".csv": ClassifiedFormat.DELIMITED_TEXT,
}


def extension_of(name: str) -> str:
    return PurePath(name).suffix.lower()


def classify(name: str) -> ClassifiedFormat:
    extension = extension_of(name)
    if extension in _SIMPLE_FORMATS:
        return _SIMPLE_FORMATS[extension]
    if extension in CONVERTIBLE_EXTENSIONS:
        return ClassifiedFormat.CONVERTIBLE_DOCUMENT
    return ClassifiedFormat.UNSUPPORTED


def needs_conversion(name: str) -> bool:
    """True when the store must render the item as PDF before extraction."""
    extension = extension_of(name)
    return extension in CONVERTIBLE_EXTENSIONS and extension != PDF_EXTENSION
