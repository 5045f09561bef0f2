"""Exception hierarchy for ShareFinder."""

from __future__ import annotations


class ShareFinderError(Exception):
    """Base class for all ShareFinder errors."""


class AuthorizationError(ShareFinderError):
    """A Graph credential could not be obtained for the request."""


class GraphError(ShareFinderError):
    """A Microsoft Graph call failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SearchProviderError(GraphError):
    """The search query itself failed."""


class ExtractionError(ShareFinderError):
    """Document bytes could not be turned into text."""
