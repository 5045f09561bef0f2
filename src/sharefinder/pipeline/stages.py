"""Per-hit processing strategies plugged into :class:`HitPipeline`."""

from __future__ import annotations

import abc
import logging
from typing import FrozenSet, Protocol

from sharefinder.ingestion.fetcher import ContentFetcher
from sharefinder.ingestion.formats import classify
from sharefinder.models import (
    ClassifiedFormat,
    FetchedContent,
    MetadataRecord,
    Record,
    ResourceKind,
    ResultRecord,
    ResultStatus,
    SearchHit,
)
from sharefinder.relevance.extractor import RelevanceExtractor

LOGGER = logging.getLogger(__name__)

UNSUPPORTED_CONTENT = "Unsupported File Type"
METADATA_ERROR = "Unable to retrieve metadata"
DOCUMENT_KINDS: FrozenSet[ResourceKind] = frozenset({ResourceKind.DRIVE_ITEM})


class HitStage(Protocol):
    """What the orchestrator does with each hit after search."""

    kinds: FrozenSet[ResourceKind]

    async def process(self, hit: SearchHit, query: str | None) -> Record:
        ...

    def on_error(self, hit: SearchHit, exc: BaseException) -> Record:
        ...


def _record(hit: SearchHit, content: str, status: ResultStatus) -> ResultRecord:
    return ResultRecord(
        name=hit.name, web_url=hit.web_url, rank=hit.rank, content=content, status=status
    )


class _ContentStage(abc.ABC):
    """Classify and fetch, then hand the text to :meth:`finish`."""

    kinds = DOCUMENT_KINDS

    def __init__(self, fetcher: ContentFetcher) -> None:
        self.fetcher = fetcher

    async def process(self, hit: SearchHit, query: str | None) -> Record:
        fmt = classify(hit.name)
        if fmt is ClassifiedFormat.UNSUPPORTED:
            return _record(hit, UNSUPPORTED_CONTENT, ResultStatus.UNSUPPORTED)

        fetched = await self.fetcher.fetch(hit.container_id, hit.item_id, hit.name, fmt)
        if fetched.is_unsupported:
            return _record(hit, UNSUPPORTED_CONTENT, ResultStatus.UNSUPPORTED)
        if not fetched.succeeded:
            return _record(hit, f"Error: {fetched.error}", ResultStatus.ERROR)
        return await self.finish(hit, fetched, query)

    @abc.abstractmethod
    async def finish(self, hit: SearchHit, fetched: FetchedContent, query: str | None) -> Record:
        ...

    def on_error(self, hit: SearchHit, exc: BaseException) -> Record:
        return _record(hit, f"Error: {exc}", ResultStatus.ERROR)


class TextStage(_ContentStage):
    """Return each document's extracted text."""

    async def finish(self, hit: SearchHit, fetched: FetchedContent, query: str | None) -> Record:
        return _record(hit, fetched.text or "", ResultStatus.SUCCESS)


class RelevanceStage(_ContentStage):
    """Return the parts of each document relevant to the query."""

    def __init__(self, fetcher: ContentFetcher, extractor: RelevanceExtractor) -> None:
        super().__init__(fetcher)
        self.extractor = extractor

    async def finish(self, hit: SearchHit, fetched: FetchedContent, query: str | None) -> Record:
        excerpt = await self.extractor.extract_document(fetched.text or "", query or "")
        return _record(hit, excerpt, ResultStatus.SUCCESS)


class MetadataStage:
    """Return title, link and last-modified details for each document."""

    kinds = DOCUMENT_KINDS

    def __init__(self, fetcher: ContentFetcher) -> None:
        self.fetcher = fetcher

    async def process(self, hit: SearchHit, query: str | None) -> Record:
        item = await self.fetcher.fetch_metadata(hit.container_id, hit.item_id)
        modified_by = ((item.get("lastModifiedBy") or {}).get("user") or {}).get("displayName")
        return MetadataRecord(
            title=item.get("name"),
            url=item.get("webUrl"),
            last_modified=item.get("lastModifiedDateTime"),
            modified_by=modified_by or "Unknown",
            rank=hit.rank,
        )

    def on_error(self, hit: SearchHit, exc: BaseException) -> Record:
        LOGGER.error(
            "Failed to fetch metadata for %r (itemId: %s, driveId: %s): %s",
            hit.name,
            hit.item_id,
            hit.container_id,
            exc,
        )
        return MetadataRecord(
            title=hit.name or None,
            url=None,
            last_modified=None,
            modified_by=None,
            rank=hit.rank,
            error=METADATA_ERROR,
        )
