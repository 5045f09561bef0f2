"""Core ShareFinder data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

DRIVE_ITEM_ODATA_TYPE = "#microsoft.graph.driveItem"
NO_RESULTS_MESSAGE = "No results found"
RESPONSE_LIST_KEY = "openaiFileResponse"


class ResourceKind(str, Enum):
    """Entity kinds a search hit can reference."""

    DRIVE_ITEM = "driveItem"
    OTHER = "other"

    @classmethod
    def from_odata_type(cls, odata_type: str | None) -> "ResourceKind":
        if odata_type == DRIVE_ITEM_ODATA_TYPE:
            return cls.DRIVE_ITEM
        return cls.OTHER


class ClassifiedFormat(str, Enum):
    """Handling strategy derived from a file name."""

    PLAIN_TEXT = "plain_text"
    DELIMITED_TEXT = "delimited_text"
    CONVERTIBLE_DOCUMENT = "convertible_document"
    UNSUPPORTED = "unsupported"


class ResultStatus(str, Enum):
    SUCCESS = "success"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SearchHit:
    """One matched document reference as returned by the search provider."""

    item_id: str
    container_id: str
    name: str
    web_url: str
    rank: int
    kind: ResourceKind = ResourceKind.DRIVE_ITEM

    @classmethod
    def from_graph(cls, raw: Dict[str, Any]) -> "SearchHit":
        """Build a hit from one entry of a Graph ``hitsContainers[].hits`` list."""
        resource = raw.get("resource") or {}
        parent = resource.get("parentReference") or {}
        web_url = resource.get("webUrl") or ""
        return cls(
            item_id=resource.get("id") or raw.get("hitId") or "",
            container_id=parent.get("driveId") or "",
            name=resource.get("name") or "",
            web_url=re.sub(r"\s", "%20", web_url),
            rank=int(raw.get("rank", 0)),
            kind=ResourceKind.from_odata_type(resource.get("@odata.type")),
        )


@dataclass(frozen=True, slots=True)
class SearchResponse:
    total_hits: int
    hits: tuple[SearchHit, ...] = ()


@dataclass(frozen=True, slots=True)
class FetchedContent:
    """Outcome of fetching one document: text, an error, or unsupported."""

    text: Optional[str] = None
    error: Optional[str] = None
    is_unsupported: bool = False

    def __post_init__(self) -> None:
        outcomes = sum((self.text is not None, self.error is not None, self.is_unsupported))
        if outcomes != 1:
            raise ValueError("FetchedContent must carry exactly one of text, error or unsupported")

    @classmethod
    def ok(cls, text: str) -> "FetchedContent":
        return cls(text=text)

    @classmethod
    def failed(cls, reason: str) -> "FetchedContent":
        return cls(error=reason)

    @classmethod
    def unsupported(cls) -> "FetchedContent":
        return cls(is_unsupported=True)

    @property
    def succeeded(self) -> bool:
        return self.text is not None


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """One entry of a content or relevance response."""

    name: str
    web_url: str
    rank: int
    content: str
    status: ResultStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "webUrl": self.web_url,
            "rank": self.rank,
            "content": self.content,
            "status": self.status.value,
        }


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """One entry of a metadata-only response."""

    title: Optional[str]
    url: Optional[str]
    last_modified: Optional[str]
    modified_by: Optional[str]
    rank: int
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "lastModified": self.last_modified,
            "modifiedBy": self.modified_by,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


Record = Union[ResultRecord, MetadataRecord]


@dataclass(slots=True)
class PipelineOutcome:
    """Final, rank-ordered result of one request."""

    records: List[Record] = field(default_factory=list)
    message: Optional[str] = None

    @classmethod
    def no_results(cls) -> "PipelineOutcome":
        return cls(records=[], message=NO_RESULTS_MESSAGE)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.message is not None:
            payload["message"] = self.message
        payload[RESPONSE_LIST_KEY] = [record.to_dict() for record in self.records]
        return payload
