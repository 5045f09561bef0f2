"""Shared fixtures for the ShareFinder test suite."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import fitz
import httpx
import pytest

from sharefinder.models import DRIVE_ITEM_ODATA_TYPE, ResourceKind, SearchHit

GRAPH_BASE = "https://graph.microsoft.com/v1.0"


def graph_hit(
    name: str,
    rank: int,
    *,
    item_id: str | None = None,
    drive_id: str = "drive-1",
    web_url: str | None = None,
    odata_type: str = DRIVE_ITEM_ODATA_TYPE,
) -> Dict[str, Any]:
    """Build one raw hit the way the Graph search API returns it."""
    return {
        "hitId": item_id or f"id-{name}",
        "rank": rank,
        "resource": {
            "@odata.type": odata_type,
            "id": item_id or f"id-{name}",
            "name": name,
            "webUrl": web_url or f"https://contoso.sharepoint.com/Shared Documents/{name}",
            "parentReference": {"driveId": drive_id},
        },
    }


def search_payload(hits: List[Dict[str, Any]], total: int | None = None) -> Dict[str, Any]:
    return {
        "value": [
            {
                "searchTerms": ["test"],
                "hitsContainers": [
                    {
                        "hits": hits,
                        "total": len(hits) if total is None else total,
                        "moreResultsAvailable": False,
                    }
                ],
            }
        ]
    }


def make_hit(name: str, rank: int, *, kind: ResourceKind = ResourceKind.DRIVE_ITEM) -> SearchHit:
    return SearchHit(
        item_id=f"id-{name}",
        container_id="drive-1",
        name=name,
        web_url=f"https://contoso.sharepoint.com/{name}",
        rank=rank,
        kind=kind,
    )


def make_pdf(*lines: str) -> bytes:
    """Render a small single-page PDF containing ``lines``."""
    doc = fitz.open()
    page = doc.new_page()
    for index, line in enumerate(lines):
        page.insert_text((72, 72 + index * 20), line)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for an ``httpx.AsyncClient`` backed by a request handler."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return _factory
