"""Keyword search over drive items through the Graph search API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sharefinder.errors import GraphError, SearchProviderError
from sharefinder.graph.client import GraphClient
from sharefinder.models import SearchHit, SearchResponse

LOGGER = logging.getLogger(__name__)

SEARCH_PATH = "/search/query"
ENTITY_TYPES = ["driveItem"]


def build_search_request(query_string: str, *, page_size: int = 10) -> Dict[str, Any]:
    return {
        "requests": [
            {
                "entityTypes": list(ENTITY_TYPES),
                "query": {"queryString": query_string},
                "from": 0,
                "size": page_size,
            }
        ]
    }


def parse_search_response(payload: Dict[str, Any]) -> SearchResponse:
    """Flatten ``value[0].hitsContainers[*].hits`` into a :class:`SearchResponse`."""
    responses = payload.get("value") or []
    if not responses:
        return SearchResponse(total_hits=0)

    containers = responses[0].get("hitsContainers") or []
    if not containers:
        return SearchResponse(total_hits=0)

    total_hits = int(containers[0].get("total") or 0)
    hits: List[SearchHit] = []
    for container in containers:
        for raw_hit in container.get("hits") or []:
            hits.append(SearchHit.from_graph(raw_hit))
    return SearchResponse(total_hits=total_hits, hits=tuple(hits))


class SearchGateway:
    """Issues the fixed-shape document search and interprets the result."""

    def __init__(self, client: GraphClient, *, page_size: int = 10) -> None:
        self.client = client
        self.page_size = page_size

    async def search(self, query_string: str) -> SearchResponse:
        body = build_search_request(query_string, page_size=self.page_size)
        try:
            payload = await self.client.post_json(SEARCH_PATH, body)
        except GraphError as exc:
            LOGGER.error("Search for %r failed: %s", query_string, exc)
            raise SearchProviderError(str(exc), status_code=exc.status_code) from exc

        try:
            response = parse_search_response(payload)
        except (AttributeError, TypeError, ValueError) as exc:
            raise SearchProviderError(f"Malformed search response: {exc}") from exc

        LOGGER.info("Search for %r returned %s total hits", query_string, response.total_hits)
        return response
