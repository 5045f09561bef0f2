"""Retrieve drive item content and turn it into text."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import httpx

from sharefinder.errors import ExtractionError, GraphError
from sharefinder.graph.client import GraphClient
from sharefinder.ingestion.formats import needs_conversion
from sharefinder.ingestion.pdf_loader import extract_pdf_text
from sharefinder.models import ClassifiedFormat, FetchedContent

LOGGER = logging.getLogger(__name__)


class ContentFetcher:
    """Fetches a drive item with the strategy its format calls for."""

    def __init__(self, client: GraphClient) -> None:
        self.client = client

    async def fetch(
        self, container_id: str, item_id: str, name: str, fmt: ClassifiedFormat
    ) -> FetchedContent:
        """Return the item's text, or a structured failure. Never raises."""
        if fmt is ClassifiedFormat.UNSUPPORTED:
            return FetchedContent.unsupported()

        path = GraphClient.content_path(container_id, item_id)
        try:
            if fmt is ClassifiedFormat.PLAIN_TEXT:
                text = await self.client.get_text(path)
            elif fmt is ClassifiedFormat.DELIMITED_TEXT:
                data = await self.client.read_bytes(path)
                text = data.decode("utf-8")
            else:
                params = {"format": "pdf"} if needs_conversion(name) else None
                data = await self.client.read_bytes(path, params=params)
                text = await asyncio.to_thread(extract_pdf_text, data)
        except (GraphError, httpx.HTTPError, UnicodeDecodeError, ExtractionError) as exc:
            LOGGER.error("Error fetching drive content for %s: %s", name, exc)
            return FetchedContent.failed(f"Failed to fetch content for {name}: {exc}")

        LOGGER.debug("Fetched %s characters from %s", len(text), name)
        return FetchedContent.ok(text)

    async def fetch_metadata(self, container_id: str, item_id: str) -> Dict[str, Any]:
        return await self.client.get_json(GraphClient.item_path(container_id, item_id))
