"""Request-level entry point shared by the web app and the CLI."""

from __future__ import annotations

import logging
from enum import Enum

import httpx
import openai

from sharefinder.auth.credentials import CredentialProvider, mask_token
from sharefinder.config import AppConfig
from sharefinder.graph.client import GraphClient
from sharefinder.graph.search import SearchGateway
from sharefinder.ingestion.fetcher import ContentFetcher
from sharefinder.models import PipelineOutcome
from sharefinder.pipeline.orchestrator import HitPipeline
from sharefinder.pipeline.stages import HitStage, MetadataStage, RelevanceStage, TextStage
from sharefinder.relevance.extractor import RelevanceExtractor

LOGGER = logging.getLogger(__name__)


class SearchMode(str, Enum):
    """Which post-fetch stage a request wants."""

    METADATA = "metadata"
    TEXT = "text"
    RELEVANCE = "relevance"


def build_stage(
    mode: SearchMode,
    fetcher: ContentFetcher,
    config: AppConfig,
    openai_client: openai.AsyncOpenAI | None = None,
) -> HitStage:
    if mode is SearchMode.METADATA:
        return MetadataStage(fetcher)
    if mode is SearchMode.TEXT:
        return TextStage(fetcher)
    extractor = RelevanceExtractor.from_config(config, client=openai_client)
    return RelevanceStage(fetcher, extractor)


async def run_search(
    config: AppConfig,
    mode: SearchMode,
    search_term: str,
    *,
    query: str | None = None,
    bearer_token: str | None = None,
    credential_provider: CredentialProvider | None = None,
    openai_client: openai.AsyncOpenAI | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> PipelineOutcome:
    """Authorize, search and run the selected stage over the hits.

    Raises :class:`~sharefinder.errors.AuthorizationError` or
    :class:`~sharefinder.errors.SearchProviderError` for request-level
    failures; per-document failures end up inside the records.
    """
    provider = credential_provider or config.build_credential_provider()
    token = await provider.get_token(bearer_token)
    LOGGER.debug("Graph token acquired: %s", mask_token(token))

    async with GraphClient(
        token,
        base_url=config.graph_base_url,
        http_client=http_client,
        timeout=config.graph_timeout,
    ) as client:
        fetcher = ContentFetcher(client)
        stage = build_stage(mode, fetcher, config, openai_client)
        gateway = SearchGateway(client, page_size=config.page_size)
        try:
            return await HitPipeline(stage).search_and_run(gateway, search_term, query)
        finally:
            if isinstance(stage, RelevanceStage):
                await stage.extractor.aclose()
