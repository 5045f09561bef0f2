"""Concurrent, failure-isolated processing of search hits."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from sharefinder.graph.search import SearchGateway
from sharefinder.models import PipelineOutcome, Record, SearchHit
from sharefinder.pipeline.stages import HitStage

LOGGER = logging.getLogger(__name__)


class HitPipeline:
    """Runs one :class:`HitStage` over every hit and ranks the records.

    Hits are processed concurrently and all outcomes are kept: an exception
    in one hit's branch becomes that hit's error record instead of failing
    the batch.
    """

    def __init__(self, stage: HitStage) -> None:
        self.stage = stage

    async def _run_one(self, hit: SearchHit, query: str | None) -> Record:
        try:
            return await self.stage.process(hit, query)
        except Exception as exc:
            LOGGER.error("Error processing %s: %s", hit.name, exc)
            return self.stage.on_error(hit, exc)

    async def run(self, hits: Sequence[SearchHit], query: str | None = None) -> List[Record]:
        selected = [hit for hit in hits if hit.kind in self.stage.kinds]
        skipped = len(hits) - len(selected)
        if skipped:
            LOGGER.debug("Ignoring %s hit(s) of unsupported resource kinds", skipped)

        settled = await asyncio.gather(
            *(self._run_one(hit, query) for hit in selected), return_exceptions=True
        )

        records: List[Record] = []
        for hit, outcome in zip(selected, settled):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                LOGGER.error("Pipeline for %s did not settle: %s", hit.name, outcome)
                outcome = self.stage.on_error(hit, outcome)
            records.append(outcome)

        records.sort(key=lambda record: record.rank)
        return records

    async def search_and_run(
        self, gateway: SearchGateway, search_term: str, query: str | None = None
    ) -> PipelineOutcome:
        """Search, then process the hits unless the provider found nothing."""
        response = await gateway.search(search_term)
        if response.total_hits == 0:
            return PipelineOutcome.no_results()

        records = await self.run(response.hits, query)
        LOGGER.info("Processed %s of %s hit(s) for %r", len(records), len(response.hits), search_term)
        return PipelineOutcome(records=records)
