from __future__ import annotations

import logging
from typing import List, Optional

from core.domain.entities.quote_entity import QuoteEntity
from core.repositories.market_data_source import MarketDataSource
from core.services.snapshot_parser_service import SnapshotParserService
from core.services.source_attempt_service import SourceAttemptRunner
from core.services.synthetic_data_service import SyntheticDataService


class FetchMarketSnapshotUseCase:
    """
    Fetches the PSX market-watch page and parses it into quotes.

    Behavior:
      - Candidate URLs are tried in order; the first page yielding at least
        one quote wins.
      - A page that parses to zero quotes counts as a failed attempt.
      - When every candidate fails, the fixed fallback snapshot is returned.
        This never raises for upstream problems.
    """

    def __init__(
        self,
        *,
        source: MarketDataSource,
        market_watch_url: str,
        parser: Optional[SnapshotParserService] = None,
        synthetic: Optional[SyntheticDataService] = None,
        logger: logging.Logger | None = None,
    ):
        self._source = source
        self._url = market_watch_url
        self._parser = parser or SnapshotParserService()
        self._synthetic = synthetic or SyntheticDataService()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def execute(self) -> List[QuoteEntity]:
        runner = SourceAttemptRunner(self._source.candidate_urls(self._url), logger=self._logger)

        async def attempt(url: str) -> Optional[List[QuoteEntity]]:
            html = await self._source.fetch_text(url)
            quotes = self._parser.parse(html)
            return quotes or None

        resolution = await runner.resolve(attempt)
        if resolution.succeeded:
            self._logger.info("Fetched %s quotes source=%s", len(resolution.value), resolution.source)
            return list(resolution.value)

        return self._synthetic.fallback_quotes()
