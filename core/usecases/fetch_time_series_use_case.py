# core/usecases/fetch_time_series_use_case.py
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

from core.domain.entities.chart_point_entity import ChartPointEntity
from core.domain.entities.granularity import Granularity
from core.domain.entities.stock_time_series_entity import StockTimeSeriesEntity
from core.repositories.market_data_source import MarketDataSource
from core.services.payload_parser_service import TimeSeriesPayloadParser, UnusablePayload
from core.services.source_attempt_service import SourceAttemptRunner
from core.services.synthetic_data_service import DEFAULT_SECTOR, SyntheticDataService
from core.services.time_series_normalizer_service import TimeSeriesNormalizerService


class FetchTimeSeriesUseCase:
    """
    Fetches the intraday time series of one symbol and normalizes it to a chart.

    Behavior:
      - Payload shape is validated once (TimeSeriesPayloadParser); an unusable
        payload counts as a failed attempt and the next source is tried.
      - A usable payload that normalizes to zero points also counts as failed.
      - When every source fails, chart_data is a synthetic series with the
        same width/cap and is_synthetic=True.
    """

    def __init__(
        self,
        *,
        source: MarketDataSource,
        timeseries_base_url: str,
        synthetic: Optional[SyntheticDataService] = None,
        logger: logging.Logger | None = None,
    ):
        self._source = source
        self._base_url = str(timeseries_base_url)
        self._synthetic = synthetic or SyntheticDataService()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    def target_url(self, symbol: str) -> str:
        return f"{self._base_url}{quote(symbol, safe='')}"

    async def execute(
        self,
        *,
        symbol: str,
        granularity: Granularity | str = Granularity.ONE_MINUTE,
    ) -> StockTimeSeriesEntity:
        symbol = str(symbol).strip().upper()
        granularity = Granularity(granularity)

        runner = SourceAttemptRunner(self._source.candidate_urls(self.target_url(symbol)), logger=self._logger)

        async def attempt(url: str) -> Optional[List[ChartPointEntity]]:
            payload = await self._source.fetch_json(url)
            parsed = TimeSeriesPayloadParser.parse(payload)
            if isinstance(parsed, UnusablePayload):
                self._logger.warning("Unusable time-series payload symbol=%s: %s", symbol, parsed.reason)
                return None
            return TimeSeriesNormalizerService.normalize(parsed.raw_points, granularity) or None

        resolution = await runner.resolve(attempt)

        if resolution.succeeded:
            chart_data = resolution.value
            is_synthetic = False
        else:
            chart_data = self._synthetic.chart_points(granularity)
            is_synthetic = True

        return StockTimeSeriesEntity(
            symbol=symbol,
            company=f"{symbol} Company Limited",
            sector=DEFAULT_SECTOR,
            chart_data=chart_data,
            granularity=granularity,
            is_synthetic=is_synthetic,
            source=resolution.source,
        )
