from __future__ import annotations

import logging
from typing import Optional

from core.domain.entities.granularity import Granularity
from core.domain.entities.stock_time_series_entity import StockTimeSeriesEntity
from core.services.synthetic_data_service import SyntheticDataService
from core.usecases.fetch_market_snapshot_use_case import FetchMarketSnapshotUseCase
from core.usecases.fetch_time_series_use_case import FetchTimeSeriesUseCase


class BuildStockDetailUseCase:
    """
    Builds the detail view payload for one symbol.

    Quote fields come from the market snapshot, chart_data from the time
    series. Fundamentals and historical bars are synthetic (PSX publishes
    neither on these pages). A symbol missing from the snapshot gets
    placeholder quote fields but still carries the fetched chart.
    """

    def __init__(
        self,
        *,
        snapshot_use_case: FetchMarketSnapshotUseCase,
        time_series_use_case: FetchTimeSeriesUseCase,
        synthetic: Optional[SyntheticDataService] = None,
        logger: logging.Logger | None = None,
    ):
        self._snapshot = snapshot_use_case
        self._time_series = time_series_use_case
        self._synthetic = synthetic or SyntheticDataService()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def execute(
        self,
        *,
        symbol: str,
        granularity: Granularity | str = Granularity.ONE_MINUTE,
    ) -> StockTimeSeriesEntity:
        symbol = str(symbol).strip().upper()
        granularity = Granularity(granularity)

        quotes = await self._snapshot.execute()
        series = await self._time_series.execute(symbol=symbol, granularity=granularity)

        chart_fields = {
            "chart_data": series.chart_data,
            "granularity": granularity,
            "is_synthetic": series.is_synthetic,
            "source": series.source,
        }

        quote = next((q for q in quotes if q.symbol.upper() == symbol), None)
        if quote is None:
            self._logger.info("Symbol not in snapshot, using placeholder quote symbol=%s", symbol)
            placeholder = self._synthetic.placeholder_time_series(symbol, granularity)
            return placeholder.model_copy(update=chart_fields)

        return StockTimeSeriesEntity(
            symbol=quote.symbol,
            company=quote.company,
            sector=quote.sector,
            current_price=quote.current,
            change=quote.change,
            change_percent=quote.change_percent,
            volume=quote.volume,
            **self._synthetic.fundamentals(quote.current),
            historical_data=self._synthetic.historical_points(),
            **chart_fields,
        )
