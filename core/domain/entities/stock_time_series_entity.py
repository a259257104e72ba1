# core/domain/entities/stock_time_series_entity.py
from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from core.domain.entities.base_entity import DomainEntity
from core.domain.entities.chart_point_entity import ChartPointEntity
from core.domain.entities.granularity import Granularity


class HistoricalPointEntity(DomainEntity):
    """Daily OHLCV bar shown in the detail view history table."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


class StockTimeSeriesEntity(DomainEntity):
    """
    Per-symbol detail payload: quote fields, optional fundamentals, chart series.

    Metadata:
      - granularity: interval the chart_data was bucketed with.
      - is_synthetic: True when chart_data came from the synthetic generator.
      - source: upstream URL that produced chart_data (None when synthetic).
    """

    symbol: str
    company: str
    sector: str

    current_price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    volume: int = 0

    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    dividend_yield: Optional[float] = None
    high_52_week: Optional[float] = None
    low_52_week: Optional[float] = None

    historical_data: List[HistoricalPointEntity] = Field(default_factory=list)
    chart_data: List[ChartPointEntity] = Field(default_factory=list)

    granularity: Granularity = Granularity.ONE_MINUTE
    is_synthetic: bool = False
    source: Optional[str] = None
