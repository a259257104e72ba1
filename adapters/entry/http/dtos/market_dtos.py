from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class QuoteOutDTO(BaseModel):
    """
    Response DTO for one market-watch row.
    """
    symbol: str
    company: str
    sector: str

    ldcp: float = Field(..., description="Last day closing price")
    open: float
    high: float
    low: float
    current: float

    change: float
    change_percent: float = Field(..., description="Change percent as published by PSX")
    implied_change_percent: float = Field(..., description="change / (current - change) * 100")
    volume: int

    is_positive: bool


class MarketSummaryOutDTO(BaseModel):
    """
    Response DTO for market-wide counters.
    """
    total_stocks: int
    gainers: int
    losers: int
    unchanged: int
    total_volume: int


class ChartPointOutDTO(BaseModel):
    timestamp: int = Field(..., description="Milliseconds since epoch")
    date: str
    price: float
    volume: int


class HistoricalPointOutDTO(BaseModel):
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


class TimeSeriesMetadataOutDTO(BaseModel):
    symbol: str
    granularity: str
    points: int
    is_synthetic: bool
    source: Optional[str] = None


class TimeSeriesOutDTO(BaseModel):
    """
    Response DTO for a chart series plus how it was obtained.
    """
    chart_points: List[ChartPointOutDTO]
    metadata: TimeSeriesMetadataOutDTO


class StockDetailOutDTO(BaseModel):
    """
    Response DTO for the per-symbol detail view.
    """
    symbol: str
    company: str
    sector: str

    current_price: float
    change: float
    change_percent: float
    volume: int

    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    dividend_yield: Optional[float] = None
    high_52_week: Optional[float] = None
    low_52_week: Optional[float] = None

    historical_data: List[HistoricalPointOutDTO] = Field(default_factory=list)
    chart_data: List[ChartPointOutDTO] = Field(default_factory=list)

    granularity: str
    is_synthetic: bool
    source: Optional[str] = None
