from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from core.domain.entities.granularity import Granularity
from core.domain.entities.quote_entity import QuoteEntity
from core.services.market_summary_service import MarketSummaryService
from core.usecases.build_stock_detail_use_case import BuildStockDetailUseCase
from core.usecases.fetch_market_snapshot_use_case import FetchMarketSnapshotUseCase
from core.usecases.fetch_time_series_use_case import FetchTimeSeriesUseCase

from .deps import get_snapshot_use_case, get_stock_detail_use_case, get_time_series_use_case
from .dtos.market_dtos import (
    MarketSummaryOutDTO,
    QuoteOutDTO,
    StockDetailOutDTO,
    TimeSeriesMetadataOutDTO,
    TimeSeriesOutDTO,
)

router = APIRouter(tags=["market"])

logger = logging.getLogger(__name__)

FETCH_FAILED_DETAIL = "Could not fetch market data"


def _quote_out(q: QuoteEntity) -> QuoteOutDTO:
    return QuoteOutDTO.model_validate({**q.model_dump(), "implied_change_percent": q.implied_change_percent()})


@router.get("/market/snapshot", response_model=List[QuoteOutDTO])
async def get_market_snapshot(
    uc: FetchMarketSnapshotUseCase = Depends(get_snapshot_use_case),
) -> List[QuoteOutDTO]:
    """
    Current quote of every listed symbol (fallback snapshot if PSX is unreachable).
    """
    try:
        quotes = await uc.execute()
    except Exception:
        logger.exception("Market snapshot fetch failed")
        raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)
    return [_quote_out(q) for q in quotes]


@router.get("/market/summary", response_model=MarketSummaryOutDTO)
async def get_market_summary(
    uc: FetchMarketSnapshotUseCase = Depends(get_snapshot_use_case),
) -> MarketSummaryOutDTO:
    """
    Gainers/losers/unchanged counts and total volume over the current snapshot.
    """
    try:
        quotes = await uc.execute()
    except Exception:
        logger.exception("Market summary fetch failed")
        raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)
    summary = MarketSummaryService.calculate(quotes)
    return MarketSummaryOutDTO.model_validate(summary.model_dump())


@router.get("/stocks/{symbol}/timeseries", response_model=TimeSeriesOutDTO)
async def get_time_series(
    symbol: str,
    interval: Granularity = Query(Granularity.ONE_MINUTE, description="Chart bucket width"),
    uc: FetchTimeSeriesUseCase = Depends(get_time_series_use_case),
) -> TimeSeriesOutDTO:
    """
    Interval-bucketed chart points for one symbol.
    """
    try:
        series = await uc.execute(symbol=symbol, granularity=interval)
    except Exception:
        logger.exception("Time series fetch failed symbol=%s interval=%s", symbol, interval)
        raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)

    return TimeSeriesOutDTO(
        chart_points=[p.model_dump() for p in series.chart_data],
        metadata=TimeSeriesMetadataOutDTO(
            symbol=series.symbol,
            granularity=Granularity(series.granularity).value,
            points=len(series.chart_data),
            is_synthetic=series.is_synthetic,
            source=series.source,
        ),
    )


@router.get("/stocks/{symbol}", response_model=StockDetailOutDTO)
async def get_stock_detail(
    symbol: str,
    interval: Granularity = Query(Granularity.ONE_MINUTE, description="Chart bucket width"),
    uc: BuildStockDetailUseCase = Depends(get_stock_detail_use_case),
) -> StockDetailOutDTO:
    """
    Detail view: quote fields, fundamentals, history and chart for one symbol.
    """
    try:
        detail = await uc.execute(symbol=symbol, granularity=interval)
    except Exception:
        logger.exception("Stock detail fetch failed symbol=%s interval=%s", symbol, interval)
        raise HTTPException(status_code=502, detail=FETCH_FAILED_DETAIL)
    return StockDetailOutDTO.model_validate(detail.model_dump(mode="json"))
