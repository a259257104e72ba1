from __future__ import annotations

from fastapi import Depends, Request

from config.settings import settings
from core.repositories.market_data_source import MarketDataSource
from core.services.synthetic_data_service import SyntheticDataService
from core.usecases.build_stock_detail_use_case import BuildStockDetailUseCase
from core.usecases.fetch_market_snapshot_use_case import FetchMarketSnapshotUseCase
from core.usecases.fetch_time_series_use_case import FetchTimeSeriesUseCase


def get_market_source(request: Request) -> MarketDataSource:
    return request.app.state.market_source


def get_synthetic(request: Request) -> SyntheticDataService:
    return request.app.state.synthetic


def get_snapshot_use_case(
    source: MarketDataSource = Depends(get_market_source),
    synthetic: SyntheticDataService = Depends(get_synthetic),
) -> FetchMarketSnapshotUseCase:
    return FetchMarketSnapshotUseCase(
        source=source,
        market_watch_url=settings.PSX_MARKET_WATCH_URL,
        synthetic=synthetic,
    )


def get_time_series_use_case(
    source: MarketDataSource = Depends(get_market_source),
    synthetic: SyntheticDataService = Depends(get_synthetic),
) -> FetchTimeSeriesUseCase:
    return FetchTimeSeriesUseCase(
        source=source,
        timeseries_base_url=settings.PSX_TIMESERIES_URL,
        synthetic=synthetic,
    )


def get_stock_detail_use_case(
    snapshot_use_case: FetchMarketSnapshotUseCase = Depends(get_snapshot_use_case),
    time_series_use_case: FetchTimeSeriesUseCase = Depends(get_time_series_use_case),
    synthetic: SyntheticDataService = Depends(get_synthetic),
) -> BuildStockDetailUseCase:
    return BuildStockDetailUseCase(
        snapshot_use_case=snapshot_use_case,
        time_series_use_case=time_series_use_case,
        synthetic=synthetic,
    )
