import httpx
import pytest

from core.domain.entities.granularity import Granularity
from core.usecases.build_stock_detail_use_case import BuildStockDetailUseCase
from core.usecases.fetch_market_snapshot_use_case import FetchMarketSnapshotUseCase
from core.usecases.fetch_time_series_use_case import FetchTimeSeriesUseCase

# Mark all tests in this file as asyncio
pytestmark = pytest.mark.asyncio

MARKET_WATCH_URL = "https://dps.psx.com.pk/market-watch"
TIMESERIES_URL = "https://dps.psx.com.pk/timeseries/int/"


def _snapshot_uc(source, synthetic):
    return FetchMarketSnapshotUseCase(source=source, market_watch_url=MARKET_WATCH_URL, synthetic=synthetic)


def _time_series_uc(source, synthetic):
    return FetchTimeSeriesUseCase(source=source, timeseries_base_url=TIMESERIES_URL, synthetic=synthetic)


async def test_snapshot_from_first_source(fake_source, synthetic, market_watch_html):
    source = fake_source(p0=market_watch_html, p1=market_watch_html)

    quotes = await _snapshot_uc(source, synthetic).execute()

    assert [q.symbol for q in quotes] == ["GGL", "BOP", "FLAT"]
    assert source.calls == [f"https://proxy-a.test/?{MARKET_WATCH_URL}"]


async def test_snapshot_skips_page_without_quotes(fake_source, synthetic, market_watch_html):
    source = fake_source(p0="<html>Too many requests</html>", p1=market_watch_html)

    quotes = await _snapshot_uc(source, synthetic).execute()

    assert len(quotes) == 3
    assert len(source.calls) == 2


async def test_snapshot_falls_back_when_all_sources_fail(fake_source, synthetic):
    source = fake_source(p0=httpx.ConnectError("refused"), p1=httpx.ReadTimeout("slow"))

    quotes = await _snapshot_uc(source, synthetic).execute()

    assert [q.symbol for q in quotes] == ["DFSM", "WTL", "GGL", "BOP", "AKBL"]


async def test_time_series_is_normalized(fake_source, synthetic, time_series_payload):
    source = fake_source(p0=time_series_payload)

    series = await _time_series_uc(source, synthetic).execute(symbol=" ggl ", granularity=Granularity.ONE_MINUTE)

    assert series.symbol == "GGL"
    assert series.is_synthetic is False
    assert series.source == f"https://proxy-a.test/?{TIMESERIES_URL}GGL"
    assert [p.timestamp for p in series.chart_data] == [1700000000000, 1700000060000, 1700000100000]
    assert series.company == "GGL Company Limited"


async def test_time_series_is_bucketed_for_coarser_granularity(fake_source, synthetic, time_series_payload):
    source = fake_source(p0=time_series_payload)

    series = await _time_series_uc(source, synthetic).execute(symbol="GGL", granularity="5min")

    assert [(p.price, p.volume) for p in series.chart_data] == [(10.55, 300), (11.0, 50)]
    assert series.granularity == Granularity.FIVE_MINUTES


async def test_time_series_unusable_payload_tries_next_source(fake_source, synthetic, time_series_payload):
    source = fake_source(p0={"status": 0, "message": "not found"}, p1=time_series_payload)

    series = await _time_series_uc(source, synthetic).execute(symbol="GGL")

    assert series.is_synthetic is False
    assert series.source.startswith("https://proxy-b.test/?")


async def test_time_series_with_no_usable_rows_falls_back(fake_source, synthetic):
    source = fake_source(p0={"status": 1, "data": [[1, 2]]}, p1=httpx.DecodingError("not json"))

    series = await _time_series_uc(source, synthetic).execute(symbol="GGL", granularity=Granularity.ONE_DAY)

    assert series.is_synthetic is True
    assert series.source is None
    assert len(series.chart_data) == 30


async def test_stock_detail_combines_quote_and_chart(fake_source, synthetic, market_watch_html, time_series_payload):
    snapshot_source = fake_source(p0=market_watch_html)
    series_source = fake_source(p0=time_series_payload)
    uc = BuildStockDetailUseCase(
        snapshot_use_case=_snapshot_uc(snapshot_source, synthetic),
        time_series_use_case=_time_series_uc(series_source, synthetic),
        synthetic=synthetic,
    )

    detail = await uc.execute(symbol="bop")

    assert detail.company == "The Bank of Punjab"
    assert detail.current_price == 12.69
    assert detail.change == -0.05
    assert detail.volume == 14937494
    assert detail.market_cap is not None
    assert len(detail.historical_data) == 31
    assert len(detail.chart_data) == 3
    assert detail.is_synthetic is False


async def test_stock_detail_for_unknown_symbol_uses_placeholder(fake_source, synthetic, market_watch_html, time_series_payload):
    uc = BuildStockDetailUseCase(
        snapshot_use_case=_snapshot_uc(fake_source(p0=market_watch_html), synthetic),
        time_series_use_case=_time_series_uc(fake_source(p0=time_series_payload), synthetic),
        synthetic=synthetic,
    )

    detail = await uc.execute(symbol="NOPE", granularity=Granularity.ONE_MINUTE)

    assert detail.company == "NOPE Company Limited"
    assert len(detail.chart_data) == 3
    assert detail.is_synthetic is False
