from datetime import date, datetime, timezone

import pytest

from core.domain.entities.granularity import Granularity
from core.services.aggregation_policy_service import AggregationPolicyService
from core.services.synthetic_data_service import SyntheticDataService
from core.services.time_series_normalizer_service import TimeSeriesNormalizerService

NOW = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def _clock():
    return NOW


@pytest.mark.parametrize("granularity", list(Granularity))
def test_chart_points_match_real_output_shape(granularity):
    points = SyntheticDataService(seed=1, clock=_clock).chart_points(granularity)

    width_ms = AggregationPolicyService.bucket_ms(granularity)
    timestamps = [p.timestamp for p in points]
    assert len(points) == AggregationPolicyService.output_cap(granularity)
    assert timestamps == sorted(timestamps)
    assert all(b - a == width_ms for a, b in zip(timestamps, timestamps[1:]))
    assert all(t % width_ms == 0 for t in timestamps)
    assert all(p.price >= 1.0 for p in points)
    assert all(0 <= p.volume < SyntheticDataService.MAX_VOLUME for p in points)


@pytest.mark.parametrize("granularity", list(Granularity))
def test_chart_points_survive_normalization_unchanged(granularity):
    points = SyntheticDataService(seed=5, clock=_clock).chart_points(granularity)

    again = TimeSeriesNormalizerService.normalize(
        [[p.timestamp // 1000, p.price, p.volume] for p in points], granularity
    )

    assert again == points


def test_daily_chart_uses_calendar_dates_ending_today():
    points = SyntheticDataService(seed=2, clock=_clock).chart_points(Granularity.ONE_DAY)

    assert points[-1].date == "2023-11-14"
    assert points[0].date == "2023-10-16"


def test_intraday_chart_ends_at_current_bucket():
    points = SyntheticDataService(seed=2, clock=_clock).chart_points(Granularity.FIFTEEN_MINUTES)

    assert points[-1].date == "2023-11-14T22:00:00.000Z"


def test_same_seed_gives_same_series():
    a = SyntheticDataService(seed=42, clock=_clock)
    b = SyntheticDataService(seed=42, clock=_clock)

    assert a.chart_points(Granularity.FIVE_MINUTES) == b.chart_points(Granularity.FIVE_MINUTES)
    assert a.historical_points() == b.historical_points()


def test_different_seeds_give_different_series():
    a = SyntheticDataService(seed=1, clock=_clock).chart_points(Granularity.ONE_MINUTE)
    b = SyntheticDataService(seed=2, clock=_clock).chart_points(Granularity.ONE_MINUTE)

    assert [p.price for p in a] != [p.price for p in b]


def test_historical_points_cover_thirty_one_days():
    bars = SyntheticDataService(seed=3, clock=_clock).historical_points()

    assert len(bars) == 31
    assert bars[0].date == "2023-10-15"
    assert bars[-1].date == date(2023, 11, 14).isoformat()
    for bar in bars:
        assert bar.low <= min(bar.open, bar.close)
        assert bar.high >= max(bar.open, bar.close)


def test_fallback_quotes_are_fixed():
    quotes = SyntheticDataService.fallback_quotes()

    assert [q.symbol for q in quotes] == ["DFSM", "WTL", "GGL", "BOP", "AKBL"]
    assert [q.is_positive for q in quotes] == [False, False, True, False, True]


def test_fundamentals_are_derived_from_price():
    f = SyntheticDataService(seed=9).fundamentals(100.0)

    assert 0 <= f["market_cap"] < 10_000_000_000
    assert 5 <= f["pe_ratio"] < 35
    assert 0 <= f["dividend_yield"] < 8
    assert 100.0 <= f["high_52_week"] <= 150.0
    assert 70.0 <= f["low_52_week"] <= 100.0


def test_placeholder_for_known_symbol_reuses_fallback_quote():
    series = SyntheticDataService(seed=4, clock=_clock).placeholder_time_series("GGL", Granularity.ONE_DAY)

    assert series.company == "Ghani Global Holdings Limited"
    assert series.current_price == 20.64
    assert series.is_synthetic is True
    assert len(series.chart_data) == 30
    assert len(series.historical_data) == 31


def test_placeholder_for_unknown_symbol():
    series = SyntheticDataService(seed=4, clock=_clock).placeholder_time_series("ZZZ")

    assert series.company == "ZZZ Company Limited"
    assert series.sector == "ALLSHR"
    assert 100 <= series.current_price <= 150
    assert len(series.chart_data) == 390
