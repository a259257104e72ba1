from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from core.domain.entities.chart_point_entity import ChartPointEntity
from core.domain.entities.granularity import Granularity
from core.domain.entities.quote_entity import QuoteEntity
from core.domain.entities.stock_time_series_entity import HistoricalPointEntity, StockTimeSeriesEntity
from core.services.aggregation_policy_service import AggregationPolicyService
from core.services.time_series_normalizer_service import format_display_date

DEFAULT_SECTOR = "ALLSHR"

# Last known good rows of the market-watch table, served when every source fails.
_FALLBACK_QUOTES: List[Dict[str, Any]] = [
    {
        "symbol": "DFSM",
        "company": "Dewan Farooque Spinning Mills Limited",
        "sector": "ALLSHR,KMIALLSHR",
        "ldcp": 8.18, "open": 8.65, "high": 8.69, "low": 7.35, "current": 7.50,
        "change": -0.68, "change_percent": -8.31, "volume": 24127221,
    },
    {
        "symbol": "WTL",
        "company": "Worldcall Telecom Limited",
        "sector": "ALLSHR",
        "ldcp": 1.49, "open": 1.49, "high": 1.52, "low": 1.45, "current": 1.47,
        "change": -0.02, "change_percent": -1.34, "volume": 19758898,
    },
    {
        "symbol": "GGL",
        "company": "Ghani Global Holdings Limited",
        "sector": "ALLSHR,KMIALLSHR",
        "ldcp": 19.51, "open": 19.89, "high": 20.94, "low": 19.62, "current": 20.64,
        "change": 1.13, "change_percent": 5.79, "volume": 16285249,
    },
    {
        "symbol": "BOP",
        "company": "The Bank of Punjab",
        "sector": "ALLSHR,KSE100,KSE100PR,PSXDIV20",
        "ldcp": 12.74, "open": 12.80, "high": 12.80, "low": 12.53, "current": 12.69,
        "change": -0.05, "change_percent": -0.39, "volume": 14937494,
    },
    {
        "symbol": "AKBL",
        "company": "Askari Bank Limited",
        "sector": "ALLSHR,KSE100,KSE100PR,PSXDIV20",
        "ldcp": 67.55, "open": 67.50, "high": 69.40, "low": 66.80, "current": 68.16,
        "change": 0.61, "change_percent": 0.90, "volume": 12818237,
    },
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyntheticDataService:
    """
    Produces plausible substitute data when no upstream source is usable.

    - All randomness goes through one random.Random, so a seed makes every
      output reproducible.
    - Chart series use the same width/cap table as real normalized output,
      so callers cannot tell the shapes apart.
    """

    CHART_VOLATILITY = 0.03
    HISTORY_VOLATILITY = 0.05
    MAX_VOLUME = 1_000_000

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._rng = rng or random.Random(seed)
        self._clock = clock or _utcnow

    def chart_points(self, granularity: Granularity | str, now: Optional[datetime] = None) -> List[ChartPointEntity]:
        """
        Random-walk chart series ending at the bucket that contains `now`.

        Returns exactly output_cap points spaced one bucket apart.
        """
        granularity = Granularity(granularity)
        policy = AggregationPolicyService.policy_for(granularity)
        width_ms = AggregationPolicyService.bucket_ms(granularity)

        now_ms = int((now or self._clock()).timestamp() * 1000)
        anchor = now_ms - (now_ms % width_ms)

        price = 100 + self._rng.random() * 50
        points: List[ChartPointEntity] = []
        for i in range(policy.output_cap - 1, -1, -1):
            ts = anchor - i * width_ms
            step = (self._rng.random() - 0.5) * self.CHART_VOLATILITY * price
            price = max(price + step, 1.0)
            points.append(
                ChartPointEntity(
                    timestamp=ts,
                    date=format_display_date(ts, granularity),
                    price=round(price, 2),
                    volume=self._rng.randrange(self.MAX_VOLUME),
                )
            )
        return points

    def historical_points(self, days: int = 30, now: Optional[datetime] = None) -> List[HistoricalPointEntity]:
        """Daily OHLCV bars from `days` days ago up to today, inclusive."""
        today = (now or self._clock()).astimezone(timezone.utc).date()
        base = 100 + self._rng.random() * 50

        bars: List[HistoricalPointEntity] = []
        for i in range(days, -1, -1):
            change = (self._rng.random() - 0.5) * self.HISTORY_VOLATILITY * base
            open_ = base
            close = base + change
            high = max(open_, close) * (1 + self._rng.random() * 0.02)
            low = min(open_, close) * (1 - self._rng.random() * 0.02)
            bars.append(
                HistoricalPointEntity(
                    date=(today - timedelta(days=i)).isoformat(),
                    open=round(open_, 2),
                    high=round(high, 2),
                    low=round(low, 2),
                    close=round(close, 2),
                    volume=self._rng.randrange(self.MAX_VOLUME),
                )
            )
            base = close
        return bars

    @staticmethod
    def fallback_quotes() -> List[QuoteEntity]:
        return [QuoteEntity(**row, is_positive=row["change"] >= 0) for row in _FALLBACK_QUOTES]

    def fundamentals(self, current_price: float) -> Dict[str, float]:
        """
        Placeholder fundamentals; PSX market-watch does not publish them.
        """
        return {
            "market_cap": self._rng.random() * 10_000_000_000,
            "pe_ratio": self._rng.random() * 30 + 5,
            "dividend_yield": self._rng.random() * 8,
            "high_52_week": current_price * (1 + self._rng.random() * 0.5),
            "low_52_week": current_price * (1 - self._rng.random() * 0.3),
        }

    def placeholder_time_series(
        self,
        symbol: str,
        granularity: Granularity | str = Granularity.ONE_MINUTE,
    ) -> StockTimeSeriesEntity:
        """
        Full detail payload for a symbol with no usable quote.

        Uses the fallback quote when the symbol is one of them, otherwise
        random quote fields.
        """
        granularity = Granularity(granularity)
        known = next((q for q in self.fallback_quotes() if q.symbol == symbol), None)

        if known is not None:
            fields: Dict[str, Any] = {
                "company": known.company,
                "sector": known.sector,
                "current_price": known.current,
                "change": known.change,
                "change_percent": known.change_percent,
                "volume": known.volume,
            }
        else:
            fields = {
                "company": f"{symbol} Company Limited",
                "sector": DEFAULT_SECTOR,
                "current_price": 100 + self._rng.random() * 50,
                "change": (self._rng.random() - 0.5) * 10,
                "change_percent": (self._rng.random() - 0.5) * 20,
                "volume": self._rng.randrange(self.MAX_VOLUME),
            }

        return StockTimeSeriesEntity(
            symbol=symbol,
            **fields,
            **self.fundamentals(fields["current_price"]),
            historical_data=self.historical_points(),
            chart_data=self.chart_points(granularity),
            granularity=granularity,
            is_synthetic=True,
        )
