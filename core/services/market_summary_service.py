from __future__ import annotations

from typing import Iterable

from core.domain.entities.market_summary_entity import MarketSummaryEntity
from core.domain.entities.quote_entity import QuoteEntity


class MarketSummaryService:
    """
    Aggregates a snapshot into market-wide counters.

    Rules:
    - gainers: change > 0, losers: change < 0, unchanged: change == 0
    - total_volume: sum of all quote volumes
    """

    @staticmethod
    def calculate(quotes: Iterable[QuoteEntity]) -> MarketSummaryEntity:
        quotes = list(quotes)
        return MarketSummaryEntity(
            total_stocks=len(quotes),
            gainers=sum(1 for q in quotes if q.change > 0),
            losers=sum(1 for q in quotes if q.change < 0),
            unchanged=sum(1 for q in quotes if q.change == 0),
            total_volume=sum(int(q.volume) for q in quotes),
        )
