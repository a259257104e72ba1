from __future__ import annotations

from core.domain.entities.base_entity import DomainEntity


class MarketSummaryEntity(DomainEntity):
    """
    Market-wide counters computed over one snapshot.
    """

    total_stocks: int = 0
    gainers: int = 0
    losers: int = 0
    unchanged: int = 0
    total_volume: int = 0
