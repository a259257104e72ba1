# core/domain/entities/quote_entity.py
from __future__ import annotations

from core.domain.entities.base_entity import DomainEntity


class QuoteEntity(DomainEntity):
    """
    Represents one row of the PSX market-watch snapshot.

    ldcp is the last day closing price. change_percent is the value published
    by PSX; implied_change_percent() recomputes it from change and current so
    the two can be compared without overwriting either.
    """

    symbol: str
    company: str
    sector: str

    ldcp: float = 0.0
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    current: float = 0.0

    change: float = 0.0
    change_percent: float = 0.0
    volume: int = 0

    is_positive: bool = True

    def implied_change_percent(self) -> float:
        """Change relative to the previous price (current - change), in percent."""
        base = self.current - self.change
        if self.change == 0 or base == 0:
            return 0.0
        return self.change / base * 100

    def has_change_percent_discrepancy(self, tolerance: float = 0.01) -> bool:
        return abs(self.implied_change_percent() - self.change_percent) > tolerance
