from __future__ import annotations

from enum import Enum


class Granularity(str, Enum):
    """
    Chart bucket width requested by the caller.

    Values match the interval labels used by the chart UI.
    """

    ONE_MINUTE = "1min"
    FIVE_MINUTES = "5min"
    FIFTEEN_MINUTES = "15min"
    THIRTY_MINUTES = "30min"
    ONE_HOUR = "1hour"
    ONE_DAY = "1day"

    @property
    def is_daily(self) -> bool:
        return self is Granularity.ONE_DAY
