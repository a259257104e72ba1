# core/domain/entities/chart_point_entity.py
from __future__ import annotations

from core.domain.entities.base_entity import DomainEntity


class RawPointEntity(DomainEntity):
    """
    One coerced row of the upstream time-series feed.

    ts is in seconds (as delivered by PSX). price and volume are already
    defaulted to 0 when the upstream value was missing or not numeric.
    """

    ts: int
    price: float = 0.0
    volume: int = 0


class ChartPointEntity(DomainEntity):
    """
    Canonical chart output unit.

    timestamp is in milliseconds since epoch.
    date is "YYYY-MM-DD" for daily charts, else an ISO UTC datetime
    ("2023-11-14T22:13:20.000Z").
    """

    timestamp: int
    date: str
    price: float
    volume: int
