from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from core.domain.entities.chart_point_entity import ChartPointEntity, RawPointEntity
from core.domain.entities.granularity import Granularity
from core.services.aggregation_policy_service import AggregationPolicyService

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Representable datetime range, in epoch seconds (0001-01-01 .. 9999-12-31T23:59:59).
_MIN_TS = -62_135_596_800
_MAX_TS = 253_402_300_799


class TimeSeriesNormalizerService:
    """
    Turns raw PSX time-series rows into bounded, interval-bucketed chart points.

    Pipeline:
      1. coerce rows ([ts_seconds, price, volume]); rows with < 3 fields are dropped
      2. seconds -> milliseconds
      3. stable sort by timestamp
      4. 1min: pass through, other granularities: bucket by floored timestamp
      5. bucket -> one point (mean price rounded to 2dp, summed volume,
         earliest timestamp in the bucket)
      6. sort, keep the most recent `output_cap` points

    Never raises on malformed input: bad fields become 0, bad rows are dropped,
    empty input gives an empty list. Choosing a fallback is the caller's job.
    """

    @staticmethod
    def coerce(rows: Optional[Iterable[Any]]) -> List[RawPointEntity]:
        """
        Coerce loosely-typed rows into RawPointEntity values.

        Args:
            rows: Iterable of [ts_seconds, price, volume, ...] sequences or
                RawPointEntity instances.

        Returns:
            Coerced points, in input order.
        """
        if rows is None or isinstance(rows, (str, bytes, dict)):
            return []
        try:
            items = list(rows)
        except TypeError:
            return []

        out: List[RawPointEntity] = []
        for row in items:
            if isinstance(row, RawPointEntity):
                row = [row.ts, row.price, row.volume]
            if not isinstance(row, (list, tuple)) or len(row) < 3:
                continue

            ts = _to_timestamp(row[0])
            if ts is None:
                continue

            out.append(
                RawPointEntity(
                    ts=ts,
                    price=_to_price(row[1]),
                    volume=_to_volume(row[2]),
                )
            )
        return out

    @classmethod
    def normalize(cls, raw_points: Optional[Iterable[Any]], granularity: Granularity | str) -> List[ChartPointEntity]:
        """
        Normalize raw rows into chart points for one granularity.

        Args:
            raw_points: Rows as accepted by coerce().
            granularity: Requested chart interval.

        Returns:
            Points sorted ascending by timestamp, at most output_cap long.
        """
        granularity = Granularity(granularity)
        policy = AggregationPolicyService.policy_for(granularity)

        points = cls.coerce(raw_points)
        points.sort(key=lambda p: p.ts)

        if granularity is Granularity.ONE_MINUTE:
            chart = [
                ChartPointEntity(
                    timestamp=p.ts * 1000,
                    date=format_display_date(p.ts * 1000, granularity),
                    price=p.price,
                    volume=p.volume,
                )
                for p in points
            ]
        else:
            chart = cls._bucket(points, granularity, AggregationPolicyService.bucket_ms(granularity))

        chart.sort(key=lambda p: p.timestamp)
        return chart[-policy.output_cap:]

    @staticmethod
    def _bucket(points: List[RawPointEntity], granularity: Granularity, width_ms: int) -> List[ChartPointEntity]:
        # A 1day width floors to UTC midnight, i.e. the UTC calendar date.
        buckets: Dict[int, Dict[str, Any]] = {}
        for p in points:
            ts_ms = p.ts * 1000
            key = ts_ms - (ts_ms % width_ms)

            bucket = buckets.get(key)
            if bucket is None:
                bucket = {"timestamp": ts_ms, "prices": [], "volumes": []}
                buckets[key] = bucket

            bucket["prices"].append(p.price)
            bucket["volumes"].append(p.volume)
            if ts_ms < bucket["timestamp"]:
                bucket["timestamp"] = ts_ms

        out: List[ChartPointEntity] = []
        for bucket in buckets.values():
            prices = bucket["prices"]
            out.append(
                ChartPointEntity(
                    timestamp=bucket["timestamp"],
                    date=format_display_date(bucket["timestamp"], granularity),
                    price=round(sum(prices) / len(prices), 2),
                    volume=sum(bucket["volumes"]),
                )
            )
        return out


def format_display_date(ts_ms: int, granularity: Granularity | str) -> str:
    """
    "YYYY-MM-DD" for daily charts, "YYYY-MM-DDTHH:MM:SS.mmmZ" (UTC) otherwise.
    """
    dt = _EPOCH + timedelta(milliseconds=ts_ms)
    if Granularity(granularity).is_daily:
        return dt.date().isoformat()
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _to_timestamp(value: Any) -> Optional[int]:
    number = _to_number(value)
    if number is None:
        return None
    ts = int(number)
    if ts < _MIN_TS or ts > _MAX_TS:
        return None
    return ts


def _to_price(value: Any) -> float:
    number = _to_number(value)
    return 0.0 if number is None else number


def _to_volume(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    number = _to_number(value)
    if number is None:
        return 0
    return max(int(number), 0)
