from __future__ import annotations

from typing import Dict, NamedTuple

from core.domain.entities.granularity import Granularity


class AggregationPolicy(NamedTuple):
    bucket_minutes: int
    output_cap: int


class AggregationPolicyService:
    """
    Single lookup table for chart bucketing.

    Rules:
    - bucket_minutes is the bucket width; 1day buckets are UTC calendar days.
    - output_cap is how many of the most recent points a chart keeps
      (390 = one 6.5h trading session of 1-minute points, 30 = a month of days).

    Both the normalizer and the synthetic generator read from here so width
    and cap cannot drift apart per granularity.
    """

    _POLICIES: Dict[Granularity, AggregationPolicy] = {
        Granularity.ONE_MINUTE: AggregationPolicy(bucket_minutes=1, output_cap=390),
        Granularity.FIVE_MINUTES: AggregationPolicy(bucket_minutes=5, output_cap=390),
        Granularity.FIFTEEN_MINUTES: AggregationPolicy(bucket_minutes=15, output_cap=390),
        Granularity.THIRTY_MINUTES: AggregationPolicy(bucket_minutes=30, output_cap=390),
        Granularity.ONE_HOUR: AggregationPolicy(bucket_minutes=60, output_cap=390),
        Granularity.ONE_DAY: AggregationPolicy(bucket_minutes=1440, output_cap=30),
    }

    @classmethod
    def policy_for(cls, granularity: Granularity | str) -> AggregationPolicy:
        return cls._POLICIES[Granularity(granularity)]

    @classmethod
    def bucket_minutes(cls, granularity: Granularity | str) -> int:
        return cls.policy_for(granularity).bucket_minutes

    @classmethod
    def output_cap(cls, granularity: Granularity | str) -> int:
        return cls.policy_for(granularity).output_cap

    @staticmethod
    def bucket_ms(granularity: Granularity | str) -> int:
        return AggregationPolicyService.bucket_minutes(granularity) * 60_000
