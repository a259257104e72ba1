from __future__ import annotations

import json
from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, Field

from core.domain.entities.chart_point_entity import RawPointEntity
from core.services.time_series_normalizer_service import TimeSeriesNormalizerService


class UsablePayload(BaseModel):
    kind: Literal["usable"] = "usable"
    raw_points: List[RawPointEntity] = Field(default_factory=list)


class UnusablePayload(BaseModel):
    kind: Literal["unusable"] = "unusable"
    reason: str


PayloadParseResult = Annotated[Union[UsablePayload, UnusablePayload], Field(discriminator="kind")]


class TimeSeriesPayloadParser:
    """
    Validates the PSX time-series payload shape once, up front.

    Expected shape:
      {"status": 1, "data": [[ts_seconds, price, volume], ...]}

    Anything else yields UnusablePayload so downstream code never probes
    fields of an unknown document.
    """

    @staticmethod
    def parse(payload: Any) -> PayloadParseResult:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError:
                return UnusablePayload(reason="payload is not valid JSON")

        if not isinstance(payload, dict):
            return UnusablePayload(reason=f"expected an object, got {type(payload).__name__}")

        status = payload.get("status")
        if isinstance(status, bool) or status != 1:
            return UnusablePayload(reason=f"unexpected status {status!r}")

        data = payload.get("data")
        if not isinstance(data, list):
            return UnusablePayload(reason="data is not a list")

        return UsablePayload(raw_points=TimeSeriesNormalizerService.coerce(data))
