from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

import httpx
from pydantic import BaseModel, Field

T = TypeVar("T")


class SourceAttemptState(str, Enum):
    PENDING = "PENDING"
    TRY_NEXT = "TRY_NEXT"
    SUCCESS = "SUCCESS"
    EXHAUSTED_FALLBACK = "EXHAUSTED_FALLBACK"


class SourceAttemptError(BaseModel):
    source: str
    error: str


class SourceResolution(BaseModel, Generic[T]):
    """
    Final outcome of walking the candidate sources.

    value is set only when state is SUCCESS.
    """

    state: SourceAttemptState
    value: Optional[T] = None
    source: Optional[str] = None
    errors: List[SourceAttemptError] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == SourceAttemptState.SUCCESS


class SourceAttemptRunner:
    """
    Tries an ordered list of upstream sources, one at a time.

    States:
      PENDING -> TRY_NEXT (after a failed/unusable attempt) -> SUCCESS
                                                         \\-> EXHAUSTED_FALLBACK

    An attempt fails when it raises httpx.HTTPError (unreachable, timeout,
    non-2xx, undecodable body) or returns None (unusable payload). The
    first usable value short-circuits the remaining sources.
    Any other exception is a bug and propagates.
    """

    RECOVERABLE_ERRORS = (httpx.HTTPError,)

    def __init__(self, sources: Sequence[str], *, logger: logging.Logger | None = None) -> None:
        self._sources = list(sources)
        self._logger = logger or logging.getLogger(self.__class__.__name__)
        self._state = SourceAttemptState.PENDING

    @property
    def state(self) -> SourceAttemptState:
        return self._state

    async def resolve(self, attempt: Callable[[str], Awaitable[Optional[Any]]]) -> SourceResolution:
        errors: List[SourceAttemptError] = []
        total = len(self._sources)

        for idx, source in enumerate(self._sources, start=1):
            self._logger.info("Attempt %s/%s source=%s", idx, total, source)
            try:
                value = await attempt(source)
            except self.RECOVERABLE_ERRORS as exc:
                self._logger.warning("Source %s/%s failed source=%s: %s", idx, total, source, exc)
                errors.append(SourceAttemptError(source=source, error=str(exc) or exc.__class__.__name__))
                self._state = SourceAttemptState.TRY_NEXT
                continue

            if value is None:
                self._logger.warning("Source %s/%s returned no usable data source=%s", idx, total, source)
                errors.append(SourceAttemptError(source=source, error="no usable data"))
                self._state = SourceAttemptState.TRY_NEXT
                continue

            self._state = SourceAttemptState.SUCCESS
            return SourceResolution(state=self._state, value=value, source=source, errors=errors)

        self._logger.error("All %s sources failed, falling back to synthetic data", total)
        self._state = SourceAttemptState.EXHAUSTED_FALLBACK
        return SourceResolution(state=self._state, errors=errors)
