from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List


class MarketDataSource(ABC):
    """Port for pulling raw PSX documents through one or more candidate URLs."""

    @abstractmethod
    def candidate_urls(self, target_url: str) -> List[str]: ...

    @abstractmethod
    async def fetch_text(self, url: str) -> str: ...

    @abstractmethod
    async def fetch_json(self, url: str) -> Any:
        """Raises httpx.HTTPError, including httpx.DecodingError for a non-JSON body."""

    @abstractmethod
    async def aclose(self) -> None: ...
