from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence
from urllib.parse import quote

import httpx

from core.repositories.market_data_source import MarketDataSource


class PSXHttpClient(MarketDataSource):
    """
    Minimal PSX data portal client.

    Every upstream URL can be reached through an ordered list of proxy
    prefixes; the target URL is percent-encoded and appended to each prefix:
      https://corsproxy.io/?https%3A%2F%2Fdps.psx.com.pk%2Fmarket-watch

    With no prefixes the target URL itself is the only candidate.
    Each request is bounded by a single timeout; retrying is left to the
    caller walking the candidate list.
    """

    HTML_HEADERS = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    }
    JSON_HEADERS = {
        "Accept": "application/json,text/plain,*/*",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    }

    def __init__(
        self,
        *,
        proxy_prefixes: Optional[Sequence[str]] = None,
        timeout_s: float = 10.0,
        connect_timeout_s: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._proxies = [str(p).strip() for p in (proxy_prefixes or []) if str(p).strip()]
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s, connect=connect_timeout_s),
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def candidate_urls(self, target_url: str) -> List[str]:
        target = str(target_url).strip()
        if not self._proxies:
            return [target]
        encoded = quote(target, safe="")
        return [f"{prefix}{encoded}" for prefix in self._proxies]

    async def fetch_text(self, url: str) -> str:
        r = await self._client.get(url, headers=self.HTML_HEADERS)
        r.raise_for_status()
        return r.text

    async def fetch_json(self, url: str) -> Any:
        r = await self._client.get(url, headers=self.JSON_HEADERS)
        r.raise_for_status()
        try:
            return r.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise httpx.DecodingError(f"invalid JSON from {url}: {exc}", request=r.request) from exc
