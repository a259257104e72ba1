from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx
import pytest

from core.repositories.market_data_source import MarketDataSource
from core.services.synthetic_data_service import SyntheticDataService

PROXIES = ["https://proxy-a.test/?", "https://proxy-b.test/?"]

FIXED_NOW = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


class FakeMarketSource(MarketDataSource):
    """
    In-memory source. Responses are keyed by proxy prefix; an Exception value
    is raised instead of returned.
    """

    def __init__(self, responses: Dict[str, Any]):
        self._responses = responses
        self.calls: List[str] = []
        self.closed = False

    def candidate_urls(self, target_url: str) -> List[str]:
        return [f"{p}{target_url}" for p in PROXIES]

    def _respond(self, url: str) -> Any:
        self.calls.append(url)
        prefix = next(p for p in PROXIES if url.startswith(p))
        value = self._responses.get(prefix, httpx.ConnectError("unreachable"))
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_text(self, url: str) -> str:
        return self._respond(url)

    async def fetch_json(self, url: str) -> Any:
        return self._respond(url)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_source():
    def _make(**responses):
        return FakeMarketSource({PROXIES[int(k[-1])]: v for k, v in responses.items()})
    return _make


@pytest.fixture
def synthetic():
    return SyntheticDataService(seed=123, clock=lambda: FIXED_NOW)


MARKET_WATCH_HTML = """
<table>
  <tr>
    <td><a data-title="Ghani Global Holdings Limited"><strong>GGL</strong></a></td>
    <td>REG</td><td>ALLSHR</td>
    <td data-order="19.51"></td><td data-order="19.89"></td><td data-order="20.94"></td>
    <td data-order="19.62"></td><td data-order="20.64"></td><td data-order="1.13"></td>
    <td data-order="5.79"></td><td data-order="16285249"></td>
  </tr>
  <tr>
    <td><a data-title="The Bank of Punjab"><strong>BOP</strong></a></td>
    <td>REG</td><td>ALLSHR,KSE100</td>
    <td data-order="12.74"></td><td data-order="12.80"></td><td data-order="12.80"></td>
    <td data-order="12.53"></td><td data-order="12.69"></td><td data-order="-0.05"></td>
    <td data-order="-0.39"></td><td data-order="14937494"></td>
  </tr>
  <tr>
    <td><a data-title="Flat Co"><strong>FLAT</strong></a></td>
    <td>REG</td><td>ALLSHR</td>
    <td data-order="5"></td><td data-order="5"></td><td data-order="5"></td>
    <td data-order="5"></td><td data-order="5"></td><td data-order="0"></td>
    <td data-order="0"></td><td data-order="100"></td>
  </tr>
</table>
"""

TIME_SERIES_PAYLOAD = {
    "status": 1,
    "data": [
        [1700000060, "10.6", "200"],
        [1700000000, "10.5", "100"],
        [1700000100, "11.0", "50"],
    ],
}


@pytest.fixture
def market_watch_html():
    return MARKET_WATCH_HTML


@pytest.fixture
def time_series_payload():
    return TIME_SERIES_PAYLOAD
