"""
Application configuration for psx-market-data.

Centralizes environment variables using python-dotenv.

Note:
- Nothing is persisted; every request recomputes from the upstream PSX pages.
- PSX_PROXY_PREFIXES is an ordered, comma-separated list of URL prefixes tried
  one after another. Leave it empty to hit the upstream URLs directly.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _split_csv(raw: str) -> List[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    return int(raw)


class Settings:
    """
    Configuration settings for the psx-market-data service.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    APP_NAME: str = os.getenv("APP_NAME", "psx-market-data")

    # Upstream PSX data portal
    PSX_MARKET_WATCH_URL: str = os.getenv("PSX_MARKET_WATCH_URL", "https://dps.psx.com.pk/market-watch")
    PSX_TIMESERIES_URL: str = os.getenv("PSX_TIMESERIES_URL", "https://dps.psx.com.pk/timeseries/int/")

    PSX_PROXY_PREFIXES: List[str] = _split_csv(
        os.getenv(
            "PSX_PROXY_PREFIXES",
            "https://corsproxy.io/?,https://cors-anywhere.herokuapp.com/,https://api.allorigins.win/raw?url=",
        )
    )

    # Per-attempt bounds
    HTTP_TIMEOUT_S: float = float(os.getenv("HTTP_TIMEOUT_S", "10"))
    HTTP_CONNECT_TIMEOUT_S: float = float(os.getenv("HTTP_CONNECT_TIMEOUT_S", "5"))

    # Fixes the synthetic fallback series (useful for demos and snapshots)
    SYNTHETIC_SEED: Optional[int] = _optional_int(os.getenv("SYNTHETIC_SEED"))


settings = Settings()
