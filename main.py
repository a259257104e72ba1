import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.entry.http.market_router import router as market_router
from adapters.external.psx.psx_http_client import PSXHttpClient
from config.settings import settings
from core.services.synthetic_data_service import SyntheticDataService


def _setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    _setup_logging()
    logging.getLogger(__name__).info("Starting psx-market-data (lifespan startup)...")

    app.state.market_source = PSXHttpClient(
        proxy_prefixes=settings.PSX_PROXY_PREFIXES,
        timeout_s=settings.HTTP_TIMEOUT_S,
        connect_timeout_s=settings.HTTP_CONNECT_TIMEOUT_S,
    )
    app.state.synthetic = SyntheticDataService(seed=settings.SYNTHETIC_SEED)

    try:
        yield
    finally:
        logging.getLogger(__name__).info("Shutting down psx-market-data (lifespan shutdown)...")
        await app.state.market_source.aclose()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.include_router(market_router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
