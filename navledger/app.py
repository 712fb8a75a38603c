"""
navledger Web API - FastAPI entry point.

Usage:
    uvicorn navledger.app:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from navledger import __version__
from navledger.api.routers import analytics_router
from navledger.settings import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log effective configuration on startup."""
    settings = await Settings().all()
    logger.info(
        f"navledger {__version__} ready: target={settings['target_currency']}, "
        f"benchmark={settings['benchmark_symbol']}, fetch timeout={settings['fetch_timeout_seconds']}s"
    )
    yield
    logger.info("navledger shutting down")


app = FastAPI(
    title="navledger",
    description="Time-weighted portfolio performance and benchmark comparison",
    version=__version__,
    lifespan=lifespan,
)

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router, prefix="/api")


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}
