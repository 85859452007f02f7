"""FastAPI application entry point.

Start with:
    uvicorn app.main:app --reload

Routes:
- POST /callback — Twitch EventSub deliveries
- GET  /health   — liveness probe
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import get_settings

assert sys.version_info >= (3, 12), "eventsub-bridge requires Python 3.12+"

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Lifespan: startup / shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: configure logging and announce start/stop."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if not settings.discord_webhook_url:
        logger.warning("DISCORD_WEBHOOK_URL is empty — notifications will fail with 500")
    logger.info("eventsub-bridge starting up")

    yield

    logger.info("eventsub-bridge shutting down")


# ---------------------------------------------------------------------------
#  FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="eventsub-bridge",
    description="Relays Twitch EventSub go-live and revocation events to Discord",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# ---------------------------------------------------------------------------
#  Router Registration
# ---------------------------------------------------------------------------

from app.api.callback import router as callback_router  # noqa: E402
from app.api.health import router as health_router  # noqa: E402

app.include_router(callback_router)
app.include_router(health_router)
