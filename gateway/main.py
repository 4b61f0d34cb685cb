"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gateway.api.gateway import router as gateway_router
from gateway.core.config import get_settings
from gateway.core.database import init_db

_settings = get_settings()
logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist (use Alembic in production)
    await init_db()
    yield


app = FastAPI(
    title="Portfolio API Gateway",
    version="0.1.0",
    description="Read-only, token-scoped access to portfolio projects",
    lifespan=lifespan,
)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}


# ── Gateway (catch-all, registered last) ─────────────────────
app.include_router(gateway_router)
