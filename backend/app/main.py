"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.histories import router as histories_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.schedules import router as schedules_router
from backend.app.db.engine import get_async_engine, init_models

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables on startup."""
    await init_models(get_async_engine())
    logger.info("Database tables ready")
    yield


app = FastAPI(title="UIPathFinder API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(schedules_router)
app.include_router(histories_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "UIPathFinder API", "version": "0.1.0"}
