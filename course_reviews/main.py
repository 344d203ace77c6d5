"""
Course Reviews — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from course_reviews import __version__
from course_reviews.config import settings
from course_reviews.database import check_db_connectivity, create_all, engine
from course_reviews.routers import (
    catalogue,
    health,
    notifications,
    reviews,
    subscriptions,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent, IF NOT EXISTS).
    2. Verify DB connectivity.
    """
    logger.info("Starting Course Reviews (env=%s)", settings.app_env)

    await create_all()
    logger.info("Database tables created/verified.")

    ok = await check_db_connectivity()
    if not ok:
        logger.error("Database connectivity check FAILED at startup.")
    else:
        logger.info("Database connectivity verified.")

    yield

    logger.info("Shutting down Course Reviews.")
    await engine.dispose()


app = FastAPI(
    title="Course Reviews",
    description="Course and professor reviews with subscriptions and notifications.",
    version=__version__,
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(catalogue.router)
app.include_router(reviews.router)
app.include_router(subscriptions.router)
app.include_router(notifications.router)


# ── Global exception handler ─────────────────────────────────────────────────

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )
