"""Unrecorded API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UnrecordedError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unrecorded.api.error_handlers import register_error_handlers
from unrecorded.api.routes import (
    friendships, group_members, groups, health, messages, notifications,
    reactions, sessions, users,
)
from unrecorded.config import get_settings
from unrecorded.infrastructure import database
from unrecorded.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout_seconds,
    )
    logger.info("Unrecorded API started")
    yield
    if database.db_manager is not None:
        await database.db_manager.engine.dispose()
    logger.info("Unrecorded API shutting down")


app = FastAPI(title="Unrecorded API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(users.router)
app.include_router(sessions.router)
app.include_router(groups.router)
app.include_router(group_members.router)
app.include_router(messages.router)
app.include_router(friendships.router)
app.include_router(reactions.router)
app.include_router(notifications.router)

register_error_handlers(app)
