"""Directory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly under settings.api_prefix (no auto-discovery)
    - Global error handlers map DirectoryError → structured JSON responses
    - CORS configured from settings; X-Length exposed for the sitemap
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Codec and mailer are built during startup so a missing secret fails the
      boot, not the first login
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from directory_api import __version__
from directory_api.api.dependencies import get_mailer, get_token_codec
from directory_api.api.error_handlers import register_error_handlers
from directory_api.api.routes import (
    accounts, health, profiles, sitemap, subscriptions,
)
from directory_api.config import get_settings
from directory_api.infrastructure.database import init_db
from directory_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    credentials = (
        (settings.email_user, settings.email_password)
        if settings.email_user and settings.email_password else None
    )
    log_listener = setup_logging(
        settings.log_level,
        settings.log_format,
        log_file=settings.log_file,
        alert_to=settings.log_alert_to,
        alert_from=settings.log_alert_from,
        smtp_host=settings.email_host,
        smtp_port=settings.email_port,
        smtp_credentials=credentials,
    )
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    get_token_codec()
    get_mailer()
    logger.info("Directory API started")
    yield
    await manager.dispose()
    logger.info("Directory API shutting down")
    if log_listener is not None:
        log_listener.stop()


app = FastAPI(
    title="Directory API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(GZipMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Length"],
)

# Routes: explicit registration
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(accounts.router, prefix=settings.api_prefix)
app.include_router(subscriptions.router, prefix=settings.api_prefix)
app.include_router(profiles.router, prefix=settings.api_prefix)
app.include_router(sitemap.router, prefix=settings.api_prefix)

register_error_handlers(app)
