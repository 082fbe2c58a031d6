"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events, and builds the
record store and notifier selected by the settings.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from patient_registration.adapters.notifier.console import ConsoleNotifier
from patient_registration.adapters.notifier.smtp import SmtpNotifier
from patient_registration.adapters.store import InMemoryRecordStore, PostgresRecordStore, run_migrations
from patient_registration.api.v1 import router as v1_router
from patient_registration.config.settings import Settings, get_settings
from patient_registration.domain.ports import Notifier

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Patient Registration API v1 - Register patients and confirm with a pincode",
    },
]


def build_notifier(settings: Settings) -> Notifier:
    """Create the notifier selected by settings.notifier_backend."""
    if settings.notifier_backend == "smtp":
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            timeout=settings.smtp_timeout_seconds,
        )
    return ConsoleNotifier()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the record store (and database connection pool) on startup
    - Runs migrations on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.store_backend == "postgres":
        logger.info("Connecting to database...")

        # Create connection pool with explicit sizing
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.store = PostgresRecordStore(pool)
    else:
        logger.warning("Using in-memory record store, registrations are not durable")
        app.state.store = InMemoryRecordStore()

    # Store collaborators in app state for dependency injection
    app.state.pool = pool
    app.state.notifier = build_notifier(settings)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="patient-registration",
    description="Patient Registration API - Two-phase registration confirmed by an emailed pincode",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
