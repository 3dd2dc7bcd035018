"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from advisor_engine import __version__
from advisor_engine.api.routes import api_router
from advisor_engine.config import EngineSettings, get_settings
from advisor_engine.core.errors import register_error_handlers
from advisor_engine.core.logging import setup_logging
from advisor_engine.core.telemetry import setup_telemetry
from advisor_engine.db.session import Database
from advisor_engine.schemas import HealthResponse
from advisor_engine.services.engine import FinancialEngine
from advisor_engine.services.market import (
    MarketDataProvider,
    RandomMarketDataProvider,
    StaticMarketDataProvider,
)
from advisor_engine.services.records import SqlRecordSource

logger = logging.getLogger(__name__)


def build_market_provider(settings: EngineSettings) -> MarketDataProvider:
    if settings.market_provider == "static":
        return StaticMarketDataProvider()
    return RandomMarketDataProvider(seed=settings.market_seed)


def create_app(
    engine: FinancialEngine | None = None,
    *,
    settings: EngineSettings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Build the service.

    Passing ``engine`` skips the database entirely, which is how tests wire an
    in-memory record source. Otherwise the engine reads from ``database`` (or
    one built from ``settings.database_url``).
    """

    settings = settings or get_settings()
    setup_logging(settings.log_level)

    if engine is None:
        database = database or Database(settings.database_url)
        engine = FinancialEngine(
            SqlRecordSource(database),
            build_market_provider(settings),
            settings=settings,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Engine configuration: %s", settings.dict_for_logging())
        if database is not None:
            await database.create_all()
        yield
        if database is not None:
            await database.dispose()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.engine = engine
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-request-id"],
    )
    register_error_handlers(app)
    setup_telemetry(app, settings, engine=database.engine if database is not None else None)

    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Return service readiness metadata."""

        return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    """Factory for ``uvicorn advisor_engine.main:get_app --factory``."""

    return create_app()


__all__ = ["build_market_provider", "create_app", "get_app"]
