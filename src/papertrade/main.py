"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from papertrade.config.settings import Settings, get_settings
from papertrade.config.logging_config import setup_logging
from papertrade.core.exceptions import AppError
from papertrade.providers import create_provider
from papertrade.repositories.sqlalchemy import Database
from papertrade.services import MarketDataService
from papertrade.api.routers import (
    teachers_router,
    roster_router,
    trades_router,
    portfolio_router,
    leaderboards_router,
    market_router,
)

logger = logging.getLogger(__name__)


def build_market_data_service(settings: Settings) -> MarketDataService:
    """MarketDataService over the provider selected in settings."""
    provider = create_provider(
        settings.market_data_provider,
        fetch_timeout_seconds=settings.market_data_fetch_timeout_seconds,
    )
    return MarketDataService(
        provider=provider,
        cache_ttl_seconds=settings.market_data_cache_ttl_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    settings = get_settings()
    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database.from_settings(settings)
    app.state.database.open()
    if app.state.market_data_service is None:
        app.state.market_data_service = build_market_data_service(settings)
    logger.info("%s started (database %s)", settings.app_name, app.state.database.url)
    yield
    # Shutdown
    if owns_database:
        app.state.database.close()
        app.state.database = None


def create_app(
    database: Optional[Database] = None,
    market_data_service: Optional[MarketDataService] = None,
) -> FastAPI:
    """
    Build the application.

    A database or market data service passed in is used as is and not closed
    on shutdown; otherwise both are built from settings at startup.
    """
    settings = get_settings()
    application = FastAPI(
        title=settings.app_name,
        description="Classroom paper trading: rosters, simulated trades, badges and leaderboards",
        version=settings.app_version,
        lifespan=lifespan,
    )
    application.state.database = database
    application.state.market_data_service = market_data_service

    # Include routers
    application.include_router(teachers_router)
    application.include_router(roster_router)
    application.include_router(trades_router)
    application.include_router(portfolio_router)
    application.include_router(leaderboards_router)
    application.include_router(market_router)

    @application.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @application.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @application.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
