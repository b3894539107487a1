"""
FastAPI application for the portfolio engine.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_engine.app.cycle import PortfolioCycle
from portfolio_engine.core.exceptions.portfolio import (
    ConfigurationError,
    NoPriceAvailableError,
    OversellError,
    PositionNotFoundError,
    StorageError,
    ValidationError,
)
from portfolio_engine.infrastructure.storage import PortfolioDatabase, SettingsStore

from .routers import portfolio

# Local dashboards during development
CORS_ORIGINS = ["http://localhost:3000", "http://localhost:8080"]

# Most specific first: OversellError is also a ValidationError
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (OversellError, 409),
    (NoPriceAvailableError, 409),
    (PositionNotFoundError, 404),
    (ValidationError, 422),
    (ConfigurationError, 500),
    (StorageError, 503),
]


def _status_for(exc: Exception) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


async def _portfolio_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def create_app(
    cycle: PortfolioCycle | None = None,
    settings_store: SettingsStore | None = None,
) -> FastAPI:
    """Build the API.

    With an explicit ``cycle`` the caller owns its storage handle. Otherwise
    the app opens the database named in the settings on startup and
    closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if cycle is not None:
            app.state.cycle = cycle
            yield
            return
        store = settings_store or SettingsStore()
        settings = store.load()
        with PortfolioDatabase(settings.database_url) as db:
            app.state.cycle = PortfolioCycle(db, store.load)
            yield

    app = FastAPI(
        title="Portfolio Engine API",
        version="1.0.0",
        description="Holdings, cash, valuation and snapshots from a trade log",
        lifespan=lifespan,
    )
    if cycle is not None:
        app.state.cycle = cycle

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

    for error_type, _ in ERROR_STATUS:
        app.add_exception_handler(error_type, _portfolio_error_handler)

    app.include_router(portfolio.router, prefix="/api", tags=["portfolio"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Portfolio Engine API", "version": "1.0.0", "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
