"""
Game catalog API — application entry point.
"""

from __future__ import annotations

import logging
import platform
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_error_handlers
from api.middleware import register_middleware
from auth.jwt import TokenService
from auth.routes import router as auth_router
from config.settings import Settings, get_settings
from database.session import Database
from games.client import RawgClient
from games.routes import router as games_router

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("httpcore", "httpx", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def log_startup_checks(settings: Settings) -> None:
    """Report which required configuration is present, never the values."""
    logger.info("=== Server Startup Checks ===")
    logger.info("Python version: %s", platform.python_version())
    logger.info("Environment: %s", settings.environment)
    logger.info("RAWG_API_KEY set: %s", "Yes (hidden)" if settings.rawg_api_key else "No - REQUIRED!")
    logger.info("DB_HOST: %s", settings.db_host if not settings.database_url else "(from DATABASE_URL)")
    logger.info("DB_NAME: %s", settings.db_name if not settings.database_url else "(from DATABASE_URL)")
    logger.info("JWT_SECRET: %s", "Set (hidden)" if settings.jwt_secret else "Not set - REQUIRED!")
    logger.info("=============================")

    if not settings.rawg_api_key:
        logger.warning("RAWG_API_KEY is not set! Games API will not work.")
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set! Authentication will not work.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    log_startup_checks(settings)
    if settings.db_create_tables:
        await app.state.database.create_all()
    logger.info("Server ready on port %d; API endpoints under /api", settings.port)
    yield
    await app.state.database.dispose()
    logger.info("Database pool disposed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.debug)

    app = FastAPI(
        title="Game Catalog API",
        version="1.0.0",
        description="User auth and an authenticated proxy to the RAWG game catalog.",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    app.state.rawg = RawgClient(
        settings.rawg_api_key,
        base_url=settings.rawg_base_url,
        timeout=settings.upstream_timeout_seconds,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_error_handlers(app, production=settings.is_production)

    # Routes
    app.include_router(auth_router, prefix="/api")
    app.include_router(games_router, prefix="/api")

    @app.get("/api/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level="debug" if _settings.debug else "info",
    )
