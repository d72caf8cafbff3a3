"""
FastAPI dependencies (shared across routes).

Process-scoped resources are built once by ``main.create_app`` and kept
on ``app.state``; these functions hand them to route handlers.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenService
from config.settings import Settings
from database.session import Database
from games.client import RawgClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_rawg_client(request: Request) -> RawgClient:
    return request.app.state.rawg


async def db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session from the app's pool for route handlers."""
    async with get_database(request).session() as session:
        yield session
