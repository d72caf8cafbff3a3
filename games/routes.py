"""
Games API routes — authenticated pass-through to RAWG.

Route prefix: /api
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import get_rawg_client
from api.errors import ServerError, UpstreamError
from auth.dependencies import get_current_user
from auth.jwt import TokenClaims
from games.client import RawgClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["games"])


def _passthrough(body: bytes) -> Response:
    return Response(content=body, media_type="application/json")


@router.get("/games")
async def list_games(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1),
    search: Optional[str] = Query(None),
    user: TokenClaims = Depends(get_current_user),
    rawg: RawgClient = Depends(get_rawg_client),
) -> Response:
    """Paginated / searchable game list, returned exactly as RAWG sent it."""
    try:
        body = await rawg.list_games(page=page, page_size=page_size, search=search)
    except UpstreamError as exc:
        logger.error(
            "Games API error for user %s: %s (page=%s page_size=%s search=%r)",
            user.username, exc.message, page, page_size, search,
        )
        raise ServerError("Failed to fetch games", error=exc.message, expose_error=exc.expose_error)
    return _passthrough(body)


@router.get("/games/{game_id}")
async def get_game(
    game_id: str,
    user: TokenClaims = Depends(get_current_user),
    rawg: RawgClient = Depends(get_rawg_client),
) -> Response:
    """Single game detail, returned exactly as RAWG sent it."""
    try:
        body = await rawg.get_game(game_id)
    except UpstreamError as exc:
        logger.error("Game detail API error for user %s: %s (game_id=%s)", user.username, exc.message, game_id)
        raise ServerError("Failed to fetch game details", error=exc.message, expose_error=exc.expose_error)
    return _passthrough(body)
