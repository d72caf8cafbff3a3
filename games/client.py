"""
RawgClient — thin async client for the RAWG game-data API.

Responses are handed back as raw bytes so routes can pass them through
untouched.  The API key is sent as the ``key`` query parameter and is
redacted from every URL that gets logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from api.errors import NotFoundError, ServerError, UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

_RAWG_BASE_URL = "https://api.rawg.io/api"
_ERROR_EXCERPT_CHARS = 200


class RawgClient:
    """Async RAWG client. Opens one ``httpx.AsyncClient`` per upstream call."""

    def __init__(
        self,
        api_key: str,
        base_url: str = _RAWG_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def redact(self, text: str) -> str:
        """Replace the API key (raw, percent-encoded or as httpx encodes it) with ``***``."""
        if not self._api_key:
            return text
        httpx_form = str(httpx.QueryParams({"key": self._api_key})).split("=", 1)[1]
        for form in {self._api_key, quote(self._api_key, safe=""), httpx_form}:
            text = text.replace(form, "***")
        return text

    # ── Public API ──────────────────────────────────────────────────────

    async def list_games(self, page: int = 1, page_size: int = 20, search: Optional[str] = None) -> bytes:
        """Fetch one page of the game list, optionally filtered by *search*."""
        params: Dict[str, Any] = {"page": page, "page_size": page_size}
        if search:
            params["search"] = search
        return await self._get("/games", params)

    async def get_game(self, game_id: str) -> bytes:
        """Fetch a single game's detail record. Raises ``NotFoundError`` on upstream 404."""
        return await self._get(f"/games/{quote(str(game_id), safe='')}", {}, detail=True)

    # ── Internals ───────────────────────────────────────────────────────

    async def _get(self, path: str, params: Dict[str, Any], detail: bool = False) -> bytes:
        if not self._api_key:
            raise ServerError("API key not configured")

        query = {"key": self._api_key, **params}
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        ) as client:
            request = client.build_request("GET", f"{self.base_url}{path}", params=query)
            safe_url = self.redact(str(request.url))
            logger.info("Fetching from RAWG API: %s", safe_url)
            try:
                # httpx timeouts are per phase; wait_for bounds the whole exchange
                response = await asyncio.wait_for(client.send(request), timeout=self.timeout)
            except (httpx.TimeoutException, asyncio.TimeoutError):
                logger.error("RAWG API timed out after %gs: %s", self.timeout, safe_url)
                raise UpstreamTimeoutError(
                    "Request timeout - RAWG API took too long to respond",
                    error=f"The request to RAWG API timed out after {self.timeout:g} seconds",
                    expose_error=True,
                )
            except httpx.HTTPError as exc:
                logger.error("RAWG API request failed: %s (%s)", safe_url, self.redact(str(exc)))
                raise UpstreamError(f"RAWG API request failed: {self.redact(str(exc))}")

        if response.is_success:
            return response.content

        if detail and response.status_code == 404:
            raise NotFoundError("Game not found")

        body = response.text
        logger.error("RAWG API error (%d): %s", response.status_code, self.redact(body)[:_ERROR_EXCERPT_CHARS])
        logger.error("Request URL: %s", safe_url)
        raise self._map_error(response)

    def _map_error(self, response: httpx.Response) -> UpstreamError:
        status_code = response.status_code
        body = response.text
        if status_code == 401:
            return UpstreamError("RAWG API key is invalid or expired", status_code)
        if status_code == 429:
            return UpstreamError(
                "RAWG API rate limit exceeded. Please try again later.",
                status_code,
                expose_error=True,
            )
        if status_code == 404:
            return UpstreamError("RAWG API endpoint not found", status_code)
        if body:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict) and payload.get("detail"):
                return UpstreamError(f"RAWG API error: {self.redact(str(payload['detail']))}", status_code)
            return UpstreamError(
                f"RAWG API error: {self.redact(body)[:_ERROR_EXCERPT_CHARS]}", status_code
            )
        return UpstreamError(f"RAWG API error: {status_code}", status_code)
