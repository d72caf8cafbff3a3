"""
FastAPI dependencies for authentication.

``get_current_user`` gates protected routes:

* no ``Authorization: Bearer <token>`` header   -> 401
* a token that fails verification               -> 403
* a valid token                                 -> claims returned and
                                                   kept on ``request.state.user``
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from api.dependencies import get_token_service
from api.errors import AuthenticationFailedError
from auth.jwt import TokenClaims, TokenService


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from a ``Bearer <token>`` header value, else ``None``."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Verify the Bearer token and return its claims."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationFailedError("Access token required")

    claims = tokens.verify(token)
    request.state.user = claims
    return claims
