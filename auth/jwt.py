"""
JWT creation and verification.

Tokens are HS256 JWTs carrying the user's ``id`` and ``username`` plus
``iat``/``exp``.  The secret and lifetime come from settings
(``JWT_SECRET``, ``JWT_EXPIRY_SECONDS``); nothing is stored server-side.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from api.errors import AuthNotConfiguredError, InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    id: int
    username: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issue and verify bearer tokens for one signing secret."""

    def __init__(self, secret: str, expiry_seconds: int = 3600, algorithm: str = "HS256") -> None:
        self._secret = secret
        self.expiry = timedelta(seconds=expiry_seconds)
        self.algorithm = algorithm

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def _require_secret(self) -> str:
        if not self._secret:
            raise AuthNotConfiguredError()
        return self._secret

    def issue(self, user_id: int, username: str, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``user_id``/``username`` expiring ``expiry`` after *now*."""
        secret = self._require_secret()
        issued = now or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "username": username,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.expiry).timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify *token* and return its claims.

        Raises ``InvalidTokenError`` on a bad signature, malformed token,
        expiry or missing claims.
        """
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError(error="Token has expired")
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(error=str(exc))

        if "id" not in payload or "username" not in payload:
            raise InvalidTokenError(error="Token is missing required claims")

        return TokenClaims(
            id=payload["id"],
            username=payload["username"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
