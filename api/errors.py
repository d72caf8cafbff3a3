"""
Error taxonomy and the handlers that render it.

Every failure leaves the API as ``{"message": ..., "error": ...}``; the
``error`` detail is dropped in production unless the exception marks it
as safe to expose.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base for every error the API turns into a JSON response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        expose_error: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error = error
        self.expose_error = expose_error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self, include_error: bool) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error and (include_error or self.expose_error):
            body["error"] = self.error
        return body


class ValidationFailedError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationFailedError(ApiError):
    """Missing token or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidTokenError(ApiError):
    """A token was presented but did not verify."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Invalid or expired token", error: Optional[str] = None):
        super().__init__(message, error=error)


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT


class ServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthNotConfiguredError(ServerError):
    def __init__(self, message: str = "Authentication not configured"):
        super().__init__(message)


class UpstreamError(ServerError):
    """The game-data provider answered with a failure."""

    def __init__(self, message: str, upstream_status: Optional[int] = None, expose_error: bool = False):
        super().__init__(message, expose_error=expose_error)
        self.upstream_status = upstream_status


class UpstreamTimeoutError(ApiError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT


def _first_validation_problem(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def register_error_handlers(app: FastAPI, production: bool) -> None:
    """Attach the JSON error renderers to *app*."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(include_error=not production),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        problem = _first_validation_problem(exc)
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, problem)
        body: Dict[str, Any] = {"message": "Invalid request."}
        if not production:
            body["error"] = problem
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body: Dict[str, Any] = {"message": "Internal server error."}
        if not production:
            body["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
