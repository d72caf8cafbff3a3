"""
Auth API routes — check-user, register, login.

Route prefix: /api
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from api.dependencies import db_session, get_app_settings, get_token_service
from api.errors import (
    ApiError,
    AuthenticationFailedError,
    AuthNotConfiguredError,
    ConflictError,
    ServerError,
)
from auth.jwt import TokenService
from auth.password import burn_password_check, hash_password, verify_password
from config.settings import Settings
from database.helpers import create_user, get_user_by_username, username_exists

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_INVALID_CREDENTIALS = "Invalid username or password."
_BCRYPT_MAX_BYTES = 72


# ── Request / response schemas ─────────────────────────────────────────


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class CheckUserRequest(BaseModel):
    username: str = Field(..., min_length=1)

    strip_username = field_validator("username")(_strip_required)


class CheckUserResponse(BaseModel):
    exists: bool


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", min_length=1, max_length=255)
    dob: date
    email: str = Field(..., min_length=3, max_length=255)
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6)

    strip_strings = field_validator("full_name", "email", "username")(_strip_required)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"must be at most {_BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    # same normalization as registration, so the stored username matches
    strip_username = field_validator("username")(_strip_required)


class TokenResponse(BaseModel):
    message: str
    token: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/check-user", response_model=CheckUserResponse)
async def check_user(
    req: CheckUserRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Report whether a username is taken. Unauthenticated."""
    try:
        exists = await username_exists(session, req.username)
    except Exception as exc:
        logger.exception("Check user error")
        raise ServerError("Server error during user check.", error=str(exc))
    return {"exists": exists}


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Register a new user and log them straight in."""
    try:
        if not tokens.configured:
            raise AuthNotConfiguredError()
        password_hash = await run_in_threadpool(hash_password, req.password, settings.bcrypt_rounds)
        user = await create_user(
            session,
            full_name=req.full_name,
            dob=req.dob,
            email=req.email,
            username=req.username,
            password_hash=password_hash,
        )
        token = tokens.issue(user.id, user.username)
    except IntegrityError:
        logger.info("Registration conflict for username %s", req.username)
        raise ConflictError("Username or email already exists.")
    except ApiError:
        raise
    except Exception as exc:
        logger.exception("Registration error")
        raise ServerError("Registration failed due to a server error.", error=str(exc))

    return {"message": "User registered successfully!", "token": token}


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with username + password."""
    try:
        user = await get_user_by_username(session, req.username)
        if user is None:
            await run_in_threadpool(burn_password_check, req.password, settings.bcrypt_rounds)
            matched = False
        else:
            matched = await run_in_threadpool(verify_password, req.password, user.password_hash)

        if not matched:
            raise AuthenticationFailedError(_INVALID_CREDENTIALS)

        token = tokens.issue(user.id, user.username)
    except ApiError:
        raise
    except Exception as exc:
        logger.exception("Login error")
        raise ServerError("Server error during login.", error=str(exc))

    logger.info("Login: %s (id=%s)", user.username, user.id)
    return {"message": "Login successful!", "token": token}
