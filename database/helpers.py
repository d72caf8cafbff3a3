"""
Database helper functions for user lookup and creation.

"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User

logger = logging.getLogger(__name__)


async def username_exists(session: AsyncSession, username: str) -> bool:
    result = await session.execute(
        select(User.id).where(User.username == username).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.username == username)
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    full_name: str,
    dob: date,
    email: str,
    username: str,
    password_hash: str,
) -> User:
    """
    Insert and commit a new ``User`` row.

    Raises ``sqlalchemy.exc.IntegrityError`` when the username or email is
    already taken; the session is rolled back before the error propagates.
    """
    user = User(
        full_name=full_name,
        dob=dob,
        email=email,
        username=username,
        password_hash=password_hash,
    )
    session.add(user)
    try:
        await session.flush()
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    logger.info("Created user %s (id=%s)", username, user.id)
    return user
