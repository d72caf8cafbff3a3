"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and a configurable work factor.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 10


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # Checked against when the username is unknown so both login failures cost the same bcrypt work.
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds)).decode()


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


def burn_password_check(password: str, rounds: int = DEFAULT_ROUNDS) -> None:
    """Spend the same bcrypt work as a real check at cost *rounds*; the result is discarded."""
    verify_password(password, _dummy_hash(rounds))
