"""
Password hashing for user accounts.

Stored passwords are bcrypt hashes produced by passlib; the plain text is
never persisted or returned.
"""
from __future__ import annotations

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """False when there is no stored hash to compare against."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
