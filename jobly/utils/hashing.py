"""Password hashing helpers (Argon2id via passlib)."""

from __future__ import annotations

from passlib.context import CryptContext

# Upper bound keeps hashing cost bounded for oversized payloads.
MAX_PASSWORD_LENGTH = 1024

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password cannot exceed {MAX_PASSWORD_LENGTH} characters")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash; oversized input never matches."""
    if len(plain_password) > MAX_PASSWORD_LENGTH:
        return False
    return pwd_context.verify(plain_password, hashed_password)
