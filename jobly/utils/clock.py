"""Clock helpers; patch these in tests to freeze time."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_timestamp() -> int:
    """Current UTC time as whole seconds since the epoch (JWT `iat`/`exp`)."""
    return int(utc_now().timestamp())
