"""Shared execution helpers for repositories.

Repositories build `$n`-style query text with positional parameters and run it
through the session's connection with `exec_driver_sql`, so the text reaches
asyncpg unchanged.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.errors import ConflictError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a SQLAlchemy row to a dict with JSON-safe UUID and timestamp values."""
    result = {}
    for k, v in dict(row._mapping).items():
        if isinstance(v, uuid.UUID):
            result[k] = str(v)
        elif isinstance(v, datetime):
            result[k] = v.isoformat()
        else:
            result[k] = v
    return result


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == UNIQUE_VIOLATION


async def execute(
    session: AsyncSession,
    query: str,
    params: Sequence[Any] = (),
    *,
    conflict_message: str = "Duplicate record",
) -> Any:
    """Execute positional-parameter SQL and return the driver result.

    A unique-constraint violation reported by the store is raised as
    `ConflictError`; every other store failure propagates unchanged.
    """
    conn = await session.connection()
    try:
        return await conn.exec_driver_sql(query, tuple(params))
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.warning("Unique constraint violated", extra={"error": str(e.orig)})
            raise ConflictError(conflict_message) from e
        raise


async def fetch_all(
    session: AsyncSession,
    query: str,
    params: Sequence[Any] = (),
    **kwargs: Any,
) -> list[dict[str, Any]]:
    result = await execute(session, query, params, **kwargs)
    return [row_to_dict(row) for row in result.fetchall()]


async def fetch_one(
    session: AsyncSession,
    query: str,
    params: Sequence[Any] = (),
    **kwargs: Any,
) -> dict[str, Any] | None:
    result = await execute(session, query, params, **kwargs)
    row = result.fetchone()
    if row is None:
        return None
    return row_to_dict(row)
