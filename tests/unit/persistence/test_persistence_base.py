"""Unit tests for shared repository execution helpers."""

import uuid
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from jobly.core.errors import ConflictError
from jobly.persistence.base import execute, fetch_all, fetch_one, is_unique_violation, row_to_dict


def _integrity_error(**codes: str) -> IntegrityError:
    orig = MagicMock(spec=[*codes])
    for name, value in codes.items():
        setattr(orig, name, value)
    return IntegrityError("INSERT", (), orig)


def test_row_to_dict_stringifies_uuid_and_datetime():
    row_id = uuid.uuid4()
    at = datetime(2024, 1, 1, tzinfo=UTC)
    row = MagicMock()
    row._mapping = {"id": row_id, "at": at, "n": 1}

    assert row_to_dict(row) == {"id": str(row_id), "at": at.isoformat(), "n": 1}


@pytest.mark.parametrize(
    ("codes", "expected"),
    [
        ({"sqlstate": "23505"}, True),
        ({"pgcode": "23505"}, True),
        ({"sqlstate": "23503"}, False),
        ({}, False),
    ],
)
def test_is_unique_violation(codes, expected):
    assert is_unique_violation(_integrity_error(**codes)) is expected


@pytest.mark.asyncio
async def test_execute_sends_query_text_and_tuple_params(make_session):
    session, conn = make_session([])

    await execute(session, "SELECT $1, $2", [1, "a"])

    conn.exec_driver_sql.assert_awaited_once_with("SELECT $1, $2", (1, "a"))


@pytest.mark.asyncio
async def test_execute_maps_unique_violation_to_conflict(make_session):
    session, _ = make_session(_integrity_error(sqlstate="23505"))

    with pytest.raises(ConflictError, match="Duplicate thing"):
        await execute(session, "INSERT", (), conflict_message="Duplicate thing")


@pytest.mark.asyncio
async def test_execute_propagates_other_integrity_errors(make_session):
    session, _ = make_session(_integrity_error(sqlstate="23503"))

    with pytest.raises(IntegrityError):
        await execute(session, "INSERT")


@pytest.mark.asyncio
async def test_fetch_helpers(make_session):
    session, _ = make_session([{"a": 1}, {"a": 2}], [{"a": 1}], [])

    assert await fetch_all(session, "SELECT") == [{"a": 1}, {"a": 2}]
    assert await fetch_one(session, "SELECT") == {"a": 1}
    assert await fetch_one(session, "SELECT") is None
