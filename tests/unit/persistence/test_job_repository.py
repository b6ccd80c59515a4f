"""Unit tests for JobRepository."""

from decimal import Decimal

import pytest

from jobly.core.errors import NotFoundError, ValidationError
from jobly.persistence.job_repository import JobRepository

J1 = {
    "id": 7,
    "title": "Engineer",
    "salary": 100000,
    "equity": Decimal("0.05"),
    "companyHandle": "c1",
}


@pytest.mark.asyncio
async def test_create_returns_job(make_session):
    session, conn = make_session([{"handle": "c1"}], [J1])
    repo = JobRepository(session)

    job = await repo.create(
        {"title": "Engineer", "salary": 100000, "equity": Decimal("0.05"), "companyHandle": "c1"}
    )

    assert job == J1
    query, params = conn.exec_driver_sql.call_args.args
    assert "INSERT INTO jobs" in query
    assert params == ("Engineer", 100000, Decimal("0.05"), "c1")


@pytest.mark.asyncio
async def test_create_for_missing_company_raises_not_found(make_session):
    session, conn = make_session([])
    repo = JobRepository(session)

    with pytest.raises(NotFoundError, match="No company: nope"):
        await repo.create({"title": "T", "companyHandle": "nope"})

    assert conn.exec_driver_sql.await_count == 1


@pytest.mark.asyncio
async def test_find_all_without_filters(make_session):
    session, conn = make_session([{**J1, "companyName": "C1"}])
    repo = JobRepository(session)

    jobs = await repo.find_all()

    assert jobs[0]["companyName"] == "C1"
    query, params = conn.exec_driver_sql.call_args.args
    assert "WHERE" not in query
    assert params == ()


@pytest.mark.asyncio
async def test_find_all_with_every_filter(make_session):
    session, conn = make_session([])
    repo = JobRepository(session)

    await repo.find_all({"title": "eng", "hasEquity": True, "minSalary": 50000})

    query, params = conn.exec_driver_sql.call_args.args
    assert "WHERE j.salary >= $1 AND j.equity > 0 AND j.title ILIKE $2" in query
    assert params == (50000, "%eng%")


@pytest.mark.asyncio
async def test_find_all_has_equity_false_matches_all(make_session):
    session, conn = make_session([])
    repo = JobRepository(session)

    await repo.find_all({"hasEquity": False})

    query, params = conn.exec_driver_sql.call_args.args
    assert "WHERE" not in query
    assert params == ()


@pytest.mark.asyncio
async def test_get_nests_company(make_session):
    company = {"handle": "c1", "name": "C1", "description": "D", "numEmployees": 1, "logoUrl": None}
    session, conn = make_session([J1], [company])
    repo = JobRepository(session)

    job = await repo.get(7)

    assert "companyHandle" not in job
    assert job["company"] == company
    assert conn.exec_driver_sql.call_args_list[1].args[1] == ("c1",)


@pytest.mark.asyncio
async def test_get_missing_raises_not_found(make_session):
    session, _ = make_session([])
    repo = JobRepository(session)

    with pytest.raises(NotFoundError, match="No job: 0"):
        await repo.get(0)


@pytest.mark.asyncio
async def test_update_appends_id_after_change_values(make_session):
    session, conn = make_session([{**J1, "title": "New", "salary": None}])
    repo = JobRepository(session)

    job = await repo.update(7, {"title": "New", "salary": None})

    assert job["title"] == "New"
    query, params = conn.exec_driver_sql.call_args.args
    assert 'SET "title"=$1, "salary"=$2' in query
    assert "WHERE id = $3" in query
    assert params == ("New", None, 7)


@pytest.mark.asyncio
async def test_update_empty_changes_raises_validation(make_session):
    session, conn = make_session()
    repo = JobRepository(session)

    with pytest.raises(ValidationError):
        await repo.update(7, {})

    conn.exec_driver_sql.assert_not_called()


@pytest.mark.asyncio
async def test_update_missing_raises_not_found(make_session):
    session, _ = make_session([])
    repo = JobRepository(session)

    with pytest.raises(NotFoundError):
        await repo.update(0, {"title": "x"})


@pytest.mark.asyncio
async def test_remove_missing_raises_not_found(make_session):
    session, _ = make_session([])
    repo = JobRepository(session)

    with pytest.raises(NotFoundError):
        await repo.remove(0)
