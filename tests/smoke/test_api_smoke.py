"""Smoke tests for API endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from jobly.core.auth import create_token

ADMIN_TOKEN = create_token({"username": "admin", "isAdmin": True})
U1_TOKEN = create_token({"username": "u1", "isAdmin": False})

C1 = {
    "handle": "c1",
    "name": "C1",
    "description": "Desc1",
    "numEmployees": 1,
    "logoUrl": None,
}


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _result(rows: list[dict]) -> MagicMock:
    mock_rows = []
    for values in rows:
        row = MagicMock()
        row._mapping = values
        mock_rows.append(row)
    result = MagicMock()
    result.fetchall.return_value = mock_rows
    result.fetchone.return_value = mock_rows[0] if mock_rows else None
    return result


@pytest.fixture
def conn():
    """Driver connection; every query returns no rows unless a test says otherwise."""
    mock_conn = MagicMock()
    mock_conn.exec_driver_sql = AsyncMock(return_value=_result([]))
    return mock_conn


@pytest.fixture
def app(conn):
    """Create app with mocked database session."""
    from jobly.core.database import get_session
    from jobly.main import create_app

    app = create_app()

    mock_session = AsyncMock()
    mock_session.connection = AsyncMock(return_value=conn)

    async def mock_get_session():
        yield mock_session

    app.dependency_overrides[get_session] = mock_get_session
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


# --- Health ---


def test_health_endpoint(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_ready_endpoint_reports_degraded_database(client):
    engine = MagicMock()
    engine.connect.side_effect = OSError("connection refused")
    with patch("jobly.api.routes.health.get_engine", return_value=engine):
        response = client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "degraded", "database": False}


def test_request_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


# --- Public reads and filters ---


def test_list_companies(client, conn):
    conn.exec_driver_sql.return_value = _result([C1])

    response = client.get("/api/v1/companies")

    assert response.status_code == 200
    assert response.json() == {"companies": [C1]}


def test_list_companies_passes_filters_as_parameters(client, conn):
    response = client.get("/api/v1/companies", params={"name": "net", "minEmployees": 10})

    assert response.status_code == 200
    query, params = conn.exec_driver_sql.call_args.args
    assert "num_employees >= $1 AND name ILIKE $2" in query
    assert params == (10, "%net%")


def test_list_companies_inverted_range_is_bad_request(client, conn):
    response = client.get("/api/v1/companies", params={"minEmployees": 5, "maxEmployees": 1})

    assert response.status_code == 400
    assert response.json()["errors"] == {"minEmployees": 5, "maxEmployees": 1}
    conn.exec_driver_sql.assert_not_called()


def test_list_companies_rejects_unknown_filter(client):
    response = client.get("/api/v1/companies", params={"color": "red"})
    assert response.status_code == 400


def test_list_jobs_has_equity_flag(client, conn):
    response = client.get("/api/v1/jobs", params={"hasEquity": "true"})

    assert response.status_code == 200
    assert "j.equity > 0" in conn.exec_driver_sql.call_args.args[0]


def test_get_missing_company_is_not_found(client):
    response = client.get("/api/v1/companies/nope")

    assert response.status_code == 404
    assert response.json() == {"detail": "No company: nope"}


def test_invalid_token_on_public_route_is_anonymous(client):
    response = client.get("/api/v1/companies", headers=_auth("garbage"))
    assert response.status_code == 200


# --- Gates ---


def test_create_company_without_token_is_unauthorized(client, conn):
    response = client.post("/api/v1/companies", json=C1)

    assert response.status_code == 401
    conn.exec_driver_sql.assert_not_called()


def test_create_company_with_invalid_token_is_unauthorized(client):
    response = client.post("/api/v1/companies", json=C1, headers=_auth("garbage"))
    assert response.status_code == 401


def test_create_company_as_non_admin_is_forbidden(client, conn):
    response = client.post("/api/v1/companies", json=C1, headers=_auth(U1_TOKEN))

    assert response.status_code == 403
    conn.exec_driver_sql.assert_not_called()


def test_create_company_as_admin(client, conn):
    conn.exec_driver_sql.side_effect = [_result([]), _result([C1])]

    response = client.post("/api/v1/companies", json=C1, headers=_auth(ADMIN_TOKEN))

    assert response.status_code == 201
    assert response.json() == {"company": C1}


def test_get_other_user_is_forbidden(client):
    response = client.get("/api/v1/users/u2", headers=_auth(U1_TOKEN))
    assert response.status_code == 403


def test_get_self(client, conn):
    user = {
        "username": "u1",
        "firstName": "F",
        "lastName": "L",
        "email": "u1@e.com",
        "isAdmin": False,
    }
    conn.exec_driver_sql.side_effect = [_result([user]), _result([{"job_id": 4}])]

    response = client.get("/api/v1/users/u1", headers=_auth(U1_TOKEN))

    assert response.status_code == 200
    assert response.json() == {"user": {**user, "jobs": [4]}}


def test_list_users_requires_admin(client):
    assert client.get("/api/v1/users", headers=_auth(U1_TOKEN)).status_code == 403
    assert client.get("/api/v1/users", headers=_auth(ADMIN_TOKEN)).status_code == 200


# --- Partial updates ---


def test_patch_with_empty_body_is_bad_request(client, conn):
    response = client.patch("/api/v1/companies/c1", json={}, headers=_auth(ADMIN_TOKEN))

    assert response.status_code == 400
    assert response.json()["detail"] == "No data"
    conn.exec_driver_sql.assert_not_called()


def test_patch_null_for_required_column_is_rejected(client):
    response = client.patch(
        "/api/v1/companies/c1", json={"name": None}, headers=_auth(ADMIN_TOKEN)
    )
    assert response.status_code == 400
    assert any("name cannot be null" in e for e in response.json()["errors"])


def test_patch_company(client, conn):
    conn.exec_driver_sql.return_value = _result([{**C1, "name": "New"}])

    response = client.patch(
        "/api/v1/companies/c1", json={"name": "New"}, headers=_auth(ADMIN_TOKEN)
    )

    assert response.status_code == 200
    assert response.json()["company"]["name"] == "New"
    query, params = conn.exec_driver_sql.call_args.args
    assert 'SET "name"=$1' in query
    assert params == ("New", "c1")
