"""Root conftest for tests."""

import os
from collections.abc import Callable, Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

if os.getenv("APP_ENV", "").strip().lower() == "prod":
    raise RuntimeError("Refusing to run tests with APP_ENV=prod")

os.environ["APP_ENV"] = "test"
os.environ["SECURITY_SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("OTEL_LOG_RECORD_FORMAT", "console")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    dir_marker_map = {
        "unit": pytest.mark.unit,
        "smoke": pytest.mark.smoke,
        "integration": pytest.mark.integration,
    }
    for item in items:
        test_path = str(item.fspath)
        for dir_name, marker in dir_marker_map.items():
            if f"/{dir_name}/" in test_path or f"\\{dir_name}\\" in test_path:
                item.add_marker(marker)
                break


def _make_mock_row(values: dict[str, Any]) -> MagicMock:
    """A row whose `_mapping` is a real dict, as row_to_dict() expects."""
    row = MagicMock()
    row._mapping = dict(values)
    return row


def _make_mock_result(rows: Iterable[dict[str, Any]]) -> MagicMock:
    mock_rows = [_make_mock_row(r) for r in rows]
    result = MagicMock()
    result.fetchone.return_value = mock_rows[0] if mock_rows else None
    result.fetchall.return_value = mock_rows
    return result


@pytest.fixture
def make_session() -> Callable[..., tuple[AsyncMock, MagicMock]]:
    """Build a mock session whose successive queries return the given row lists.

    An exception in place of a row list is raised by that query instead.

    Returns `(session, conn)`; assert on `conn.exec_driver_sql.call_args_list`
    to inspect the (query, params) pairs a repository sent.
    """

    def _build(*results: Iterable[dict[str, Any]] | Exception) -> tuple[AsyncMock, MagicMock]:
        conn = MagicMock()
        conn.exec_driver_sql = AsyncMock(
            side_effect=[
                r if isinstance(r, Exception) else _make_mock_result(r) for r in results
            ]
        )
        session = AsyncMock()
        session.connection = AsyncMock(return_value=conn)
        return session, conn

    return _build
