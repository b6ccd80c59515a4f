"""Company repository - CRUD and search for companies."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.errors import ConflictError, NotFoundError
from jobly.persistence.base import execute, fetch_all, fetch_one
from jobly.persistence.query_builder import (
    FilterOperator,
    FilterRule,
    FilterTable,
    RangeBounds,
    build_filter_where,
    build_partial_update,
    placeholder,
    where_sql,
)

logger = structlog.get_logger(__name__)

COMPANY_FIELD_MAP = MappingProxyType(
    {
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
)

COMPANY_FILTERS = FilterTable(
    rules={
        "minEmployees": FilterRule("num_employees", FilterOperator.GTE),
        "maxEmployees": FilterRule("num_employees", FilterOperator.LTE),
        "name": FilterRule("name", FilterOperator.CONTAINS),
    },
    ranges=(RangeBounds("minEmployees", "maxEmployees"),),
)

COMPANY_COLUMNS = (
    'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'
)


class CompanyRepository:
    """CRUD operations for companies."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a company; raises ConflictError if the handle is taken."""
        handle = data["handle"]
        duplicate = await fetch_one(
            self.session,
            "SELECT handle FROM companies WHERE handle = $1",
            [handle],
        )
        if duplicate is not None:
            logger.warning("Duplicate company", handle=handle)
            raise ConflictError(f"Duplicate company: {handle}")

        company = await fetch_one(
            self.session,
            f"""INSERT INTO companies
                   (handle, name, description, num_employees, logo_url)
               VALUES ($1, $2, $3, $4, $5)
               RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
            conflict_message=f"Duplicate company: {handle}",
        )
        logger.info("Company created", handle=handle)
        return company

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """List companies, optionally filtered by employee range and name fragment.

        Filters: minEmployees, maxEmployees, name (case-insensitive partial match).
        """
        clause, params = build_filter_where(filters or {}, COMPANY_FILTERS)
        query = f"SELECT {COMPANY_COLUMNS} FROM companies{where_sql(clause)} ORDER BY name"
        return await fetch_all(self.session, query, params)

    async def get(self, handle: str) -> dict[str, Any]:
        """Get a company with its jobs."""
        company = await fetch_one(
            self.session,
            f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
            [handle],
        )
        if company is None:
            raise NotFoundError(f"No company: {handle}")

        company["jobs"] = await fetch_all(
            self.session,
            """SELECT id, title, salary, equity
               FROM jobs
               WHERE company_handle = $1
               ORDER BY id""",
            [handle],
        )
        return company

    async def update(self, handle: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Partially update a company; only fields present in `changes` are written."""
        set_cols, values = build_partial_update(changes, COMPANY_FIELD_MAP)
        handle_idx = placeholder(len(values) + 1)

        company = await fetch_one(
            self.session,
            f"""UPDATE companies
               SET {set_cols}
               WHERE handle = {handle_idx}
               RETURNING {COMPANY_COLUMNS}""",
            [*values, handle],
        )
        if company is None:
            raise NotFoundError(f"No company: {handle}")

        logger.info("Company updated", handle=handle, fields=list(changes))
        return company

    async def remove(self, handle: str) -> None:
        result = await execute(
            self.session,
            "DELETE FROM companies WHERE handle = $1 RETURNING handle",
            [handle],
        )
        if result.fetchone() is None:
            raise NotFoundError(f"No company: {handle}")
        logger.info("Company removed", handle=handle)
