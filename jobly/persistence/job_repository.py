"""Job repository - CRUD and search for job postings."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.errors import NotFoundError
from jobly.persistence.base import execute, fetch_all, fetch_one
from jobly.persistence.query_builder import (
    FilterOperator,
    FilterRule,
    FilterTable,
    build_filter_where,
    build_partial_update,
    placeholder,
    where_sql,
)

logger = structlog.get_logger(__name__)

JOB_FIELD_MAP = MappingProxyType({"companyHandle": "company_handle"})

JOB_FILTERS = FilterTable(
    rules={
        "minSalary": FilterRule("j.salary", FilterOperator.GTE),
        "hasEquity": FilterRule("j.equity", FilterOperator.POSITIVE),
        "title": FilterRule("j.title", FilterOperator.CONTAINS),
    },
)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


class JobRepository:
    """CRUD operations for jobs."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a job; raises NotFoundError if the company does not exist."""
        company = await fetch_one(
            self.session,
            "SELECT handle FROM companies WHERE handle = $1",
            [data["companyHandle"]],
        )
        if company is None:
            raise NotFoundError(f"No company: {data['companyHandle']}")

        job = await fetch_one(
            self.session,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING {JOB_COLUMNS}""",
            [data["title"], data.get("salary"), data.get("equity"), data["companyHandle"]],
        )
        logger.info("Job created", job_id=job["id"], company_handle=job["companyHandle"])
        return job

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """List jobs with their company name.

        Filters: minSalary (>=), hasEquity (only equity > 0 when true),
        title (case-insensitive partial match).
        """
        clause, params = build_filter_where(filters or {}, JOB_FILTERS)
        query = f"""SELECT j.id, j.title, j.salary, j.equity,
                          j.company_handle AS "companyHandle",
                          c.name AS "companyName"
                   FROM jobs j
                   LEFT JOIN companies AS c ON c.handle = j.company_handle{where_sql(clause)}
                   ORDER BY j.title, j.id"""
        return await fetch_all(self.session, query, params)

    async def get(self, job_id: int) -> dict[str, Any]:
        """Get a job with its company nested under `company`."""
        job = await fetch_one(
            self.session,
            f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1",
            [job_id],
        )
        if job is None:
            raise NotFoundError(f"No job: {job_id}")

        job["company"] = await fetch_one(
            self.session,
            """SELECT handle, name, description,
                      num_employees AS "numEmployees",
                      logo_url AS "logoUrl"
               FROM companies
               WHERE handle = $1""",
            [job.pop("companyHandle")],
        )
        return job

    async def update(self, job_id: int, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Partially update a job; only fields present in `changes` are written."""
        set_cols, values = build_partial_update(changes, JOB_FIELD_MAP)
        id_idx = placeholder(len(values) + 1)

        job = await fetch_one(
            self.session,
            f"""UPDATE jobs
               SET {set_cols}
               WHERE id = {id_idx}
               RETURNING {JOB_COLUMNS}""",
            [*values, job_id],
        )
        if job is None:
            raise NotFoundError(f"No job: {job_id}")

        logger.info("Job updated", job_id=job_id, fields=list(changes))
        return job

    async def remove(self, job_id: int) -> None:
        result = await execute(
            self.session,
            "DELETE FROM jobs WHERE id = $1 RETURNING id",
            [job_id],
        )
        if result.fetchone() is None:
            raise NotFoundError(f"No job: {job_id}")
        logger.info("Job removed", job_id=job_id)
