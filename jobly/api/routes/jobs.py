"""Job routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.database import get_session
from jobly.core.dependencies import RequireAdmin
from jobly.persistence.job_repository import JobRepository
from jobly.schemas.v1.jobs import (
    JobCreateRequest,
    JobDeletedResponse,
    JobDetailResponse,
    JobListResponse,
    JobResponse,
    JobSearchParams,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    request: JobCreateRequest,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    job = await JobRepository(session).create(request.model_dump())
    return {"job": job}


@router.get("", response_model=JobListResponse)
async def list_jobs(
    params: Annotated[JobSearchParams, Query()],
    session: AsyncSession = Depends(get_session),
):
    """List jobs, filtered by minSalary, hasEquity and title."""
    jobs = await JobRepository(session).find_all(params.model_dump(exclude_none=True))
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(job_id: int, session: AsyncSession = Depends(get_session)):
    job = await JobRepository(session).get(job_id)
    return {"job": job}


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    request: JobUpdateRequest,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    job = await JobRepository(session).update(job_id, request.changes())
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeletedResponse)
async def delete_job(
    job_id: int,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    await JobRepository(session).remove(job_id)
    return {"deleted": job_id}
