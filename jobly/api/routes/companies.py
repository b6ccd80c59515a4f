"""Company routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.database import get_session
from jobly.core.dependencies import RequireAdmin
from jobly.persistence.company_repository import CompanyRepository
from jobly.schemas.v1.companies import (
    CompanyCreateRequest,
    CompanyDeletedResponse,
    CompanyDetailResponse,
    CompanyListResponse,
    CompanyResponse,
    CompanySearchParams,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    request: CompanyCreateRequest,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    company = await CompanyRepository(session).create(request.model_dump())
    return {"company": company}


@router.get("", response_model=CompanyListResponse)
async def list_companies(
    params: Annotated[CompanySearchParams, Query()],
    session: AsyncSession = Depends(get_session),
):
    """List companies, filtered by minEmployees, maxEmployees and name."""
    companies = await CompanyRepository(session).find_all(params.model_dump(exclude_none=True))
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailResponse)
async def get_company(handle: str, session: AsyncSession = Depends(get_session)):
    company = await CompanyRepository(session).get(handle)
    return {"company": company}


@router.patch("/{handle}", response_model=CompanyResponse)
async def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    """Partially update a company; only fields sent in the body change."""
    company = await CompanyRepository(session).update(handle, request.changes())
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeletedResponse)
async def delete_company(
    handle: str,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    await CompanyRepository(session).remove(handle)
    return {"deleted": handle}
