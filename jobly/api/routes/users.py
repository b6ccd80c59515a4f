"""User routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.auth import create_token
from jobly.core.database import get_session
from jobly.core.dependencies import RequireAdmin, RequireAdminOrSelf
from jobly.persistence.user_repository import UserRepository
from jobly.schemas.v1.users import (
    ApplicationResponse,
    UserCreatedResponse,
    UserCreateRequest,
    UserDeletedResponse,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserCreatedResponse, status_code=201)
async def create_user(
    request: UserCreateRequest,
    user: RequireAdmin,
    session: AsyncSession = Depends(get_session),
):
    """Admin-only: create a user (possibly another admin) and return their token."""
    created = await UserRepository(session).register(request.model_dump())
    return {"user": created, "token": create_token(created)}


@router.get("", response_model=UserListResponse)
async def list_users(user: RequireAdmin, session: AsyncSession = Depends(get_session)):
    users = await UserRepository(session).find_all()
    return {"users": users}


@router.get("/{username}", response_model=UserResponse)
async def get_user(
    username: str,
    user: RequireAdminOrSelf,
    session: AsyncSession = Depends(get_session),
):
    found = await UserRepository(session).get(username)
    return {"user": found}


@router.patch("/{username}", response_model=UserResponse)
async def update_user(
    username: str,
    request: UserUpdateRequest,
    user: RequireAdminOrSelf,
    session: AsyncSession = Depends(get_session),
):
    updated = await UserRepository(session).update(username, request.changes())
    return {"user": updated}


@router.delete("/{username}", response_model=UserDeletedResponse)
async def delete_user(
    username: str,
    user: RequireAdminOrSelf,
    session: AsyncSession = Depends(get_session),
):
    await UserRepository(session).remove(username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", response_model=ApplicationResponse)
async def apply_to_job(
    username: str,
    job_id: int,
    user: RequireAdminOrSelf,
    session: AsyncSession = Depends(get_session),
):
    await UserRepository(session).apply_to_job(username, job_id)
    return {"applied": job_id}
