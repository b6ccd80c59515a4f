"""Token issuing and self-registration routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.auth import create_token
from jobly.core.database import get_session
from jobly.persistence.user_repository import UserRepository
from jobly.schemas.v1.users import RegisterRequest, TokenRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse)
async def issue_token(
    request: TokenRequest,
    session: AsyncSession = Depends(get_session),
):
    """Exchange username/password for a signed token."""
    user = await UserRepository(session).authenticate(request.username, request.password)
    return TokenResponse(token=create_token(user))


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_session),
):
    """Register a non-admin user and return a token for them."""
    user = await UserRepository(session).register({**request.model_dump(), "isAdmin": False})
    return TokenResponse(token=create_token(user))
