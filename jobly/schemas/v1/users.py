"""User and authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field

from jobly.schemas.v1.common import PatchRequest

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class TokenRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1, max_length=30)
    password: str = Field(min_length=5, max_length=20)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1, max_length=30)
    password: str = Field(min_length=5, max_length=20)
    firstName: str = Field(min_length=1, max_length=30)
    lastName: str = Field(min_length=1, max_length=30)
    email: str = Field(min_length=6, max_length=60, pattern=EMAIL_PATTERN)


class UserCreateRequest(RegisterRequest):
    """Admin-only user creation; may create other admins."""

    isAdmin: bool = False


class UserUpdateRequest(PatchRequest):
    password: str | None = Field(default=None, min_length=5, max_length=20)
    firstName: str | None = Field(default=None, min_length=1, max_length=30)
    lastName: str | None = Field(default=None, min_length=1, max_length=30)
    email: str | None = Field(default=None, min_length=6, max_length=60, pattern=EMAIL_PATTERN)


class User(BaseModel):
    username: str
    firstName: str
    lastName: str
    email: str
    isAdmin: bool


class UserDetail(User):
    jobs: list[int] = []


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    user: UserDetail


class UserCreatedResponse(BaseModel):
    user: User
    token: str


class UserListResponse(BaseModel):
    users: list[UserDetail]


class UserDeletedResponse(BaseModel):
    deleted: str


class ApplicationResponse(BaseModel):
    applied: int
