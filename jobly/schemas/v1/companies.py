"""Company schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from jobly.schemas.v1.common import PatchRequest

URL_PATTERN = r"^https?://\S+$"


class CompanyCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    handle: str = Field(min_length=1, max_length=25)
    name: str = Field(min_length=1)
    description: str
    numEmployees: int | None = Field(default=None, ge=0)
    logoUrl: str | None = Field(default=None, pattern=URL_PATTERN)


class CompanyUpdateRequest(PatchRequest):
    nullable_fields = frozenset({"numEmployees", "logoUrl"})

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    numEmployees: int | None = Field(default=None, ge=0)
    logoUrl: str | None = Field(default=None, pattern=URL_PATTERN)


class CompanySearchParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minEmployees: int | None = Field(default=None, ge=0)
    maxEmployees: int | None = Field(default=None, ge=0)
    name: str | None = Field(default=None, min_length=1)


class CompanyJob(BaseModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None

    @field_serializer("equity")
    def serialize_equity(self, equity: Decimal | None) -> str | None:
        return None if equity is None else str(equity)


class Company(BaseModel):
    handle: str
    name: str
    description: str
    numEmployees: int | None = None
    logoUrl: str | None = None


class CompanyDetail(Company):
    jobs: list[CompanyJob] = []


class CompanyResponse(BaseModel):
    company: Company


class CompanyDetailResponse(BaseModel):
    company: CompanyDetail


class CompanyListResponse(BaseModel):
    companies: list[Company]


class CompanyDeletedResponse(BaseModel):
    deleted: str
