"""Job schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from jobly.schemas.v1.common import PatchRequest
from jobly.schemas.v1.companies import Company


class JobCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    companyHandle: str = Field(min_length=1, max_length=25)


class JobUpdateRequest(PatchRequest):
    nullable_fields = frozenset({"salary", "equity"})

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)


class JobSearchParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minSalary: int | None = Field(default=None, ge=0)
    hasEquity: bool | None = None
    title: str | None = Field(default=None, min_length=1)


class Job(BaseModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    companyHandle: str

    @field_serializer("equity")
    def serialize_equity(self, equity: Decimal | None) -> str | None:
        return None if equity is None else str(equity)


class JobListItem(Job):
    companyName: str | None = None


class JobDetail(BaseModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    company: Company | None = None

    @field_serializer("equity")
    def serialize_equity(self, equity: Decimal | None) -> str | None:
        return None if equity is None else str(equity)


class JobResponse(BaseModel):
    job: Job


class JobDetailResponse(BaseModel):
    job: JobDetail


class JobListResponse(BaseModel):
    jobs: list[JobListItem]


class JobDeletedResponse(BaseModel):
    deleted: int
