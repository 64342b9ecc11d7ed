"""Export Pydantic v2 request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from employee_api.lib.exporter import DEFAULT_FIELDS, supported_formats


class ExportParameters(BaseModel):
    """Filter, projection, sort and paging options of an export.

    Accepts both snake_case and camelCase keys (``min_salary`` or
    ``minSalary``).  This is the snapshot persisted with each job.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    department: str | None = None
    position: str | None = None
    email: str | None = None
    name: str | None = None
    min_salary: float | None = Field(default=None, ge=0)
    max_salary: float | None = Field(default=None, ge=0)

    fields: str = Field(default=DEFAULT_FIELDS, description="Comma-separated field names in output order")
    sort_by: str = Field(default="id", description="Field to sort by (case-insensitive)")
    sort_dir: str = Field(default="asc", description="Sort direction: asc or desc")

    page: int = Field(default=1, ge=1, description="Page number (1-based), used only without filters")
    size: int = Field(default=1000, ge=1, description="Page size, used only without filters")

    export_type: str = Field(default="csv", description="Output format")

    @field_validator("department", "position", "email", "name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("sort_dir")
    @classmethod
    def validate_sort_dir(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in ("asc", "desc"):
            msg = "sort_dir must be 'asc' or 'desc'"
            raise ValueError(msg)
        return normalized

    @field_validator("export_type")
    @classmethod
    def validate_export_type(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in supported_formats():
            msg = f"Unsupported export type: {v}. Supported: {supported_formats()}"
            raise ValueError(msg)
        return normalized

    @model_validator(mode="after")
    def validate_salary_range(self) -> "ExportParameters":
        if self.min_salary is not None and self.max_salary is not None and self.min_salary > self.max_salary:
            msg = "min_salary must not be greater than max_salary"
            raise ValueError(msg)
        return self


class ExportRequest(ExportParameters):
    """Request to create an export, optionally on behalf of an owner."""

    owner_id: str | None = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("owner_id", "ownerId", "userId", "user_id"),
    )

    def to_parameters(self) -> ExportParameters:
        """Strip request-only fields, leaving the persisted parameter snapshot."""
        return ExportParameters.model_validate(self.model_dump(exclude={"owner_id"}))


class ExportSubmitResponse(BaseModel):
    """Response returned immediately after an export is queued."""

    reference_id: str
    status: str
    message: str
    estimated_completion: datetime | None = None


class ExportStatusResponse(BaseModel):
    """Status of an export job as seen by a polling caller."""

    reference_id: str
    status: str
    message: str
    created_at: datetime | None = None
    total_records: int | None = None
    file_size: int | None = None
    warning: str | None = None


class ExportJobSummary(BaseModel):
    """Export job listing entry."""

    reference_id: str
    owner_id: str | None = None
    export_type: str
    status: str
    total_records: int | None = None
    file_size: int | None = None
    error_message: str | None = None
    warning_message: str | None = None
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class ExportCancelResponse(BaseModel):
    """Outcome of a successful cancellation."""

    reference_id: str
    status: str
    message: str
