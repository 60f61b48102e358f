"""Workload entry schemas."""

from datetime import date as date_type
from datetime import datetime
from typing import Annotated

from pydantic import Field, field_validator, model_validator

from workload_api.models.enums import Priority, TaskType, WorkStatus
from workload_api.schemas.base import CamelModel, Pagination
from workload_api.schemas.user import UserResponse

# Booleans and numeric strings are not hours
Hours = Annotated[float, Field(ge=0, allow_inf_nan=False, strict=True)]

# Fields that may be omitted from an update but never set to null
REQUIRED_ON_UPDATE = (
    "project",
    "task_name",
    "task_type",
    "hours_spent",
    "date",
    "status",
    "priority",
    "tags",
    "dependencies",
)


def _unique_ids(ids: list[int] | None) -> list[int] | None:
    """Drop repeated dependency ids, keeping first-seen order."""
    if ids is None:
        return None
    return list(dict.fromkeys(ids))


class WorkloadCreate(CamelModel):
    """Create a workload entry."""

    project: str = Field(..., min_length=1, max_length=255)
    task_name: str = Field(..., min_length=1, max_length=255)
    task_type: TaskType
    hours_spent: Hours
    date: date_type
    status: WorkStatus = WorkStatus.PLANNED
    priority: Priority = Priority.MEDIUM
    description: str | None = Field(None, max_length=5000)
    blockers: str | None = Field(None, max_length=5000)
    tags: list[str] = Field(default_factory=list)
    dependencies: list[int] = Field(default_factory=list)

    @field_validator("dependencies")
    @classmethod
    def dedupe_dependencies(cls, value):
        return _unique_ids(value)


class WorkloadUpdate(CamelModel):
    """Update a workload entry. Only provided fields are changed."""

    project: str | None = Field(None, min_length=1, max_length=255)
    task_name: str | None = Field(None, min_length=1, max_length=255)
    task_type: TaskType | None = None
    hours_spent: Hours | None = None
    date: date_type | None = None
    status: WorkStatus | None = None
    priority: Priority | None = None
    description: str | None = Field(None, max_length=5000)
    blockers: str | None = Field(None, max_length=5000)
    tags: list[str] | None = None
    dependencies: list[int] | None = None

    @field_validator("dependencies")
    @classmethod
    def dedupe_dependencies(cls, value):
        return _unique_ids(value)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "WorkloadUpdate":
        """Refuse explicit nulls for fields the entry cannot be without."""
        nulled = [
            name
            for name in REQUIRED_ON_UPDATE
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulled))}")
        return self


class WorkloadResponse(CamelModel):
    """Workload entry with the owner expanded to the public projection."""

    id: int
    developer_id: int
    developer: UserResponse
    project: str
    task_name: str
    task_type: TaskType
    hours_spent: float
    date: date_type
    status: WorkStatus
    priority: Priority
    description: str | None
    blockers: str | None
    tags: list[str]
    dependencies: list[int]
    created_at: datetime
    updated_at: datetime


class WorkloadListResponse(CamelModel):
    """Paginated workload list."""

    workloads: list[WorkloadResponse]
    pagination: Pagination


class TaskTypeBreakdown(CamelModel):
    """Hours and entry count for one task type."""

    task_type: TaskType
    total_hours: float
    task_count: int


class DeveloperWorkload(CamelModel):
    """Per-developer workload statistics."""

    developer: UserResponse
    workload_by_type: list[TaskTypeBreakdown]
    total_hours: float


class ProjectSummary(CamelModel):
    """Per-project totals over a date range."""

    project: str
    total_hours: float
    task_count: int
    completed_tasks: int
    blocked_tasks: int
    completion_rate: float
