"""Workload entry API endpoints."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session, joinedload

from workload_api.api.dependencies import get_current_user, get_statistics_service
from workload_api.database import get_db
from workload_api.exceptions import Forbidden, NotFound
from workload_api.models.enums import TaskType, WorkStatus
from workload_api.models.user import User
from workload_api.models.workload import WorkloadEntry
from workload_api.schemas.base import CamelModel, MessageResponse, Pagination
from workload_api.schemas.workload import (
    DeveloperWorkload,
    ProjectSummary,
    WorkloadCreate,
    WorkloadListResponse,
    WorkloadResponse,
    WorkloadUpdate,
)
from workload_api.services.statistics import StatisticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workload", tags=["workload"])


class DateRange(CamelModel):
    """Mandatory inclusive date range for the aggregation endpoints."""

    start_date: date
    end_date: date


def get_date_range(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
) -> DateRange:
    """Parse the startDate/endDate query parameters and check their order."""
    if end_date < start_date:
        raise RequestValidationError(
            [
                {
                    "type": "value_error",
                    "loc": ("query", "endDate"),
                    "msg": "endDate must not be before startDate",
                    "input": end_date.isoformat(),
                }
            ]
        )
    return DateRange(start_date=start_date, end_date=end_date)


def get_user_entry(db: Session, entry_id: int, user: User) -> WorkloadEntry:
    """Get an entry that the user owns, or any entry for admins."""
    entry = (
        db.query(WorkloadEntry)
        .options(joinedload(WorkloadEntry.developer))
        .filter(WorkloadEntry.id == entry_id)
        .first()
    )
    if not entry:
        raise NotFound("Workload entry not found")

    if not user.is_admin and entry.developer_id != user.id:
        logger.warning(f"User {user.id} denied access to workload entry {entry_id}")
        raise Forbidden()

    return entry


@router.post("", response_model=WorkloadResponse, status_code=status.HTTP_201_CREATED)
def create_workload(
    entry_data: WorkloadCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Log a workload entry for the current user."""
    entry = WorkloadEntry(developer_id=current_user.id, **entry_data.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get("", response_model=WorkloadListResponse)
def list_workloads(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    project: str | None = Query(default=None, max_length=255),
    status_filter: WorkStatus | None = Query(default=None, alias="status"),
    task_type: TaskType | None = Query(default=None, alias="taskType"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
):
    """List workload entries, newest date first.

    Non-admins only ever see their own entries, whatever filters they pass.
    """
    query = db.query(WorkloadEntry)

    if start_date is not None:
        query = query.filter(WorkloadEntry.date >= start_date)
    if end_date is not None:
        query = query.filter(WorkloadEntry.date <= end_date)
    if project:
        query = query.filter(WorkloadEntry.project == project)
    if status_filter is not None:
        query = query.filter(WorkloadEntry.status == status_filter)
    if task_type is not None:
        query = query.filter(WorkloadEntry.task_type == task_type)

    if not current_user.is_admin:
        query = query.filter(WorkloadEntry.developer_id == current_user.id)

    total = query.count()
    entries = (
        query.options(joinedload(WorkloadEntry.developer))
        .order_by(WorkloadEntry.date.desc(), WorkloadEntry.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return WorkloadListResponse(
        workloads=[WorkloadResponse.model_validate(entry) for entry in entries],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/stats", response_model=list[DeveloperWorkload])
def get_workload_stats(
    current_user: Annotated[User, Depends(get_current_user)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
    stats_service: Annotated[StatisticsService, Depends(get_statistics_service)],
    developer_id: int | None = Query(default=None, alias="developerId"),
):
    """Hours per developer and task type over a date range.

    Non-admins are limited to their own statistics.
    """
    if not current_user.is_admin:
        if developer_id is not None and developer_id != current_user.id:
            raise Forbidden()
        developer_id = current_user.id

    return stats_service.workload_stats(
        date_range.start_date, date_range.end_date, developer_id
    )


@router.get("/project-summary", response_model=list[ProjectSummary])
def get_project_summary(
    current_user: Annotated[User, Depends(get_current_user)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
    stats_service: Annotated[StatisticsService, Depends(get_statistics_service)],
):
    """Per-project hours, task counts and completion rate over a date range."""
    return stats_service.project_summary(date_range.start_date, date_range.end_date)


@router.get("/{entry_id}", response_model=WorkloadResponse)
def get_workload(
    entry_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single workload entry."""
    return get_user_entry(db, entry_id, current_user)


@router.put("/{entry_id}", response_model=WorkloadResponse)
def update_workload(
    entry_id: int,
    entry_data: WorkloadUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a workload entry (owner or admin)."""
    entry = get_user_entry(db, entry_id, current_user)

    for field, value in entry_data.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    db.commit()
    db.refresh(entry)
    return entry


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_workload(
    entry_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a workload entry (owner or admin).

    Entries that list this one as a dependency keep the now dangling id.
    """
    entry = get_user_entry(db, entry_id, current_user)
    db.delete(entry)
    db.commit()
    return MessageResponse(message="Workload entry deleted successfully")
