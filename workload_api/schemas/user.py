"""User schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from workload_api.models.enums import Role
from workload_api.schemas.base import CamelModel, Pagination


class UserResponse(CamelModel):
    """Public user projection. Never carries the password hash."""

    id: int
    username: str
    email: str
    role: Role
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """Update a user. ``role`` and ``is_active`` are honoured for admins only."""

    username: str | None = Field(None, min_length=3, max_length=100)
    email: EmailStr | None = None
    role: Role | None = None
    is_active: bool | None = None


class UserListResponse(CamelModel):
    """Paginated user list."""

    users: list[UserResponse]
    pagination: Pagination


class RoleStats(CamelModel):
    """Counts for one role."""

    role: Role
    count: int
    active_users: int
    inactive_users: int


class UserStatsResponse(CamelModel):
    """User counts overall and per role."""

    total_users: int
    active_users: int
    inactive_users: int
    role_distribution: list[RoleStats]
