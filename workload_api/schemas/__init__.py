"""Pydantic schemas for API requests and responses."""

from workload_api.schemas.auth import AuthResponse, PasswordChange, UserLogin, UserRegister
from workload_api.schemas.base import MessageResponse, Pagination
from workload_api.schemas.user import (
    RoleStats,
    UserListResponse,
    UserResponse,
    UserStatsResponse,
    UserUpdate,
)
from workload_api.schemas.workload import (
    DeveloperWorkload,
    ProjectSummary,
    TaskTypeBreakdown,
    WorkloadCreate,
    WorkloadListResponse,
    WorkloadResponse,
    WorkloadUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "PasswordChange",
    "AuthResponse",
    "MessageResponse",
    "Pagination",
    "UserResponse",
    "UserUpdate",
    "UserListResponse",
    "RoleStats",
    "UserStatsResponse",
    "WorkloadCreate",
    "WorkloadUpdate",
    "WorkloadResponse",
    "WorkloadListResponse",
    "TaskTypeBreakdown",
    "DeveloperWorkload",
    "ProjectSummary",
]
