"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """User roles, from most to least privileged."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class TaskType(str, Enum):
    """Category of work a workload entry records."""

    DEVELOPMENT = "development"
    BUG_FIX = "bug-fix"
    REVIEW = "review"
    MEETING = "meeting"
    DOCUMENTATION = "documentation"
    OTHER = "other"


class WorkStatus(str, Enum):
    """Progress state of a workload entry."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class Priority(str, Enum):
    """Priority levels for workload entries."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
