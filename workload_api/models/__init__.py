"""SQLAlchemy models."""

from workload_api.models.user import User
from workload_api.models.workload import WorkloadEntry

__all__ = [
    "User",
    "WorkloadEntry",
]
