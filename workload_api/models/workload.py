"""Workload entry model."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from workload_api.database import Base
from workload_api.models.enums import Priority, TaskType, WorkStatus
from workload_api.models.mixins import TimestampMixin


def _values(enum_cls):
    return [e.value for e in enum_cls]


class WorkloadEntry(Base, TimestampMixin):
    """One unit of reported work logged by a developer."""

    __tablename__ = "workload_entries"
    __table_args__ = (
        CheckConstraint("hours_spent >= 0", name="ck_workload_entries_hours_non_negative"),
        Index("ix_workload_entries_developer_date", "developer_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    developer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project = Column(String(255), nullable=False, index=True)
    task_name = Column(String(255), nullable=False)
    task_type = Column(
        Enum(TaskType, name="tasktype", values_callable=_values), nullable=False, index=True
    )
    hours_spent = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(WorkStatus, name="workstatus", values_callable=_values),
        default=WorkStatus.PLANNED,
        nullable=False,
        index=True,
    )
    priority = Column(
        Enum(Priority, name="priority", values_callable=_values),
        default=Priority.MEDIUM,
        nullable=False,
    )
    description = Column(Text, nullable=True)
    blockers = Column(Text, nullable=True)
    # Ordered list of free-form labels: ["frontend", "urgent"]
    tags = Column(JSON, nullable=False, default=list)
    # Ids of other entries this one depends on; not enforced, may dangle
    dependencies = Column(JSON, nullable=False, default=list)

    # Relationships
    developer = relationship("User", back_populates="workload_entries")
