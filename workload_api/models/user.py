"""User model."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from workload_api.database import Base
from workload_api.models.enums import Role
from workload_api.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and entry ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="userrole", values_callable=lambda x: [e.value for e in x]),
        default=Role.USER,
        nullable=False,
        index=True,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    workload_entries = relationship(
        "WorkloadEntry", back_populates="developer", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        """Check if this user holds the administrator role."""
        return self.role == Role.ADMIN
