"""User management API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from workload_api.api.dependencies import (
    get_statistics_service,
    require_admin,
    require_self_or_admin,
)
from workload_api.database import get_db
from workload_api.exceptions import InvalidOperation, NotFound
from workload_api.models.enums import Role
from workload_api.models.user import User
from workload_api.schemas.base import MessageResponse, Pagination
from workload_api.schemas.user import (
    UserListResponse,
    UserResponse,
    UserStatsResponse,
    UserUpdate,
)
from workload_api.services.auth import find_conflicting_user
from workload_api.services.statistics import StatisticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_or_404(db: Session, user_id: int) -> User:
    """Load a user by id or raise NotFound."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("", response_model=UserListResponse)
def list_users(
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None, max_length=100),
    role: Role | None = Query(default=None),
):
    """List users, newest first (admin only)."""
    query = db.query(User)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
    if role is not None:
        query = query.filter(User.role == role)

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        pagination=Pagination.build(total, page, limit),
    )


@router.get("/stats", response_model=UserStatsResponse)
def get_user_stats(
    current_user: Annotated[User, Depends(require_admin)],
    stats_service: Annotated[StatisticsService, Depends(get_statistics_service)],
):
    """Get user counts per role (admin only)."""
    return stats_service.user_stats()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(require_self_or_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single user. Users may only fetch themselves unless admin."""
    return get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(require_self_or_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a user.

    Role and active flag changes are applied only for admin requesters; for
    anyone else those fields are dropped before the merge.
    """
    user = get_user_or_404(db, user_id)

    updates = user_data.model_dump(exclude_unset=True, exclude_none=True)
    if not current_user.is_admin:
        updates.pop("role", None)
        updates.pop("is_active", None)

    if find_conflicting_user(db, updates.get("username"), updates.get("email"), user.id):
        raise InvalidOperation("Email or username is already taken")

    demoted = updates.get("role", user.role) != Role.ADMIN
    deactivated = updates.get("is_active", user.is_active) is False
    if user.is_admin and user.is_active and (demoted or deactivated):
        other_admins = (
            db.query(User)
            .filter(User.role == Role.ADMIN, User.is_active.is_(True), User.id != user.id)
            .count()
        )
        if other_admins == 0:
            raise InvalidOperation("Cannot demote or deactivate the last admin user")

    for field, value in updates.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    current_user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a user and their workload entries (admin only).

    The last remaining admin cannot be deleted.
    """
    user = get_user_or_404(db, user_id)

    if user.is_admin:
        admin_count = db.query(User).filter(User.role == Role.ADMIN).count()
        if admin_count <= 1:
            raise InvalidOperation("Cannot delete the last admin user")

    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by admin {current_user.id}")
    return MessageResponse(message="User deleted successfully")
