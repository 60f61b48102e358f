"""FastAPI dependencies for authentication, authorization and services."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from workload_api.config import Settings
from workload_api.database import get_db
from workload_api.exceptions import Forbidden, Unauthenticated
from workload_api.models.enums import Role
from workload_api.models.user import User
from workload_api.services.auth import decode_access_token
from workload_api.services.statistics import StatisticsService

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by get_current_user, not by HTTPBearer
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> User:
    """Get the current authenticated, active user from the JWT token."""
    if credentials is None:
        raise Unauthenticated()

    payload = decode_access_token(credentials.credentials, settings)
    if payload is None:
        raise Unauthenticated()

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise Unauthenticated()

    user = db.query(User).filter(User.id == int(user_id), User.is_active.is_(True)).first()
    if user is None:
        raise Unauthenticated()

    return user


def require_roles(*roles: Role) -> Callable[..., User]:
    """Build a dependency that only lets users holding one of ``roles`` through."""

    def check_role(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in roles:
            logger.warning(
                f"User {current_user.id} with role {current_user.role.value} denied; "
                f"requires one of {[role.value for role in roles]}"
            )
            raise Forbidden("Access denied. Insufficient permissions.")
        return current_user

    return check_role


require_admin = require_roles(Role.ADMIN)


def require_self_or_admin(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Allow admins, or the user named by the ``user_id`` path parameter."""
    if current_user.is_admin or current_user.id == user_id:
        return current_user
    logger.warning(f"User {current_user.id} denied access to user {user_id}")
    raise Forbidden("Access denied. You can only modify your own profile.")


def get_statistics_service(
    db: Annotated[Session, Depends(get_db)],
) -> StatisticsService:
    """Get statistics service with dependencies."""
    return StatisticsService(db)
