"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from workload_api.api.dependencies import get_app_settings, get_current_user
from workload_api.config import Settings
from workload_api.database import get_db
from workload_api.exceptions import InvalidOperation, Unauthenticated
from workload_api.models.user import User
from workload_api.schemas.auth import AuthResponse, PasswordChange, UserLogin, UserRegister
from workload_api.schemas.base import MessageResponse
from workload_api.schemas.user import UserResponse
from workload_api.services.auth import (
    authenticate_user,
    change_password,
    create_access_token,
    create_user,
    find_conflicting_user,
    record_login,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Register a new user. Self-registered accounts always get the ``user`` role."""
    if find_conflicting_user(db, user_data.username, user_data.email):
        raise InvalidOperation("User already exists with this email or username")

    user = create_user(db, user_data.username, user_data.email, user_data.password)

    return AuthResponse(
        token=create_access_token(user.id, settings),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning(f"Failed login for {credentials.email}")
        raise Unauthenticated("Invalid login credentials")

    if not user.is_active:
        logger.warning(f"Login attempt for deactivated user {user.id}")
        raise Unauthenticated("Account is deactivated")

    record_login(db, user)

    return AuthResponse(
        token=create_access_token(user.id, settings),
        user=UserResponse.model_validate(user),
    )


@router.get("/profile", response_model=UserResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")


@router.post("/change-password", response_model=MessageResponse)
def update_password(
    password_data: PasswordChange,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change the current user's password."""
    if not verify_password(password_data.current_password, current_user.password_hash):
        raise InvalidOperation("Current password is incorrect")

    change_password(db, current_user, password_data.new_password)
    logger.info(f"User {current_user.id} changed their password")
    return MessageResponse(message="Password updated successfully")
