"""Authentication schemas."""

from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints

from workload_api.schemas.base import CamelModel
from workload_api.schemas.user import UserResponse

# Passwords are taken verbatim, surrounding spaces included
Password = Annotated[str, StringConstraints(strip_whitespace=False, max_length=128)]


class UserRegister(CamelModel):
    """User registration request."""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    password: Password = Field(..., min_length=6)


class UserLogin(CamelModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: Password = Field(..., min_length=1)


class PasswordChange(CamelModel):
    """Change the current user's password."""

    current_password: Password = Field(..., min_length=1)
    new_password: Password = Field(..., min_length=6)


class AuthResponse(CamelModel):
    """Authentication response with token and user info."""

    token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse
