"""Pydantic schemas related to registration and authentication."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.config.settings import settings
from app.models.user import Permission

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
_NAME_PATTERN = re.compile(r"^[^\W\d_]+(?:[\s'\-][^\W\d_]+)*$")


class RegisterRequest(BaseModel):
    """Payload for creating a user account and its passenger profile."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None
    passport_number: Optional[str] = Field(None, max_length=30)
    nationality: Optional[str] = Field(None, max_length=60)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not _USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username can only contain letters, digits, dots, hyphens and underscores"
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        minimum = settings.auth.password_min_length
        if len(value) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters long")
        if not re.search(r"[A-Za-z]", value):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", value):
            raise ValueError("Password must contain at least one digit")
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, value: str) -> str:
        value = value.strip()
        if not _NAME_PATTERN.match(value):
            raise ValueError(
                "Name can only contain letters, spaces, hyphens, and apostrophes"
            )
        return value

    @field_validator("phone", "passport_number", "nationality")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class LoginRequest(BaseModel):
    """Credentials submitted for verification."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Public view of a user; never carries the password hash."""

    id: int
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    passport_number: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    permissions: list[Permission] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """User plus the roles granted to it."""

    user: UserResponse
    roles: list[RoleResponse]


class RegisterResponse(AuthResponse):
    missing_passenger_fields: list[str] = Field(
        default_factory=list,
        description="Passenger identity fields left empty at registration.",
    )


__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "RoleResponse",
    "AuthResponse",
    "RegisterResponse",
]
