"""Authentication-related Pydantic schemas."""

import re
from typing import Literal

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.users import UserPrivateResponse

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,30}$")


def validate_password_strength(v: str) -> str:
    """Passwords need 8-128 characters with an upper, a lower and a digit."""
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(v) > 128:
        raise ValueError("Password must be 128 characters or less")
    if not re.search(r"[a-z]", v) or not re.search(r"[A-Z]", v) or not re.search(r"\d", v):
        raise ValueError("Password must contain an uppercase letter, a lowercase letter and a digit")
    return v


class RegisterRequest(BaseModel):
    """Request to create a new account."""

    username: str
    email: EmailStr
    password: str
    full_name: str | None = None
    role: Literal["STUDENT", "RESEARCHER", "PROFESSOR"] = "STUDENT"
    major: str | None = None
    university: str | None = None
    country: str | None = None
    city: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username must be 3-30 characters: letters, digits and underscores")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(BaseModel):
    """Login with email (or username) and password."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Response for register and login."""

    access_token: str
    token_type: str = "bearer"
    user: UserPrivateResponse


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return validate_password_strength(v)
