"""Pydantic schemas for request/response validation."""

from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
)
from app.schemas.common import AuthorSummary, CounterResponse, PageInfo, StatusResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "ChangePasswordRequest",
    "AuthorSummary",
    "CounterResponse",
    "PageInfo",
    "StatusResponse",
]
