"""Shared schema types and helpers."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict

from app.models.types import isoformat


def _id_to_str(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    return value


def _timestamp_to_str(value: Any) -> Any:
    if isinstance(value, datetime):
        return isoformat(value)
    return value


IdStr = Annotated[str, BeforeValidator(_id_to_str)]
Timestamp = Annotated[str, BeforeValidator(_timestamp_to_str)]


class ORMModel(BaseModel):
    """Base for responses read straight off model instances."""

    model_config = ConfigDict(from_attributes=True)


class AuthorSummary(ORMModel):
    """Compact user reference embedded in other resources."""

    id: IdStr
    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    role: str
    university: str | None = None


class StatusResponse(BaseModel):
    """Generic success/message envelope for actions without a resource body."""

    success: bool = True
    message: str


class CounterResponse(BaseModel):
    """Current value of a view, share or download counter."""

    id: str
    count: int


class PageInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


def page_info(page: int, limit: int, total: int) -> dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": (total + limit - 1) // limit if limit else 0,
    }


def author_summary(user) -> dict[str, Any] | None:
    if user is None:
        return None
    return AuthorSummary.model_validate(user).model_dump()
