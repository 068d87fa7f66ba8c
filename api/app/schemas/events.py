"""Event schemas."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.common import AuthorSummary, IdStr, ORMModel, Timestamp


class EventFields(BaseModel):
    title_ar: str | None = None
    description: str | None = None
    description_ar: str | None = None
    # Case-insensitive; unknown values are stored as OTHER
    type: str | None = None
    date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    location_ar: str | None = None
    time: str | None = None
    image_url: str | None = None
    is_active: bool | None = None


class CreateEventRequest(EventFields):
    title: str


class UpdateEventRequest(EventFields):
    title: str | None = None


class EventResponse(ORMModel):
    id: IdStr
    title: str
    title_ar: str | None
    description: str | None
    description_ar: str | None
    type: str
    start_date: Timestamp
    end_date: Timestamp | None
    location: str | None
    location_ar: str | None
    time: str | None
    image_url: str | None
    is_active: bool
    created_at: Timestamp
    updated_at: Timestamp


class AdminEventResponse(EventResponse):
    date: Timestamp
    creator: AuthorSummary | None = None


class UpcomingEventResponse(BaseModel):
    id: str
    title: str
    title_ar: str | None
    description: str | None
    description_ar: str | None
    type: str
    start_date: Timestamp
    date: str
    date_ar: str
    end_date: Timestamp | None
    location: str | None
    location_ar: str | None
    time: str | None
    image_url: str | None
    status: str
    is_external: bool = False
