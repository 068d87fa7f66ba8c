"""Event service: the public upcoming feed and admin management."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from babel.dates import format_date
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import not_found
from app.models.event import Event, EventType
from app.models.types import as_utc, utcnow
from app.models.user import User
from app.schemas.common import author_summary
from app.schemas.events import CreateEventRequest, EventResponse, UpdateEventRequest

logger = logging.getLogger(__name__)

DEFAULT_UPCOMING_LIMIT = 10


def resolve_event_type(value: str | None, fallback: EventType = EventType.OTHER) -> str:
    if value:
        try:
            return EventType(value.upper()).value
        except ValueError:
            pass
    return fallback.value


def display_date(value: datetime, locale: str = "en_US") -> str:
    """Long calendar date in the given locale, e.g. 'March 5, 2026'."""
    return format_date(value.date(), format="long", locale=locale)


def format_upcoming(event: Event, today: datetime) -> dict[str, Any]:
    start = as_utc(event.start_date)
    return {
        "id": str(event.id),
        "title": event.title,
        "title_ar": event.title_ar,
        "description": event.description,
        "description_ar": event.description_ar,
        "type": event.type,
        "start_date": start,
        "date": display_date(start),
        "date_ar": display_date(start, "ar"),
        "end_date": event.end_date,
        "location": event.location,
        "location_ar": event.location_ar,
        "time": event.time,
        "image_url": event.image_url,
        "status": "upcoming" if start >= today else "past",
        "is_external": False,
    }


def format_admin_event(event: Event) -> dict[str, Any]:
    data = EventResponse.model_validate(event).model_dump()
    data["date"] = data["start_date"]
    data["creator"] = author_summary(event.creator)
    return data


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def upcoming(self, limit: int = DEFAULT_UPCOMING_LIMIT) -> list[dict[str, Any]]:
        """
        Active events starting today or later, soonest first.

        When nothing is scheduled, the most recent active events are returned
        instead so the feed is never empty while events exist.
        """
        today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        result = await self.db.execute(
            select(Event)
            .where(Event.is_active.is_(True))
            .where(Event.start_date >= today)
            .order_by(Event.start_date.asc())
            .limit(limit)
        )
        events = list(result.scalars().all())
        if not events:
            result = await self.db.execute(
                select(Event).where(Event.is_active.is_(True)).order_by(Event.start_date.desc()).limit(limit)
            )
            events = list(result.scalars().all())
        return [format_upcoming(e, today) for e in events]

    # --- Admin ---

    async def _get(self, event_id: UUID) -> Event:
        result = await self.db.execute(
            select(Event)
            .options(selectinload(Event.creator))
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise not_found("Event not found")
        return event

    async def list_events(self) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(Event).options(selectinload(Event.creator)).order_by(Event.start_date.desc())
        )
        return [format_admin_event(e) for e in result.scalars().all()]

    async def create_event(self, user: User, data: CreateEventRequest) -> dict[str, Any]:
        values = data.model_dump(exclude={"type", "date", "is_active"})
        event = Event(
            **values,
            type=resolve_event_type(data.type),
            start_date=data.date or utcnow(),
            is_active=True if data.is_active is None else data.is_active,
            created_by=user.id,
        )
        self.db.add(event)
        await self.db.commit()
        logger.info("Admin %s created event %s", user.id, event.id)
        return format_admin_event(await self._get(event.id))

    async def update_event(self, event_id: UUID, data: UpdateEventRequest) -> dict[str, Any]:
        event = await self._get(event_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in {"title", "type", "date", "is_active"}:
                continue
            if field == "type":
                event.type = resolve_event_type(value)
            elif field == "date":
                event.start_date = value
            else:
                setattr(event, field, value)
        await self.db.commit()
        return format_admin_event(await self._get(event_id))

    async def delete_event(self, event_id: UUID) -> None:
        event = await self._get(event_id)
        await self.db.delete(event)
        await self.db.commit()

    async def toggle_event(self, event_id: UUID) -> dict[str, Any]:
        event = await self._get(event_id)
        event.is_active = not event.is_active
        await self.db.commit()
        return format_admin_event(await self._get(event_id))
