"""Public events router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.events import UpcomingEventResponse
from app.services.events import DEFAULT_UPCOMING_LIMIT, EventService

router = APIRouter(prefix="/api/v1/events", tags=["Events"])


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


@router.get("/upcoming", response_model=list[UpcomingEventResponse])
async def upcoming_events(
    limit: int | None = Query(default=None),
    service: EventService = Depends(get_event_service),
):
    """Non-positive limits fall back to the default."""
    if not limit or limit <= 0:
        limit = DEFAULT_UPCOMING_LIMIT
    return await service.upcoming(limit)
