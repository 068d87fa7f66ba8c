"""Support team membership and the public contact form."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.schemas.support import ContactRequest
from app.services.messages import MessageService

logger = logging.getLogger(__name__)

SUPPORT_CONTEXT = "support-contact"


def _read_team_file(path: Path) -> list[str] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    ids = data.get("userIds") if isinstance(data, dict) else None
    if not isinstance(ids, list):
        return None
    return [i for i in ids if isinstance(i, str)]


def _write_team_file(path: Path, user_ids: list[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"userIds": user_ids}, indent=2), encoding="utf-8")


class SupportService:
    def __init__(self, db: AsyncSession, team_file: str | None = None):
        self.db = db
        self.team_file = Path(team_file or settings.support_team_file)
        self.messages = MessageService(db)

    async def get_team_ids(self) -> list[str]:
        """Ids from the team file, falling back to SUPPORT_TEAM_USER_IDS."""
        ids = await asyncio.to_thread(_read_team_file, self.team_file)
        if ids is not None:
            return ids
        return settings.support_team_ids_list

    async def set_team_ids(self, user_ids: list[str]) -> list[str]:
        safe_ids = [i.strip() for i in user_ids if isinstance(i, str) and i.strip()]
        await asyncio.to_thread(_write_team_file, self.team_file, safe_ids)
        logger.info("Support team updated with %d members", len(safe_ids))
        return safe_ids

    async def contact(self, data: ContactRequest) -> dict[str, Any]:
        """Deliver the contact form as a system message to every support member."""
        team = await self.get_team_ids()
        if not team:
            return {"ok": True, "delivered": 0, "deliveries": [], "note": "No support team configured"}

        content = (
            "Support Contact\n"
            f"From: {data.name} <{data.email}>\n"
            f"Subject: {data.subject or '(no subject)'}\n\n"
            f"{data.message}"
        )
        deliveries = []
        for support_id in team:
            try:
                recipient_id = UUID(support_id)
            except ValueError:
                logger.warning("Skipping malformed support team id %r", support_id)
                continue
            if await self.db.get(User, recipient_id) is None:
                logger.warning("Skipping unknown support team member %s", support_id)
                continue

            message = await self.messages.deliver(
                None,
                recipient_id,
                content,
                context_type=SUPPORT_CONTEXT,
                context_data={"name": data.name, "email": data.email, "subject": data.subject},
            )
            if message is not None:
                deliveries.append({"support_id": support_id, "message_id": str(message.id)})

        return {"ok": True, "delivered": len(deliveries), "deliveries": deliveries, "note": None}
