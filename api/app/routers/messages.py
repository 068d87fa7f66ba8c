"""Messages router for direct conversations between users."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import StatusResponse
from app.schemas.messages import (
    ConversationResponse,
    MessageResponse,
    ReactionCount,
    ReactionToggleResponse,
    ReactRequest,
    SendMessageRequest,
)
from app.schemas.notifications import UnreadCountResponse
from app.services.messages import MessageService

router = APIRouter(prefix="/api/v1/messages", tags=["Messages"])


def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations(
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """One entry per counterpart, most recent conversation first."""
    return await service.get_conversations(user)


@router.get("/conversation/{user_id}", response_model=list[MessageResponse])
async def get_conversation(
    user_id: UUID,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.get_conversation(user, user_id)


@router.delete("/conversation/{user_id}", response_model=StatusResponse)
async def delete_conversation(
    user_id: UUID,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    deleted = await service.delete_conversation(user, user_id)
    return StatusResponse(message=f"Deleted {deleted} messages")


@router.post("/send", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: SendMessageRequest,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.send_message(
        user,
        data.recipient_id,
        data.content,
        context_type=data.context_type,
        context_id=data.context_id,
        context_data=data.context_data,
        reply_to_id=data.reply_to_id,
        attachments=data.attachments,
    )


@router.post("/mark-read/{user_id}", response_model=StatusResponse)
async def mark_read(
    user_id: UUID,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    await service.mark_conversation_read(user, user_id)
    return StatusResponse(message="Messages marked as read")


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return UnreadCountResponse(count=await service.unread_count(user))


@router.post("/{message_id}/react", response_model=ReactionToggleResponse)
async def react(
    message_id: UUID,
    data: ReactRequest,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.toggle_reaction(user, message_id, data.emoji)


@router.get("/{message_id}/reactions", response_model=list[ReactionCount])
async def get_reactions(
    message_id: UUID,
    user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return await service.get_reactions(message_id)
