"""Collaboration service: listings, applications and capacity tracking."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import forbidden, not_found
from app.models.collaboration import (
    ApplicationStatus,
    Collaboration,
    CollaborationApplication,
    CollaborationStatus,
)
from app.models.message import Message
from app.models.notification import Notification, NotificationType
from app.models.types import json_array_overlaps
from app.models.user import User
from app.schemas.collaborations import (
    ApplicationResponse,
    CollaborationBase,
    CreateApplicationRequest,
    CreateCollaborationRequest,
    UpdateCollaborationRequest,
)
from app.schemas.common import author_summary
from app.services.messages import MessageService
from app.services.notifications import NotificationService

logger = logging.getLogger(__name__)

APPLICATION_CONTEXT = "collaboration_application"
APPLICATION_STATUS_CONTEXT = "collaboration_application_status"

COLLABORATION_LOAD_OPTIONS = (
    selectinload(Collaboration.owner),
    selectinload(Collaboration.members),
    selectinload(Collaboration.applications).selectinload(CollaborationApplication.applicant),
)

def format_collaboration(collaboration: Collaboration) -> dict[str, Any]:
    data = CollaborationBase.model_validate(collaboration).model_dump()
    data.update(
        owner=author_summary(collaboration.owner),
        applications_count=len(collaboration.applications),
        accepted_count=collaboration.accepted_count,
        is_full=collaboration.is_full,
    )
    return data


def format_application(application: CollaborationApplication, with_applicant: bool = True) -> dict[str, Any]:
    data = ApplicationResponse.model_validate(application).model_dump()
    if with_applicant:
        data["applicant"] = author_summary(application.applicant)
    return data


def _display_name(user: User) -> str:
    return user.full_name or user.username


class CollaborationService:
    """Service for research collaborations and their applications."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.dialect = db.bind.dialect.name
        self.notifications = NotificationService(db)
        self.messages = MessageService(db)

    async def _get_collaboration(self, collaboration_id: UUID) -> Collaboration:
        result = await self.db.execute(
            select(Collaboration)
            .options(*COLLABORATION_LOAD_OPTIONS)
            .where(Collaboration.id == collaboration_id)
            .execution_options(populate_existing=True)
        )
        collaboration = result.scalar_one_or_none()
        if not collaboration:
            raise not_found("Collaboration not found")
        return collaboration

    async def _get_owned(self, collaboration_id: UUID, user: User, action: str) -> Collaboration:
        collaboration = await self._get_collaboration(collaboration_id)
        if collaboration.owner_id != user.id:
            raise forbidden(f"You can only {action} your own collaborations")
        return collaboration

    async def _get_application(self, application_id: UUID) -> CollaborationApplication:
        result = await self.db.execute(
            select(CollaborationApplication)
            .options(
                selectinload(CollaborationApplication.applicant),
                selectinload(CollaborationApplication.collaboration).options(*COLLABORATION_LOAD_OPTIONS),
            )
            .where(CollaborationApplication.id == application_id)
            .execution_options(populate_existing=True)
        )
        application = result.scalar_one_or_none()
        if not application:
            raise not_found("Application not found")
        return application

    async def create_collaboration(self, user: User, data: CreateCollaborationRequest) -> dict[str, Any]:
        values = {k: v for k, v in data.model_dump().items() if v is not None}
        collaboration = Collaboration(owner_id=user.id, **values)
        self.db.add(collaboration)
        await self.db.commit()
        return format_collaboration(await self._get_collaboration(collaboration.id))

    async def list_collaborations(
        self,
        search: str | None = None,
        disciplines: list[str] | None = None,
        application_areas: list[str] | None = None,
        is_remote: bool | None = None,
        status: str | None = None,
        has_funding: bool | None = None,
    ) -> list[dict[str, Any]]:
        query = select(Collaboration).options(*COLLABORATION_LOAD_OPTIONS)
        if is_remote is not None:
            query = query.where(Collaboration.is_remote.is_(is_remote))
        if has_funding is not None:
            query = query.where(Collaboration.has_funding.is_(has_funding))
        if status:
            query = query.where(Collaboration.status == status)
        term = search.strip() if search else ""
        if term:
            pattern = f"%{term}%"
            query = query.where(or_(Collaboration.title.ilike(pattern), Collaboration.description.ilike(pattern)))
        # Comma separated list filters match when any requested value is present
        if disciplines:
            query = query.where(json_array_overlaps(Collaboration.disciplines, disciplines, self.dialect))
        if application_areas:
            query = query.where(
                json_array_overlaps(Collaboration.application_areas, application_areas, self.dialect)
            )

        result = await self.db.execute(
            query.order_by(Collaboration.created_at.desc()).execution_options(populate_existing=True)
        )
        return [format_collaboration(c) for c in result.scalars().all()]

    async def get_collaboration(self, collaboration_id: UUID, viewer: User | None) -> dict[str, Any]:
        collaboration = await self._get_collaboration(collaboration_id)
        data = format_collaboration(collaboration)

        accepted = [a for a in collaboration.applications if a.status == ApplicationStatus.ACCEPTED.value]
        data["accepted_members"] = [author_summary(a.applicant) for a in accepted]

        own = None
        if viewer is not None:
            own = next((a for a in collaboration.applications if a.applicant_id == viewer.id), None)
        data["has_applied"] = own is not None
        data["application_status"] = own.status if own else None
        return data

    async def update_collaboration(
        self, collaboration_id: UUID, user: User, data: UpdateCollaborationRequest
    ) -> dict[str, Any]:
        collaboration = await self._get_owned(collaboration_id, user, "update")
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in {"title", "description", "status", "is_remote", "has_funding"}:
                continue
            if field == "status":
                value = value.value
            setattr(collaboration, field, value)
        await self.db.commit()
        return format_collaboration(await self._get_collaboration(collaboration_id))

    async def delete_collaboration(self, collaboration_id: UUID, user: User) -> None:
        collaboration = await self._get_owned(collaboration_id, user, "delete")
        await self.db.delete(collaboration)
        await self.db.commit()

    # --- Applications ---

    async def apply(self, collaboration_id: UUID, user: User, data: CreateApplicationRequest) -> dict[str, Any]:
        """
        Apply to join a collaboration.

        Rejected when the collaboration is not open, is full, is owned by the
        applicant, or already has an application from them.
        """
        collaboration = await self._get_collaboration(collaboration_id)

        if collaboration.status != CollaborationStatus.OPEN.value:
            raise forbidden("This collaboration is not accepting applications")
        if collaboration.is_full:
            raise forbidden("This collaboration is full and no longer accepting applications")
        if collaboration.owner_id == user.id:
            raise forbidden("You cannot apply to your own collaboration")
        if any(a.applicant_id == user.id for a in collaboration.applications):
            raise forbidden("You have already applied to this collaboration")

        values = data.model_dump()
        values["cover_letter"] = values.pop("cover_message")
        application = CollaborationApplication(
            collaboration_id=collaboration_id,
            applicant_id=user.id,
            **values,
        )
        self.db.add(application)
        collaboration.applicants_count = (collaboration.applicants_count or 0) + 1

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise forbidden("You have already applied to this collaboration")

        application_id = application.id
        owner_id = collaboration.owner_id
        title = collaboration.title
        applicant_name = _display_name(user)

        await self.notifications.notify(
            owner_id,
            NotificationType.COLLAB_REQUEST,
            "New Collaboration Application",
            message=f"{applicant_name} has applied to your collaboration \"{title}\"",
            actor=user,
            target_type="collaboration",
            target_id=str(collaboration_id),
            link=f"/dashboard/messages?userId={user.id}",
            payload={
                "application_id": str(application_id),
                "collaboration_id": str(collaboration_id),
                "applicant_id": str(user.id),
                "applicant_name": applicant_name,
                "conversation_user_id": str(user.id),
                "context_type": APPLICATION_CONTEXT,
                "collaboration_title": title,
                "status": "pending",
            },
        )

        lines = [
            "**New Collaboration Application**",
            "",
            f"**Applicant:** {applicant_name}",
            f"**Email:** {user.email}",
            f"**University:** {user.university or 'N/A'}",
            "",
            "**Submitted Information:**",
            f"**Name:** {data.full_name}",
            f"**Institution:** {data.institution}",
            f"**Email:** {data.email}",
            f"**Field:** {data.field}",
            "",
            f"**Cover Message:**\n{data.cover_message}",
        ]
        if data.message:
            lines += ["", f"**Additional Message:**\n{data.message}"]
        if data.motivation:
            lines += ["", f"**Motivation:**\n{data.motivation}"]
        if data.skills:
            lines += ["", f"**Skills:**\n{', '.join(data.skills)}"]
        lines += ["", "You can review and respond to this application in your collaboration management page."]

        await self.messages.deliver(
            user,
            owner_id,
            "\n".join(lines),
            context_type=APPLICATION_CONTEXT,
            context_id=str(application_id),
            context_data={
                "collaboration_id": str(collaboration_id),
                "collaboration_title": title,
                "applicant_id": str(user.id),
                "applicant_name": applicant_name,
                "status": ApplicationStatus.PENDING.value,
            },
        )

        return format_application(await self._get_application(application_id))

    async def my_applications(self, user: User) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(CollaborationApplication)
            .options(selectinload(CollaborationApplication.collaboration).options(*COLLABORATION_LOAD_OPTIONS))
            .where(CollaborationApplication.applicant_id == user.id)
            .order_by(CollaborationApplication.created_at.desc())
            .execution_options(populate_existing=True)
        )
        items = []
        for application in result.scalars().all():
            data = format_application(application, with_applicant=False)
            data["collaboration"] = format_collaboration(application.collaboration)
            items.append(data)
        return items

    async def my_collaborations(self, user: User) -> list[dict[str, Any]]:
        """Collaborations the user owns, followed by the ones they were accepted into."""
        owned = await self.db.execute(
            select(Collaboration)
            .options(*COLLABORATION_LOAD_OPTIONS)
            .where(Collaboration.owner_id == user.id)
            .order_by(Collaboration.created_at.desc())
            .execution_options(populate_existing=True)
        )
        joined = await self.db.execute(
            select(Collaboration)
            .options(*COLLABORATION_LOAD_OPTIONS)
            .join(CollaborationApplication, CollaborationApplication.collaboration_id == Collaboration.id)
            .where(CollaborationApplication.applicant_id == user.id)
            .where(CollaborationApplication.status == ApplicationStatus.ACCEPTED.value)
            .order_by(Collaboration.created_at.desc())
            .execution_options(populate_existing=True)
        )
        items = [{**format_collaboration(c), "is_creator": True} for c in owned.scalars().all()]
        items += [{**format_collaboration(c), "is_creator": False} for c in joined.scalars().all()]
        return items

    async def list_applications(self, collaboration_id: UUID, user: User) -> list[dict[str, Any]]:
        collaboration = await self._get_owned(collaboration_id, user, "view applications for")
        return [format_application(a) for a in collaboration.applications]

    async def update_application_status(self, application_id: UUID, user: User, status: str) -> dict[str, Any]:
        """
        Accept or reject an application.

        Membership follows the decision, related message context and
        notification payloads are rewritten with the new status, and the
        collaboration flips between OPEN and IN_PROGRESS as it fills or frees up.
        """
        application = await self._get_application(application_id)
        collaboration = application.collaboration
        if collaboration.owner_id != user.id:
            raise forbidden("Only the collaboration owner can update application status")

        previous = application.status
        accepting = status == ApplicationStatus.ACCEPTED.value
        if accepting and previous != ApplicationStatus.ACCEPTED.value and collaboration.is_full:
            raise forbidden("This collaboration is full")

        application.status = status
        applicant = application.applicant
        if accepting:
            if applicant not in collaboration.members:
                collaboration.members.append(applicant)
        elif previous == ApplicationStatus.ACCEPTED.value and applicant in collaboration.members:
            collaboration.members.remove(applicant)

        applicant_name = _display_name(applicant)
        context_data = {
            "collaboration_id": str(collaboration.id),
            "collaboration_title": collaboration.title,
            "applicant_id": str(applicant.id),
            "applicant_name": applicant_name,
            "status": status,
        }
        messages = await self.db.execute(
            select(Message)
            .where(Message.context_type == APPLICATION_CONTEXT)
            .where(Message.context_id == str(application_id))
        )
        for message in messages.scalars().all():
            message.context_data = dict(context_data)

        notifications = await self.db.execute(
            select(Notification)
            .where(Notification.target_type == "collaboration")
            .where(Notification.target_id == str(collaboration.id))
        )
        for notification in notifications.scalars().all():
            payload = notification.payload or {}
            if payload.get("application_id") == str(application_id):
                notification.payload = {**payload, "status": status.lower()}

        if collaboration.max_members:
            accepted = collaboration.accepted_count
            if (
                accepting
                and accepted >= collaboration.max_members
                and collaboration.status == CollaborationStatus.OPEN.value
            ):
                collaboration.status = CollaborationStatus.IN_PROGRESS.value
                logger.info("Collaboration %s reached capacity", collaboration.id)
            elif (
                not accepting
                and accepted < collaboration.max_members
                and collaboration.status == CollaborationStatus.IN_PROGRESS.value
            ):
                collaboration.status = CollaborationStatus.OPEN.value
                logger.info("Collaboration %s reopened", collaboration.id)

        await self.db.commit()

        collaboration_id = collaboration.id
        applicant_id = applicant.id
        title = collaboration.title
        owner_name = _display_name(user)
        if accepting:
            note_title = "Collaboration Application Accepted"
            note_message = f"Congratulations! Your application to \"{title}\" has been accepted."
            content = (
                "**Collaboration Application Accepted!**\n\n"
                f"Congratulations! Your application to join the collaboration **\"{title}\"** "
                f"has been accepted by {owner_name}.\n\n"
                "You can now start collaborating with the team. Please check the collaboration "
                "details for next steps and contact information."
            )
        else:
            note_title = "Collaboration Application Status Update"
            note_message = f"Your application to \"{title}\" has been reviewed."
            content = (
                "**Collaboration Application Update**\n\n"
                f"Thank you for your interest in the collaboration **\"{title}\"**.\n\n"
                "After careful review, we have decided not to move forward with your application "
                "at this time. We appreciate your interest and encourage you to apply to other "
                "opportunities on the platform."
            )

        await self.notifications.notify(
            applicant_id,
            NotificationType.COLLAB_UPDATE,
            note_title,
            message=note_message,
            actor=user,
            target_type="collaboration",
            target_id=str(collaboration_id),
            link=f"/dashboard/messages?userId={user.id}",
            payload={
                "application_id": str(application_id),
                "collaboration_id": str(collaboration_id),
                "status": status.lower(),
                "conversation_user_id": str(user.id),
                "context_type": APPLICATION_STATUS_CONTEXT,
            },
        )
        await self.messages.deliver(
            user,
            applicant_id,
            content,
            context_type=APPLICATION_STATUS_CONTEXT,
            context_id=str(application_id),
            context_data={
                "collaboration_id": str(collaboration_id),
                "collaboration_title": title,
                "status": status,
            },
        )

        return format_application(await self._get_application(application_id))
