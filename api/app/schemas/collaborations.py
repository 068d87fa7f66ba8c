"""Collaboration and application schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from app.models.collaboration import CollaborationStatus
from app.schemas.common import AuthorSummary, IdStr, ORMModel, Timestamp


class CollaborationFields(BaseModel):
    """Optional descriptive fields shared by create and update."""

    institution: str | None = None
    country: str | None = None
    city: str | None = None
    is_remote: bool | None = None
    duration: str | None = None
    duration_months: int | None = Field(default=None, ge=1)
    deadline: datetime | None = None
    skills: list[str] | None = None
    disciplines: list[str] | None = None
    application_areas: list[str] | None = None
    collaboration_type: list[str] | None = None
    degree_level: list[str] | None = None
    experience_years: str | None = None
    weekly_commitment: str | None = None
    work_languages: list[str] | None = None
    has_funding: bool | None = None
    funding_types: list[str] | None = None
    methodology: list[str] | None = None
    data_availability: str | None = None
    max_members: int | None = Field(default=None, ge=1)


class CreateCollaborationRequest(CollaborationFields):
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)


class UpdateCollaborationRequest(CollaborationFields):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, min_length=1)
    status: CollaborationStatus | None = None


class CollaborationBase(ORMModel):
    id: IdStr
    owner_id: IdStr
    title: str
    description: str
    institution: str | None
    country: str | None
    city: str | None
    is_remote: bool
    duration: str | None
    duration_months: int | None
    deadline: Timestamp | None
    skills: list[str] | None
    disciplines: list[str] | None
    application_areas: list[str] | None
    collaboration_type: list[str] | None
    degree_level: list[str] | None
    experience_years: str | None
    weekly_commitment: str | None
    work_languages: list[str] | None
    has_funding: bool
    funding_types: list[str] | None
    methodology: list[str] | None
    data_availability: str | None
    max_members: int | None
    applicants_count: int
    status: str
    created_at: Timestamp
    updated_at: Timestamp


class CollaborationResponse(CollaborationBase):
    owner: AuthorSummary | None
    applications_count: int
    accepted_count: int
    is_full: bool


class CollaborationDetailResponse(CollaborationResponse):
    accepted_members: list[AuthorSummary]
    has_applied: bool
    application_status: str | None


class MyCollaborationResponse(CollaborationResponse):
    is_creator: bool


class CreateApplicationRequest(BaseModel):
    """Application to join a collaboration."""

    full_name: str = Field(min_length=1)
    institution: str = Field(min_length=1)
    email: EmailStr
    field: str = Field(min_length=1)
    cover_message: str = Field(min_length=1)
    attachment: str | None = None
    message: str | None = None
    motivation: str | None = None
    skills: list[str] | None = None


class UpdateApplicationStatusRequest(BaseModel):
    status: Literal["ACCEPTED", "REJECTED"]


class ApplicationResponse(ORMModel):
    id: IdStr
    collaboration_id: IdStr
    applicant_id: IdStr
    full_name: str | None
    institution: str | None
    email: str | None
    field: str | None
    cover_letter: str | None
    attachment: str | None
    message: str | None
    motivation: str | None
    skills: list[str] | None
    status: str
    created_at: Timestamp
    updated_at: Timestamp


class ApplicationWithApplicant(ApplicationResponse):
    applicant: AuthorSummary | None


class ApplicationWithCollaboration(ApplicationResponse):
    collaboration: CollaborationResponse
