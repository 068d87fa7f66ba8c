"""User-related Pydantic schemas."""

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.common import IdStr, ORMModel, Timestamp


class CustomLink(BaseModel):
    name: str
    url: str


class UserPublicResponse(ORMModel):
    """Public user profile response."""

    id: IdStr
    username: str
    full_name: str | None
    avatar_url: str | None
    cover_url: str | None
    bio: str | None
    role: str
    major: str | None
    university: str | None
    country: str | None
    city: str | None
    academic_position: str | None
    highest_degree: str | None
    fields_of_study: list[str] | None
    skills: list[str] | None
    keywords: list[str] | None
    preferred_languages: list[str] | None
    website: str | None
    linkedin: str | None
    orcid: str | None
    google_scholar: str | None
    research_gate: str | None
    github: str | None
    custom_links: list[dict] | None
    is_verified: bool
    created_at: Timestamp
    # Note: email and phone are NOT included - they're private


class UserPrivateResponse(UserPublicResponse):
    """The caller's own profile, including contact details and moderation state."""

    email: str
    phone: str | None
    is_suspended: bool
    suspended_until: Timestamp | None
    is_banned: bool
    updated_at: Timestamp


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    username: str | None = None
    email: EmailStr | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None
    bio: str | None = None
    major: str | None = None
    university: str | None = None
    country: str | None = None
    city: str | None = None
    academic_position: str | None = None
    highest_degree: str | None = None
    fields_of_study: list[str] | None = None
    skills: list[str] | None = None
    keywords: list[str] | None = None
    preferred_languages: list[str] | None = None
    phone: str | None = None
    website: str | None = None
    linkedin: str | None = None
    orcid: str | None = None
    google_scholar: str | None = None
    research_gate: str | None = None
    github: str | None = None
    custom_links: list[CustomLink] | None = None

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 2000:
            raise ValueError("Bio must be 2000 characters or less")
        return v


class UserSearchItem(ORMModel):
    id: IdStr
    username: str
    full_name: str | None
    avatar_url: str | None
    role: str
    university: str | None
    major: str | None
