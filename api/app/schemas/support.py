"""Support team and contact form schemas."""

from pydantic import BaseModel, EmailStr, field_validator


class SupportTeamResponse(BaseModel):
    user_ids: list[str]


class SetSupportTeamRequest(BaseModel):
    user_ids: list[str] = []
    operations_password: str | None = None


class SetSupportTeamResponse(BaseModel):
    ok: bool = True
    user_ids: list[str]


class ContactRequest(BaseModel):
    name: str
    email: EmailStr
    subject: str | None = None
    message: str

    @field_validator("name", "message")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v


class Delivery(BaseModel):
    support_id: str
    message_id: str


class ContactResponse(BaseModel):
    ok: bool = True
    delivered: int
    deliveries: list[Delivery] = []
    note: str | None = None
