"""Hashed admin secrets keyed by name."""

from sqlalchemy import Column, DateTime, String, Text, func

from app.database import Base
from app.models.types import utcnow

OPERATIONS_PASSWORD_KEY = "operations_password"


class AdminSecret(Base):
    __tablename__ = "admin_secrets"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())
