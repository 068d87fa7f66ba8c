"""Services for the Palyrenet API."""

from app.services.messages import MessageService
from app.services.notifications import NotificationService

__all__ = ["NotificationService", "MessageService"]
