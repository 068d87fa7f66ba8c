"""Rate limiting for credential endpoints using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

# Keyed by client IP; only register and login are decorated
limiter = Limiter(key_func=get_remote_address)

REGISTER_LIMIT = settings.register_rate_limit
LOGIN_LIMIT = settings.login_rate_limit


def reset_limiter() -> None:
    """Reset the limiter storage. Used in tests to clear rate limit state."""
    if hasattr(limiter, "_limiter") and limiter._limiter:
        storage = limiter._limiter.storage
        if hasattr(storage, "storage"):
            storage.storage.clear()
        else:
            storage.reset()
