from fastapi import Header

from studio_scheduler.config import settings
from studio_scheduler.services.notification_service import LoggingDispatcher, NotificationDispatcher
from studio_scheduler.utils.security import verify_admin_key


async def admin_caller(x_admin_key: str | None = Header(default=None)) -> bool:
    """True when the request carries the configured admin key; anyone else is crew."""
    if not x_admin_key:
        return False
    return verify_admin_key(settings.admin_key_hash, x_admin_key)


def get_dispatcher() -> NotificationDispatcher:
    return LoggingDispatcher()
