"""
Business-day clock - "today" in the studio's timezone
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from .config import settings

logger = logging.getLogger(__name__)


def local_today() -> date:
    """Calendar date used for invoice numbering and issue dates"""
    try:
        tz = ZoneInfo(settings.TIMEZONE)
    except ZoneInfoNotFoundError:
        logger.warning(f"Unknown timezone {settings.TIMEZONE!r}, falling back to UTC")
        tz = ZoneInfo("UTC")
    return datetime.now(tz).date()
