from datetime import datetime
from zoneinfo import ZoneInfo

import pytz

from src.main.config import config

LOCAL_TZ = pytz.timezone(str(config.app.LOCAL_TIMEZONE))
HUMAN_DATETIME_FORMAT = "%H:%M, %d.%m.%Y"


def get_utc_now() -> datetime:
    """
    Current time as an offset-aware datetime in UTC.
    """
    return datetime.now(ZoneInfo("UTC"))


def to_local_time(value: datetime) -> datetime:
    """
    Convert an aware datetime to the configured local timezone. Naive values
    are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    return value.astimezone(LOCAL_TZ)


def format_local_time(value: datetime) -> str:
    """Render a moment for humans, e.g. in emails: ``15:04, 02.01.2006``."""
    return to_local_time(value).strftime(HUMAN_DATETIME_FORMAT)
