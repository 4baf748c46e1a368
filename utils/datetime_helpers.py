"""Timezone-aware date/time helpers and the instant formats used by the API."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Asia/Seoul')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def get_timestamp() -> str:
    """Current time as an ISO string with microseconds, for created_at/updated_at."""
    return get_now().isoformat(timespec='microseconds')


def format_minutes(value: datetime) -> str:
    """Format a naive local instant as YYYY-MM-DDTHH:MM."""
    return value.isoformat(timespec='minutes')
