"""
Reservation interval model.

A reservation occupies one vehicle over a half-open span [start, end) built
from its date and time fields. Two spans collide only when they share the
vehicle and start < other.end and other.start < end, so a booking that ends
exactly when the next one starts is not an overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Optional, Union

from .reservation_errors import ValidationError
from utils.datetime_helpers import format_minutes
from utils.messages import get_message

InstantLike = Union[str, date, datetime]


@dataclass(frozen=True)
class ReservationInterval:
    """Occupied span of one vehicle. Naive local datetimes, start < end."""

    vehicle_id: int
    start: datetime
    end: datetime
    reservation_id: Optional[int] = None

    def __post_init__(self):
        validate_range(self.start, self.end)

    def overlaps(self, other: 'ReservationInterval') -> bool:
        return overlaps(self, other)


def overlaps(a: ReservationInterval, b: ReservationInterval) -> bool:
    """
    Check whether two intervals collide.

    Args:
        a: First interval
        b: Second interval

    Returns:
        bool: True iff same vehicle and the spans intersect
    """
    if a.vehicle_id != b.vehicle_id:
        return False
    return a.start < b.end and b.start < a.end


def validate_range(start: datetime, end: datetime) -> None:
    """Raise ValidationError unless start is strictly before end."""
    if start >= end:
        raise ValidationError(
            get_message('invalid_date_range'),
            start=format_minutes(start),
            end=format_minutes(end)
        )


def parse_time(value: str) -> time:
    """Parse an HH:MM (or HH:MM:SS) time string."""
    try:
        return time.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(get_message('invalid_time', value=value))


def parse_date(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD date; datetimes are reduced to their date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(get_message('invalid_date', value=value))


def combine(day: Union[str, date], at: Union[str, time]) -> datetime:
    """Build the instant for a date field and a time field."""
    if not isinstance(at, time):
        at = parse_time(at)
    return datetime.combine(parse_date(day), at.replace(tzinfo=None))


def parse_instant(value: InstantLike, default_time: str, tz: tzinfo = None) -> datetime:
    """
    Turn a calendar input into a naive local instant.

    Accepts datetimes, dates and ISO strings ('2026-06-10', '2026-06-10T14:00',
    '2026-06-10T05:00:00.000Z'). Bare dates get default_time. Aware values are
    converted to tz (when given) before the offset is dropped.

    Args:
        value: Date/datetime or ISO string
        default_time: HH:MM applied to date-only values
        tz: Local timezone for aware inputs

    Returns:
        datetime: Naive local datetime
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        return combine(value, default_time)
    elif isinstance(value, str) and len(value.strip()) == 10:
        return combine(value.strip(), default_time)
    else:
        try:
            instant = datetime.fromisoformat(value.strip())
        except (AttributeError, TypeError, ValueError):
            raise ValidationError(get_message('invalid_date', value=value))

    if instant.tzinfo is not None:
        if tz is not None:
            instant = instant.astimezone(tz)
        instant = instant.replace(tzinfo=None)
    return instant.replace(second=0, microsecond=0)


def split_instant(instant: datetime) -> tuple:
    """Split an instant into (YYYY-MM-DD, HH:MM) storage fields."""
    return instant.date().isoformat(), instant.strftime('%H:%M')
