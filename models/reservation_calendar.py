"""
Calendar projection.

Maps reservations intersecting a date window to display events for the
admin calendar. Read-only.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Tuple

from flask import current_app

from database import get_db
from utils.datetime_helpers import format_minutes
from .reservation_interval import combine, validate_range
from .reservation_record import Reservation, RESERVATION_STATUSES
from .reservation_errors import ValidationError
from .reservation_crud import RESERVATION_SELECT
from .reservation_state import get_status_color

EVENT_TEXT_COLOR = '#ffffff'


def _default_statuses() -> tuple:
    try:
        return tuple(current_app.config['CALENDAR_DEFAULT_STATUSES'])
    except (RuntimeError, KeyError):
        return ('pending', 'confirmed', 'active')


@dataclass
class CalendarFilter:
    """
    Calendar filter options.

    Attributes:
        location_id: Only vehicles whose home location matches
        vehicle_id: Only this vehicle
        statuses: Statuses to show (completed/cancelled hidden by default)
    """

    location_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    statuses: Tuple[str, ...] = field(default_factory=_default_statuses)

    def __post_init__(self):
        self.statuses = tuple(self.statuses or ())
        unknown = [s for s in self.statuses if s not in RESERVATION_STATUSES]
        if unknown:
            raise ValidationError(f"Unknown reservation status: {', '.join(unknown)}")


def project(date_window, filters: CalendarFilter = None) -> list:
    """
    Build display events for reservations intersecting a date window.

    Args:
        date_window: (first_day, last_day) as dates or YYYY-MM-DD strings,
            both inclusive
        filters: CalendarFilter (default: pending/confirmed/active, all vehicles)

    Returns:
        list: Event dicts (id, title, start, end, status, background_color,
            border_color, text_color, vehicle_info, customer_info,
            total_amount, extended_props) ordered by (start, id)

    Raises:
        ValidationError: If the window is malformed or inverted
    """
    filters = filters or CalendarFilter()
    date_from, date_to = date_window
    window_start = combine(date_from, '00:00')
    window_end = combine(date_to, '00:00') + timedelta(days=1)
    validate_range(window_start, window_end)

    if not filters.statuses:
        return []

    placeholders = ','.join('?' * len(filters.statuses))
    query = RESERVATION_SELECT + f'''
        WHERE r.status IN ({placeholders})
          AND r.start_date <= ?
          AND r.end_date >= ?
    '''
    params = [*filters.statuses, window_end.date().isoformat(), window_start.date().isoformat()]

    if filters.location_id:
        query += ' AND v.location_id = ?'
        params.append(filters.location_id)

    if filters.vehicle_id:
        query += ' AND r.vehicle_id = ?'
        params.append(filters.vehicle_id)

    db = get_db()
    cursor = db.cursor()
    cursor.execute(query, params)

    reservations = []
    for row in cursor.fetchall():
        reservation = Reservation.from_row(row)
        # Half-open intersection with the window
        if reservation.start_at < window_end and window_start < reservation.end_at:
            reservations.append(reservation)

    reservations.sort(key=lambda r: (r.start_at, r.id))
    return [to_display_event(r) for r in reservations]


def to_display_event(reservation: Reservation) -> dict:
    """Map a reservation to a calendar event dict."""
    color = get_status_color(reservation.status)
    vehicle_info = ' '.join(
        part for part in (reservation.brand_name, reservation.vehicle_model) if part
    )
    return {
        'id': reservation.id,
        'title': reservation.customer_name or '',
        'start': format_minutes(reservation.start_at),
        'end': format_minutes(reservation.end_at),
        'status': reservation.status,
        'background_color': color,
        'border_color': color,
        'text_color': EVENT_TEXT_COLOR,
        'vehicle_info': vehicle_info,
        'customer_info': reservation.customer_name or '',
        'total_amount': reservation.total_amount,
        'version': reservation.version,
        'extended_props': {
            'reservation_number': reservation.reservation_number,
            'vehicle_number': reservation.vehicle_number,
            'pickup_location': reservation.pickup_location_name,
            'return_location': reservation.return_location_name,
            'total_amount': reservation.total_amount,
            'status': reservation.status,
        },
    }
