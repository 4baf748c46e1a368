"""
Vehicle booking conflict detection.

Only confirmed and active reservations hold a vehicle. Pending requests may
overlap freely; they are checked against the exclusive set when approved.
"""

from datetime import timedelta

from flask import current_app

from database import get_db
from utils.datetime_helpers import format_minutes, get_timezone
from .reservation_interval import (
    ReservationInterval, InstantLike, combine, overlaps, parse_instant, validate_range
)
from .reservation_record import Reservation, EXCLUSIVE_STATUSES
from .reservation_crud import RESERVATION_SELECT


def find_conflicts(
    vehicle_id: int,
    start: InstantLike,
    end: InstantLike,
    exclude_reservation_id: int = None,
    cursor=None
) -> list:
    """
    Get confirmed/active reservations of a vehicle that overlap a range.

    Args:
        vehicle_id: Vehicle ID
        start: Range start (datetime, date or ISO string)
        end: Range end (datetime, date or ISO string)
        exclude_reservation_id: Reservation to ignore (the one being moved/approved)
        cursor: Open transaction cursor, so the check and the write share it

    Returns:
        list: Conflicting reservations as dicts (id, reservation_number,
            customer_name, start, end, status), ordered by start

    Raises:
        ValidationError: If the range is malformed or not start < end
    """
    config = current_app.config
    candidate = ReservationInterval(
        vehicle_id=vehicle_id,
        start=parse_instant(start, config['DEFAULT_START_TIME'], get_timezone()),
        end=parse_instant(end, config['DEFAULT_END_TIME'], get_timezone()),
    )

    cur = cursor or get_db().cursor()

    # Date-level prefilter; the exact instant comparison happens below
    placeholders = ','.join('?' * len(EXCLUSIVE_STATUSES))
    query = RESERVATION_SELECT + f'''
        WHERE r.vehicle_id = ?
          AND r.status IN ({placeholders})
          AND r.start_date <= ?
          AND r.end_date >= ?
    '''
    params = [vehicle_id, *EXCLUSIVE_STATUSES,
              candidate.end.date().isoformat(), candidate.start.date().isoformat()]

    if exclude_reservation_id:
        query += ' AND r.id != ?'
        params.append(exclude_reservation_id)

    query += ' ORDER BY r.start_date, r.start_time, r.id'

    cur.execute(query, params)

    conflicts = []
    for row in cur.fetchall():
        existing = Reservation.from_row(row)
        if overlaps(candidate, existing.interval):
            conflicts.append({
                'id': existing.id,
                'reservation_number': existing.reservation_number,
                'customer_name': existing.customer_name,
                'start': format_minutes(existing.start_at),
                'end': format_minutes(existing.end_at),
                'status': existing.status,
            })
    return conflicts


def has_conflict(
    vehicle_id: int,
    start: InstantLike,
    end: InstantLike,
    exclude_reservation_id: int = None,
    cursor=None
) -> bool:
    """
    Check whether a vehicle is already booked for an overlapping range.

    An unknown vehicle has nothing to conflict with and returns False;
    callers validate vehicle existence separately.

    Args:
        vehicle_id: Vehicle ID
        start: Range start
        end: Range end
        exclude_reservation_id: Reservation to ignore
        cursor: Open transaction cursor (optional)

    Returns:
        bool: True if at least one confirmed/active reservation overlaps
    """
    return len(find_conflicts(vehicle_id, start, end, exclude_reservation_id, cursor)) > 0


def get_vehicle_bookings(vehicle_id: int, date_from: str, date_to: str) -> list:
    """
    Get the exclusive bookings of a vehicle touching a date range.

    Useful for showing what is blocking a vehicle before a drop.

    Args:
        vehicle_id: Vehicle ID
        date_from: First day (YYYY-MM-DD)
        date_to: Last day (YYYY-MM-DD)

    Returns:
        list: Reservation dicts ordered by start
    """
    start = combine(date_from, '00:00')
    end = combine(date_to, '00:00') + timedelta(days=1)
    validate_range(start, end)
    return find_conflicts(vehicle_id, start, end)
