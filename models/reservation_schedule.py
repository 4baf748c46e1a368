"""
Reservation date changes (calendar drag and drop).

The conflict check and the write run in one immediate transaction, so two
admins dropping reservations onto the same slot cannot both succeed. On
rejection nothing is written and the caller reverts its optimistic change.
"""

import logging

from flask import current_app

from database import get_db
from utils.datetime_helpers import format_minutes, get_timezone
from utils.messages import get_message
from .reservation_errors import (
    ReservationError, InvalidTransitionError, SchedulingConflictError, success_result
)
from .reservation_interval import (
    ReservationInterval, InstantLike, parse_instant, split_instant
)
from .reservation_crud import (
    execute_write, load_reservation, check_version, apply_update
)
from .reservation_conflicts import find_conflicts

logger = logging.getLogger(__name__)


def _candidate_interval(reservation, new_start: InstantLike, new_end: InstantLike):
    config = current_app.config
    tz = get_timezone()
    return ReservationInterval(
        vehicle_id=reservation.vehicle_id,
        start=parse_instant(new_start, config['DEFAULT_START_TIME'], tz),
        end=parse_instant(new_end, config['DEFAULT_END_TIME'], tz),
        reservation_id=reservation.id
    )


def _require_movable(reservation) -> None:
    if reservation.is_terminal:
        raise InvalidTransitionError(
            f'A {reservation.status} reservation cannot be rescheduled',
            reservation_id=reservation.id,
            from_status=reservation.status
        )


def move_reservation(
    reservation_id: int,
    new_start: InstantLike,
    new_end: InstantLike,
    changed_by: str = None,
    expected_version: int = None
) -> dict:
    """
    Change a reservation's date/time range.

    Steps: load, build the candidate range, check the vehicle's
    confirmed/active bookings excluding this reservation, then write the
    new range. The price is not recomputed.

    Args:
        reservation_id: Reservation ID
        new_start: New start (datetime or ISO string; aware values are
            converted to the configured timezone)
        new_end: New end
        changed_by: Username, for the log
        expected_version: Version the calendar was showing (optional)

    Returns:
        dict: {'success': True, 'reservation': {...}} or an error result;
            'scheduling_conflict' carries 'conflicts' and the message
            'Vehicle already booked for that range'
    """
    return execute_write('move_reservation', _move, reservation_id, new_start, new_end,
                         changed_by, expected_version)


def _move(cursor, reservation_id, new_start, new_end, changed_by, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)
    _require_movable(reservation)

    candidate = _candidate_interval(reservation, new_start, new_end)

    conflicts = find_conflicts(
        reservation.vehicle_id, candidate.start, candidate.end,
        exclude_reservation_id=reservation.id, cursor=cursor
    )
    if conflicts:
        raise SchedulingConflictError(get_message('vehicle_already_booked'), conflicts)

    start_date, start_time = split_instant(candidate.start)
    end_date, end_time = split_instant(candidate.end)
    updated = apply_update(cursor, reservation, {
        'start_date': start_date,
        'start_time': start_time,
        'end_date': end_date,
        'end_time': end_time,
    })

    logger.info('Reservation %s moved from %s-%s to %s-%s by %s',
                reservation.reservation_number,
                format_minutes(reservation.start_at),
                format_minutes(reservation.end_at),
                format_minutes(updated.start_at),
                format_minutes(updated.end_at),
                changed_by)
    return success_result(updated, get_message('reservation_moved'))


def check_move_availability(reservation_id: int, new_start: InstantLike,
                            new_end: InstantLike) -> dict:
    """
    Dry run of move_reservation: report conflicts without writing.
    Plain read, it never waits for the write lock.

    Returns:
        dict: {'success': True, 'available': bool, 'conflicts': [...],
               'start': ISO, 'end': ISO} or an error result
    """
    try:
        return _check_move(get_db().cursor(), reservation_id, new_start, new_end)
    except ReservationError as exc:
        logger.info('check_move_availability rejected (%s): %s', exc.code, exc.message)
        return exc.to_result()


def _check_move(cursor, reservation_id, new_start, new_end) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    _require_movable(reservation)
    candidate = _candidate_interval(reservation, new_start, new_end)
    conflicts = find_conflicts(
        reservation.vehicle_id, candidate.start, candidate.end,
        exclude_reservation_id=reservation.id, cursor=cursor
    )
    return success_result(
        available=not conflicts,
        conflicts=conflicts,
        start=format_minutes(candidate.start),
        end=format_minutes(candidate.end),
    )
