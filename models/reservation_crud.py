"""
Reservation CRUD operations.
Handles create, read and guarded update for reservations.
"""

import logging
import math
import sqlite3

from flask import current_app

from database import get_db, write_transaction
from utils.datetime_helpers import get_timestamp, get_timezone
from utils.messages import get_message
from utils.validators import (
    validate_email, validate_phone, validate_optional_int, sanitize_input
)
from .reservation_errors import (
    ReservationError, NotFoundError, ValidationError, ConcurrencyConflictError,
    success_result
)
from .reservation_interval import parse_instant, split_instant, validate_range
from .reservation_record import Reservation

logger = logging.getLogger(__name__)


RESERVATION_SELECT = '''
    SELECT r.*,
           v.vehicle_number, v.model AS vehicle_model,
           b.name AS brand_name,
           pl.name AS pickup_location_name,
           rl.name AS return_location_name,
           COALESCE(c.name, r.guest_name) AS customer_name
    FROM reservations r
    JOIN vehicles v ON r.vehicle_id = v.id
    LEFT JOIN vehicle_brands b ON v.brand_id = b.id
    LEFT JOIN vehicle_locations pl ON r.pickup_location_id = pl.id
    LEFT JOIN vehicle_locations rl ON r.return_location_id = rl.id
    LEFT JOIN customers c ON r.customer_id = c.id
'''

# Fields update_reservation may change; dates go through move_reservation,
# status through the state functions, total_amount is fixed at creation
UPDATABLE_FIELDS = (
    'guest_name', 'guest_phone', 'guest_email', 'notes', 'admin_notes',
    'pickup_location_id', 'return_location_id'
)


# =============================================================================
# INPUT CLEANING
# =============================================================================

def clean_text(value, field: str, max_length: int = None) -> str:
    """
    Trim a free-text value from a request.

    Raises:
        ValidationError: value is neither None nor a string
    """
    if value is not None and not isinstance(value, str):
        raise ValidationError(get_message('invalid_text', field=field))
    return sanitize_input(value, max_length)


def parse_id(value, field: str):
    """Parse an optional row ID from a request; None when missing."""
    valid, number, err = validate_optional_int(value, field)
    if not valid:
        raise ValidationError(err)
    return number


def parse_amount(value) -> float:
    """Parse a price; it must be a finite, non-negative number."""
    if isinstance(value, bool):
        raise ValidationError(get_message('invalid_amount'))
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(get_message('invalid_amount'))
    if not math.isfinite(amount) or amount < 0:
        raise ValidationError(get_message('invalid_amount'))
    return amount


# =============================================================================
# RESERVATION NUMBER GENERATION
# =============================================================================

def generate_reservation_number(start_date: str, cursor=None, max_retries: int = 5) -> str:
    """
    Generate unique reservation number.

    Format: RVYYMMDDNNN where:
    - YYMMDD = rental start date
    - NNN = sequential for that start date (001-999)

    Example: RV260610001 = first reservation starting on Jun 10, 2026

    Args:
        start_date: Rental start date (YYYY-MM-DD)
        cursor: Active transaction cursor
        max_retries: Max attempts on collision

    Returns:
        str: Unique reservation number

    Raises:
        ValidationError: If unable to generate unique number
    """
    date_prefix = 'RV' + start_date[2:4] + start_date[5:7] + start_date[8:10]

    cur = cursor or get_db().cursor()

    for attempt in range(max_retries):
        cur.execute('''
            SELECT MAX(CAST(SUBSTR(reservation_number, 9, 3) AS INTEGER)) AS max_seq
            FROM reservations
            WHERE reservation_number LIKE ?
        ''', (f'{date_prefix}%',))

        result = cur.fetchone()
        next_seq = (result['max_seq'] or 0) + 1 + attempt

        if next_seq > 999:
            raise ValidationError(f'Maximum daily reservations (999) reached for {start_date}')

        reservation_number = f'{date_prefix}{next_seq:03d}'

        cur.execute('SELECT id FROM reservations WHERE reservation_number = ?',
                    (reservation_number,))
        if not cur.fetchone():
            return reservation_number

    raise ValidationError('Could not generate a unique reservation number')


# =============================================================================
# TRANSACTION HELPERS
# =============================================================================

def execute_write(action: str, operation, *args, **kwargs) -> dict:
    """
    Run a reservation write inside one immediate transaction.

    Expected failures (ReservationError) roll back and come back as a result
    dict. Lock timeouts are reported as a concurrency conflict. Any other
    error rolls back and propagates.

    Args:
        action: Name used in log messages
        operation: Callable taking the transaction cursor first
        *args, **kwargs: Passed through to operation

    Returns:
        dict: Operation result
    """
    try:
        with write_transaction() as cursor:
            return operation(cursor, *args, **kwargs)
    except ReservationError as exc:
        logger.warning('%s rejected (%s): %s', action, exc.code, exc.message)
        return exc.to_result()
    except sqlite3.OperationalError as exc:
        if 'locked' in str(exc).lower():
            logger.warning('%s hit lock contention: %s', action, exc)
            return ConcurrencyConflictError(get_message('concurrent_modification')).to_result()
        logger.exception('%s failed', action)
        raise


def load_reservation(cursor, reservation_id: int) -> Reservation:
    """
    Load a reservation inside an open transaction.

    Raises:
        NotFoundError: If the reservation does not exist
    """
    cursor.execute(RESERVATION_SELECT + ' WHERE r.id = ?', (reservation_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(get_message('reservation_not_found'), reservation_id=reservation_id)
    return Reservation.from_row(row)


def check_version(reservation: Reservation, expected_version: int = None) -> None:
    """Raise ConcurrencyConflictError when the caller's copy is stale."""
    if expected_version is not None and int(expected_version) != reservation.version:
        raise ConcurrencyConflictError(
            get_message('concurrent_modification'),
            reservation_id=reservation.id,
            expected_version=int(expected_version),
            current_version=reservation.version
        )


def apply_update(cursor, reservation: Reservation, changes: dict) -> Reservation:
    """
    Compare-and-swap update of a reservation row.

    Writes the changes only if the row still has the version that was read,
    bumps version and updated_at, and returns the reloaded record.

    Raises:
        ConcurrencyConflictError: If the row changed since it was read
    """
    assignments = [f'{field} = ?' for field in changes]
    values = list(changes.values())

    assignments.append('version = version + 1')
    assignments.append('updated_at = ?')
    values.append(get_timestamp())
    values.extend([reservation.id, reservation.version])

    cursor.execute(
        f'UPDATE reservations SET {", ".join(assignments)} WHERE id = ? AND version = ?',
        values
    )
    if cursor.rowcount == 0:
        raise ConcurrencyConflictError(
            get_message('concurrent_modification'), reservation_id=reservation.id
        )
    return load_reservation(cursor, reservation.id)


def record_status_change(cursor, reservation_id: int, from_status, to_status: str,
                         changed_by: str = None, notes: str = '') -> None:
    """Append a row to the status history."""
    cursor.execute('''
        INSERT INTO reservation_status_history
        (reservation_id, from_status, to_status, changed_by, notes, created_at)
        VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ''', (reservation_id, from_status, to_status, changed_by, notes))


def _require_row(cursor, table: str, row_id: int, message_key: str) -> None:
    cursor.execute(f'SELECT id FROM {table} WHERE id = ?', (row_id,))
    if not cursor.fetchone():
        raise NotFoundError(get_message(message_key), id=row_id)


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    vehicle_id: int,
    start,
    end,
    customer_id: int = None,
    guest_name: str = None,
    guest_phone: str = None,
    guest_email: str = None,
    pickup_location_id: int = None,
    return_location_id: int = None,
    total_amount: float = 0.0,
    notes: str = '',
    created_by: str = None
) -> dict:
    """
    Create a pending reservation.

    Pending requests do not block each other, so no conflict check happens
    here; exclusivity is enforced when the reservation is approved.

    Args:
        vehicle_id: Vehicle to book
        start: Start date/datetime or ISO string (date-only gets DEFAULT_START_TIME)
        end: End date/datetime or ISO string (date-only gets DEFAULT_END_TIME)
        customer_id: Registered customer ID
        guest_name: Guest contact name (required without customer_id)
        guest_phone: Guest phone
        guest_email: Guest email
        pickup_location_id: Pickup location (default: vehicle's home location)
        return_location_id: Return location (default: pickup location)
        total_amount: Price, fixed for the life of the reservation
        notes: Guest notes
        created_by: Username or 'guest'

    Returns:
        dict: {'success': True, 'reservation': {...}, 'message': ...}
            or an error result
    """
    return execute_write(
        'create_reservation', _create_reservation,
        vehicle_id, start, end, customer_id, guest_name, guest_phone, guest_email,
        pickup_location_id, return_location_id, total_amount, notes, created_by
    )


def _create_reservation(cursor, vehicle_id, start, end, customer_id, guest_name,
                        guest_phone, guest_email, pickup_location_id,
                        return_location_id, total_amount, notes, created_by) -> dict:
    guest_name = clean_text(guest_name, 'guest_name', 100) or None
    guest_email = clean_text(guest_email, 'guest_email', 255) or None
    guest_phone = clean_text(guest_phone, 'guest_phone', 30) or None
    notes = clean_text(notes, 'notes')
    created_by = clean_text(created_by, 'created_by', 50) or None
    vehicle_id = parse_id(vehicle_id, 'vehicle_id')
    customer_id = parse_id(customer_id, 'customer_id')
    pickup_location_id = parse_id(pickup_location_id, 'pickup_location_id')
    return_location_id = parse_id(return_location_id, 'return_location_id')

    if not customer_id and not guest_name:
        raise ValidationError(get_message('customer_required'))
    if guest_email and not validate_email(guest_email):
        raise ValidationError(get_message('invalid_email'))
    if guest_phone and not validate_phone(guest_phone):
        raise ValidationError(get_message('invalid_phone'))
    total_amount = parse_amount(total_amount)

    config = current_app.config
    start_at = parse_instant(start, config['DEFAULT_START_TIME'], get_timezone())
    end_at = parse_instant(end, config['DEFAULT_END_TIME'], get_timezone())
    validate_range(start_at, end_at)

    cursor.execute('SELECT id, location_id FROM vehicles WHERE id = ?', (vehicle_id,))
    vehicle = cursor.fetchone()
    if not vehicle:
        raise NotFoundError(get_message('vehicle_not_found'), vehicle_id=vehicle_id)
    if customer_id:
        _require_row(cursor, 'customers', customer_id, 'customer_not_found')

    pickup_location_id = pickup_location_id or vehicle['location_id']
    return_location_id = return_location_id or pickup_location_id
    for location_id in {pickup_location_id, return_location_id} - {None}:
        _require_row(cursor, 'vehicle_locations', location_id, 'location_not_found')

    start_date, start_time = split_instant(start_at)
    end_date, end_time = split_instant(end_at)
    reservation_number = generate_reservation_number(start_date, cursor)
    now = get_timestamp()

    cursor.execute('''
        INSERT INTO reservations (
            reservation_number, vehicle_id, customer_id,
            guest_name, guest_phone, guest_email,
            start_date, end_date, start_time, end_time,
            pickup_location_id, return_location_id,
            status, payment_status, total_amount, notes,
            version, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 'pending', 'pending', ?, ?, 1, ?, ?)
    ''', (
        reservation_number, vehicle_id, customer_id,
        guest_name, guest_phone, guest_email,
        start_date, end_date, start_time, end_time,
        pickup_location_id, return_location_id,
        total_amount, notes, now, now
    ))
    reservation_id = cursor.lastrowid

    record_status_change(cursor, reservation_id, None, 'pending', created_by,
                         'Reservation requested')

    reservation = load_reservation(cursor, reservation_id)
    logger.info('Reservation %s created for vehicle %s', reservation_number, vehicle_id)
    return success_result(
        reservation, get_message('reservation_created', number=reservation_number)
    )


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: int):
    """
    Get reservation by ID with vehicle, location and customer details.

    Args:
        reservation_id: Reservation ID

    Returns:
        Reservation or None if not found
    """
    db = get_db()
    row = db.execute(RESERVATION_SELECT + ' WHERE r.id = ?', (reservation_id,)).fetchone()
    return Reservation.from_row(row) if row else None


def get_reservation_by_number(reservation_number: str):
    """
    Get reservation by reservation number.

    Args:
        reservation_number: Reservation number (RVYYMMDDNNN)

    Returns:
        Reservation or None if not found
    """
    db = get_db()
    row = db.execute(
        RESERVATION_SELECT + ' WHERE r.reservation_number = ?', (reservation_number,)
    ).fetchone()
    return Reservation.from_row(row) if row else None


# =============================================================================
# UPDATE
# =============================================================================

def update_reservation(reservation_id: int, expected_version: int = None, **fields) -> dict:
    """
    Update non-scheduling reservation fields.

    Args:
        reservation_id: Reservation ID
        expected_version: Version the caller last saw (optional CAS check)
        **fields: Fields from UPDATABLE_FIELDS

    Returns:
        dict: Operation result
    """
    return execute_write('update_reservation', _update_reservation,
                         reservation_id, expected_version, fields)


def _update_reservation(cursor, reservation_id, expected_version, fields) -> dict:
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated here: {', '.join(sorted(unknown))}")

    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)

    changes = {}
    for field, value in fields.items():
        if field.endswith('_location_id'):
            value = parse_id(value, field)
        else:
            value = clean_text(value, field) or None
        changes[field] = value

    if 'guest_email' in changes and changes['guest_email'] and not validate_email(changes['guest_email']):
        raise ValidationError(get_message('invalid_email'))
    if 'guest_phone' in changes and changes['guest_phone'] and not validate_phone(changes['guest_phone']):
        raise ValidationError(get_message('invalid_phone'))
    if 'guest_name' in changes and not changes['guest_name'] and not reservation.customer_id:
        raise ValidationError(get_message('guest_name_required'))
    for field in ('pickup_location_id', 'return_location_id'):
        if changes.get(field):
            _require_row(cursor, 'vehicle_locations', changes[field], 'location_not_found')

    if not changes:
        return success_result(reservation)

    updated = apply_update(cursor, reservation, changes)
    return success_result(updated, get_message('reservation_updated'))
