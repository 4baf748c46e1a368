"""
Reservation state management functions.
Handles approval, rejection, pickup, return, cancellation, payment status,
history and status colors.

    pending --approve--> confirmed --start_rental--> active --return--> completed
       |                     |                          |
       +-------reject/cancel-+----------cancel----------+--> cancelled
"""

import copy
import logging

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_now
from utils.messages import get_message
from .reservation_errors import (
    InvalidTransitionError, ValidationError, SchedulingConflictError, success_result
)
from .reservation_record import PAYMENT_STATUSES, RESERVATION_STATUSES
from .reservation_crud import (
    execute_write, load_reservation, check_version, apply_update, record_status_change,
    clean_text
)
from .reservation_conflicts import find_conflicts
from .vehicle import set_vehicle_status

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

VALID_TRANSITIONS = {
    'pending': {'confirmed', 'cancelled'},
    'confirmed': {'active', 'cancelled'},
    'active': {'completed', 'cancelled'},
    'completed': set(),
    'cancelled': set(),
}

STATUS_COLORS = {
    'pending': '#f59e0b',
    'confirmed': '#3b82f6',
    'active': '#10b981',
    'completed': '#6b7280',
    'cancelled': '#ef4444',
}

DEFAULT_STATUS_COLOR = '#6b7280'

# Payment states reachable only once the reservation is confirmed
PAID_ALLOWED_STATUSES = ('confirmed', 'active', 'completed')


# =============================================================================
# TRANSITION RULES
# =============================================================================

def get_valid_transitions() -> dict:
    """Return a copy of the transition matrix."""
    return copy.deepcopy(VALID_TRANSITIONS)


def get_allowed_transitions(status: str) -> set:
    """
    Get the statuses reachable from a status.

    Args:
        status: Current status

    Returns:
        set: Allowed target statuses (empty for terminal or unknown statuses)
    """
    return set(VALID_TRANSITIONS.get(status, set()))


def validate_state_transition(from_status: str, to_status: str) -> None:
    """
    Validate a status change against the transition matrix.

    Raises:
        ValidationError: If to_status is not a known status
        InvalidTransitionError: If the change is not allowed
    """
    if to_status not in RESERVATION_STATUSES:
        raise ValidationError(get_message('invalid_status', value=to_status))
    if to_status not in VALID_TRANSITIONS.get(from_status, set()):
        allowed = ', '.join(sorted(get_allowed_transitions(from_status))) or 'none'
        raise InvalidTransitionError(
            get_message('invalid_transition', from_status=from_status, to_status=to_status),
            from_status=from_status,
            to_status=to_status,
            allowed=allowed
        )


def get_status_color(status: str) -> str:
    """Get display color for a reservation status."""
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def _transition(cursor, reservation, to_status: str, changed_by: str,
                notes: str = '', changes: dict = None):
    """Validate, write and record a status change inside an open transaction."""
    validate_state_transition(reservation.status, to_status)
    fields = dict(changes or {})
    fields['status'] = to_status
    updated = apply_update(cursor, reservation, fields)
    record_status_change(cursor, reservation.id, reservation.status, to_status, changed_by, notes)
    logger.info('Reservation %s: %s -> %s by %s',
                reservation.reservation_number, reservation.status, to_status, changed_by)
    return updated


def _require_pending(reservation, action: str) -> None:
    if reservation.status != 'pending':
        raise InvalidTransitionError(
            get_message('not_pending', action=action),
            reservation_id=reservation.id,
            from_status=reservation.status
        )


# =============================================================================
# APPROVAL
# =============================================================================

def approve_reservation(reservation_id: int, approved_by: str, admin_notes: str = None,
                        expected_version: int = None) -> dict:
    """
    Approve a pending reservation (pending -> confirmed).

    The vehicle's availability is re-checked inside the same write
    transaction, since other requests may have been confirmed after this one
    was made.

    Args:
        reservation_id: Reservation ID
        approved_by: Admin username
        admin_notes: Optional note (a system note is generated when empty)
        expected_version: Version the admin was looking at (optional)

    Returns:
        dict: Operation result; 'scheduling_conflict' carries 'conflicts'
    """
    return execute_write('approve_reservation', _approve,
                         reservation_id, approved_by, admin_notes, expected_version)


def _approve(cursor, reservation_id, approved_by, admin_notes, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)
    _require_pending(reservation, 'approved')

    conflicts = find_conflicts(
        reservation.vehicle_id, reservation.start_at, reservation.end_at,
        exclude_reservation_id=reservation.id, cursor=cursor
    )
    if conflicts:
        raise SchedulingConflictError(get_message('vehicle_already_booked'), conflicts)

    note = clean_text(admin_notes, 'admin_notes') or get_message('default_approval_note',
                                                      approved_by=approved_by)
    updated = _transition(cursor, reservation, 'confirmed', approved_by, note, {
        'approved_by': approved_by,
        'approved_at': get_now().isoformat(timespec='seconds'),
        'admin_notes': note,
    })
    return success_result(
        updated, get_message('reservation_approved', number=updated.reservation_number)
    )


def reject_reservation(reservation_id: int, approved_by: str, admin_notes: str,
                       expected_version: int = None) -> dict:
    """
    Reject a pending reservation (pending -> cancelled).

    Args:
        reservation_id: Reservation ID
        approved_by: Admin username
        admin_notes: Rejection reason (required, non-empty)
        expected_version: Version the admin was looking at (optional)

    Returns:
        dict: Operation result
    """
    return execute_write('reject_reservation', _reject,
                         reservation_id, approved_by, admin_notes, expected_version)


def _reject(cursor, reservation_id, approved_by, admin_notes, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)
    _require_pending(reservation, 'rejected')

    reason = clean_text(admin_notes, 'admin_notes')
    if not reason:
        raise ValidationError(get_message('rejection_reason_required'))

    updated = _transition(cursor, reservation, 'cancelled', approved_by, reason, {
        'approved_by': approved_by,
        'approved_at': get_now().isoformat(timespec='seconds'),
        'admin_notes': reason,
    })
    return success_result(
        updated, get_message('reservation_rejected', number=updated.reservation_number)
    )


def _bulk(operation, reservation_ids: list, *args) -> dict:
    """Apply a single-reservation operation to each ID in its own transaction."""
    if not reservation_ids:
        return ValidationError(get_message('no_ids')).to_result()

    results = []
    for reservation_id in reservation_ids:
        result = operation(reservation_id, *args)
        entry = {'id': reservation_id, 'success': result['success']}
        if not result['success']:
            entry['error'] = result['error']
            entry['message'] = result['message']
        results.append(entry)

    succeeded = sum(1 for entry in results if entry['success'])
    return {
        'success': True,
        'results': results,
        'succeeded': succeeded,
        'failed': len(results) - succeeded,
        'message': get_message('bulk_processed', succeeded=succeeded, total=len(results)),
    }


def bulk_approve_reservations(reservation_ids: list, approved_by: str,
                              admin_notes: str = None) -> dict:
    """
    Approve several pending reservations.

    Each ID is approved independently; a failure on one never rolls back or
    blocks the others.

    Returns:
        dict: {'success': True, 'results': [{'id', 'success', 'error'?, 'message'?}],
               'succeeded': int, 'failed': int}
    """
    return _bulk(approve_reservation, reservation_ids, approved_by, admin_notes)


def bulk_reject_reservations(reservation_ids: list, approved_by: str, admin_notes: str) -> dict:
    """
    Reject several pending reservations with the same reason.

    Returns:
        dict: Same shape as bulk_approve_reservations
    """
    try:
        reason = clean_text(admin_notes, 'admin_notes')
    except ValidationError as exc:
        return exc.to_result()
    if not reason:
        return ValidationError(get_message('rejection_reason_required')).to_result()
    return _bulk(reject_reservation, reservation_ids, approved_by, admin_notes)


# =============================================================================
# HANDOVER
# =============================================================================

def start_rental(reservation_id: int, changed_by: str, actual_pickup_time: str = None,
                 start_mileage: int = None, pickup_notes: str = None,
                 expected_version: int = None) -> dict:
    """
    Hand the vehicle over to the customer (confirmed -> active).

    Args:
        reservation_id: Reservation ID
        changed_by: Admin username
        actual_pickup_time: When the customer took the car (default: now)
        start_mileage: Odometer at pickup (km)
        pickup_notes: Free-form notes
        expected_version: Version the admin was looking at (optional)

    Returns:
        dict: Operation result
    """
    return execute_write('start_rental', _start_rental, reservation_id, changed_by,
                         actual_pickup_time, start_mileage, pickup_notes, expected_version)


def _start_rental(cursor, reservation_id, changed_by, actual_pickup_time, start_mileage,
                  pickup_notes, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)

    pickup_time = (clean_text(actual_pickup_time, 'actual_pickup_time')
                   or get_now().isoformat(timespec='minutes'))
    mileage = _parse_mileage(start_mileage)
    updated = _transition(
        cursor, reservation, 'active', changed_by,
        get_message('pickup_note', time=pickup_time),
        {
            'actual_pickup_time': pickup_time,
            'start_mileage': mileage,
            'pickup_notes': clean_text(pickup_notes, 'pickup_notes') or None,
        }
    )

    if current_app.config.get('SYNC_VEHICLE_STATUS_ON_HANDOVER'):
        set_vehicle_status(cursor, reservation.vehicle_id, 'rented')

    return success_result(updated, get_message('rental_started', number=updated.reservation_number))


def process_return(reservation_id: int, changed_by: str, actual_return_time: str = None,
                   condition: str = None, mileage: int = None, return_notes: str = None,
                   expected_version: int = None) -> dict:
    """
    Take the vehicle back (active -> completed).

    Args:
        reservation_id: Reservation ID
        changed_by: Admin username
        actual_return_time: When the car came back (default: now)
        condition: Vehicle condition on return
        mileage: Odometer at return (km)
        return_notes: Free-form notes
        expected_version: Version the admin was looking at (optional)

    Returns:
        dict: Operation result
    """
    return execute_write('process_return', _process_return, reservation_id, changed_by,
                         actual_return_time, condition, mileage, return_notes, expected_version)


def _process_return(cursor, reservation_id, changed_by, actual_return_time, condition,
                    mileage, return_notes, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)

    return_mileage = _parse_mileage(mileage)
    if (return_mileage is not None and reservation.start_mileage is not None
            and return_mileage < reservation.start_mileage):
        raise ValidationError('Return mileage cannot be lower than pickup mileage')

    return_time = (clean_text(actual_return_time, 'actual_return_time')
                   or get_now().isoformat(timespec='minutes'))
    updated = _transition(
        cursor, reservation, 'completed', changed_by,
        get_message('return_note', time=return_time),
        {
            'actual_return_time': return_time,
            'return_condition': clean_text(condition, 'condition') or None,
            'return_mileage': return_mileage,
            'return_notes': clean_text(return_notes, 'return_notes') or None,
        }
    )

    if current_app.config.get('SYNC_VEHICLE_STATUS_ON_HANDOVER'):
        set_vehicle_status(cursor, reservation.vehicle_id, 'available')

    return success_result(updated, get_message('rental_returned', number=updated.reservation_number))


def _parse_mileage(value):
    if value in (None, ''):
        return None
    try:
        mileage = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid mileage: {value}')
    if mileage < 0:
        raise ValidationError(f'Invalid mileage: {value}')
    return mileage


# =============================================================================
# CANCELLATION & PAYMENT
# =============================================================================

def cancel_reservation(reservation_id: int, changed_by: str, notes: str = '',
                       expected_version: int = None) -> dict:
    """
    Cancel a reservation from any non-terminal status.

    Args:
        reservation_id: Reservation ID
        changed_by: Username
        notes: Optional reason
        expected_version: Version the caller was looking at (optional)

    Returns:
        dict: Operation result
    """
    return execute_write('cancel_reservation', _cancel,
                         reservation_id, changed_by, notes, expected_version)


def _cancel(cursor, reservation_id, changed_by, notes, expected_version) -> dict:
    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)
    updated = _transition(cursor, reservation, 'cancelled', changed_by, clean_text(notes, 'notes'))
    return success_result(
        updated, get_message('reservation_cancelled', number=updated.reservation_number)
    )


def update_payment_status(reservation_id: int, payment_status: str, changed_by: str = None,
                          expected_version: int = None) -> dict:
    """
    Change the payment status of a reservation.

    'paid' requires a confirmed, active or completed reservation;
    'refunded' requires a paid one.

    Returns:
        dict: Operation result
    """
    return execute_write('update_payment_status', _update_payment,
                         reservation_id, payment_status, changed_by, expected_version)


def _update_payment(cursor, reservation_id, payment_status, changed_by, expected_version) -> dict:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(get_message('invalid_payment_status', value=payment_status))

    reservation = load_reservation(cursor, reservation_id)
    check_version(reservation, expected_version)

    if payment_status == reservation.payment_status:
        return success_result(reservation)
    if payment_status == 'paid' and reservation.status not in PAID_ALLOWED_STATUSES:
        raise InvalidTransitionError(get_message('payment_requires_confirmation'),
                                     from_status=reservation.status)
    if payment_status == 'refunded' and reservation.payment_status != 'paid':
        raise InvalidTransitionError(get_message('refund_requires_payment'),
                                     from_status=reservation.payment_status)

    updated = apply_update(cursor, reservation, {'payment_status': payment_status})
    logger.info('Reservation %s payment %s -> %s by %s', reservation.reservation_number,
                reservation.payment_status, payment_status, changed_by)
    return success_result(updated, get_message('payment_updated'))


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(reservation_id: int) -> list:
    """
    Get state change history for reservation.

    Args:
        reservation_id: Reservation ID

    Returns:
        list: History entries ordered by date desc
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY created_at DESC, id DESC
    ''', (reservation_id,))
    return [dict(r) for r in cursor.fetchall()]
