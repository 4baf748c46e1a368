"""
Centralized UI messages.
All user-facing text lives here for consistency.
"""

MESSAGES = {
    # Success messages
    'reservation_created': 'Reservation {number} created',
    'reservation_updated': 'Reservation updated',
    'reservation_approved': 'Reservation {number} approved',
    'reservation_rejected': 'Reservation {number} rejected',
    'reservation_cancelled': 'Reservation {number} cancelled',
    'reservation_moved': 'Reservation dates changed',
    'rental_started': 'Vehicle handed over for reservation {number}',
    'rental_returned': 'Vehicle returned for reservation {number}',
    'payment_updated': 'Payment status updated',
    'bulk_processed': '{succeeded} of {total} reservations processed',
    'vehicle_status_updated': 'Vehicle status updated',

    # System-generated notes
    'default_approval_note': 'Approved by {approved_by}',
    'pickup_note': 'Vehicle picked up at {time}',
    'return_note': 'Vehicle returned at {time}',

    # Error messages
    'reservation_not_found': 'Reservation not found',
    'vehicle_not_found': 'Vehicle not found',
    'location_not_found': 'Location not found',
    'customer_not_found': 'Customer not found',
    'vehicle_already_booked': 'Vehicle already booked for that range',
    'concurrent_modification': 'The reservation was changed by someone else, reload and try again',
    'invalid_transition': 'Cannot change a {from_status} reservation to {to_status}',
    'not_pending': 'Only pending reservations can be {action}',
    'rejection_reason_required': 'A reason is required to reject a reservation',
    'customer_required': 'A customer or guest contact is required',
    'guest_name_required': 'Guest name is required',
    'date_required': 'The date is required',
    'invalid_date': 'Invalid date: {value}',
    'invalid_time': 'Invalid time: {value}',
    'invalid_date_range': 'The end must be after the start',
    'invalid_amount': 'The amount must be a non-negative number',
    'invalid_text': '{field} must be text',
    'invalid_status': 'Unknown reservation status: {value}',
    'invalid_payment_status': 'Unknown payment status: {value}',
    'invalid_vehicle_status': 'Unknown vehicle status: {value}',
    'payment_requires_confirmation': 'Payment can only be recorded for a confirmed reservation',
    'refund_requires_payment': 'Only a paid reservation can be refunded',
    'invalid_email': 'Invalid email format',
    'invalid_phone': 'Invalid phone format',
    'no_ids': 'No reservations selected',
    'data_required': 'Request body required',
    'field_required': '{field} is required',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
