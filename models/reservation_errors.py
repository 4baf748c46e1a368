"""
Reservation error kinds and result helpers.

Expected failures are raised internally as ReservationError subclasses and
turned into result dicts at the public operation boundary:

    {'success': False, 'error': 'scheduling_conflict', 'message': '...', 'conflicts': [...]}

Anything that is not a ReservationError (store unreachable, SQL errors)
propagates to the caller.
"""


class ReservationError(Exception):
    """Base class for expected reservation failures."""

    code = 'reservation_error'

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_result(self) -> dict:
        """Result dict for this error."""
        result = {'success': False, 'error': self.code, 'message': self.message}
        result.update(self.details)
        return result


class NotFoundError(ReservationError):
    """Referenced reservation, vehicle or location does not exist."""

    code = 'not_found'


class InvalidTransitionError(ReservationError):
    """Requested status change is not legal from the current status."""

    code = 'invalid_transition'


class ValidationError(ReservationError):
    """Missing or malformed input (empty rejection reason, inverted range...)."""

    code = 'validation_error'


class MalformedRecordError(ValidationError):
    """A stored row could not be mapped to a Reservation."""


class SchedulingConflictError(ReservationError):
    """The vehicle is already booked (confirmed/active) for an overlapping range."""

    code = 'scheduling_conflict'

    def __init__(self, message: str, conflicts: list = None):
        super().__init__(message, conflicts=conflicts or [])
        self.conflicts = conflicts or []


class ConcurrencyConflictError(ReservationError):
    """The row changed between read and write; retry the whole operation."""

    code = 'concurrency_conflict'


def success_result(reservation=None, message: str = None, **extra) -> dict:
    """
    Build a success result dict.

    Args:
        reservation: Reservation record (serialized with to_dict) or dict
        message: Optional user-facing message
        **extra: Additional fields

    Returns:
        dict: {'success': True, 'reservation': {...}, ...}
    """
    result = {'success': True}
    if reservation is not None:
        result['reservation'] = reservation.to_dict() if hasattr(reservation, 'to_dict') else reservation
    if message:
        result['message'] = message
    result.update(extra)
    return result
