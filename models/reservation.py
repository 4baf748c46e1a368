"""
Reservation data access functions.
Handles reservation CRUD, conflict detection, state management, date moves,
calendar projection and list queries.

This module re-exports all functions from the split modules:
- reservation_crud.py: Create, read and update operations
- reservation_conflicts.py: Vehicle booking conflict detection
- reservation_state.py: Approval, handover, cancellation and payment
- reservation_schedule.py: Date changes from the calendar
- reservation_calendar.py: Calendar display events
- reservation_queries.py: Listing, filtering and pagination
- reservation_stats.py: Dashboard statistics
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# Errors and records
from .reservation_errors import (
    ReservationError,
    NotFoundError,
    InvalidTransitionError,
    ValidationError,
    MalformedRecordError,
    SchedulingConflictError,
    ConcurrencyConflictError,
)
from .reservation_interval import ReservationInterval, overlaps
from .reservation_record import (
    Reservation,
    RESERVATION_STATUSES,
    PAYMENT_STATUSES,
    EXCLUSIVE_STATUSES,
)

# CRUD operations
from .reservation_crud import (
    UPDATABLE_FIELDS,
    generate_reservation_number,
    create_reservation,
    get_reservation_by_id,
    get_reservation_by_number,
    update_reservation,
)

# Conflict detection
from .reservation_conflicts import (
    find_conflicts,
    has_conflict,
    get_vehicle_bookings,
)

# State management
from .reservation_state import (
    VALID_TRANSITIONS,
    STATUS_COLORS,
    get_valid_transitions,
    get_allowed_transitions,
    validate_state_transition,
    get_status_color,
    approve_reservation,
    reject_reservation,
    bulk_approve_reservations,
    bulk_reject_reservations,
    start_rental,
    process_return,
    cancel_reservation,
    update_payment_status,
    get_status_history,
)

# Scheduling
from .reservation_schedule import (
    move_reservation,
    check_move_availability,
)

# Calendar
from .reservation_calendar import CalendarFilter, project

# Queries and statistics
from .reservation_queries import (
    ReservationQuery,
    get_reservations,
    get_pending_reservations,
    get_recent_reservations,
)
from .reservation_stats import get_reservation_stats, get_location_stats

# =============================================================================
# PUBLIC API
# =============================================================================

__all__ = [
    # Errors
    'ReservationError',
    'NotFoundError',
    'InvalidTransitionError',
    'ValidationError',
    'MalformedRecordError',
    'SchedulingConflictError',
    'ConcurrencyConflictError',

    # Records
    'ReservationInterval',
    'overlaps',
    'Reservation',
    'RESERVATION_STATUSES',
    'PAYMENT_STATUSES',
    'EXCLUSIVE_STATUSES',

    # CRUD
    'UPDATABLE_FIELDS',
    'generate_reservation_number',
    'create_reservation',
    'get_reservation_by_id',
    'get_reservation_by_number',
    'update_reservation',

    # Conflicts
    'find_conflicts',
    'has_conflict',
    'get_vehicle_bookings',

    # State management
    'VALID_TRANSITIONS',
    'STATUS_COLORS',
    'get_valid_transitions',
    'get_allowed_transitions',
    'validate_state_transition',
    'get_status_color',
    'approve_reservation',
    'reject_reservation',
    'bulk_approve_reservations',
    'bulk_reject_reservations',
    'start_rental',
    'process_return',
    'cancel_reservation',
    'update_payment_status',
    'get_status_history',

    # Scheduling
    'move_reservation',
    'check_move_availability',

    # Calendar
    'CalendarFilter',
    'project',

    # Queries
    'ReservationQuery',
    'get_reservations',
    'get_pending_reservations',
    'get_recent_reservations',
    'get_reservation_stats',
    'get_location_stats',
]
