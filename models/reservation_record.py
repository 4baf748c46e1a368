"""
Reservation record and storage adapter.

Rows from the reservations table are mapped to a typed Reservation through
Reservation.from_row, which rejects malformed rows instead of passing
missing values further down.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from utils.datetime_helpers import format_minutes

from .reservation_errors import MalformedRecordError, ValidationError
from .reservation_interval import ReservationInterval, combine


# =============================================================================
# CONSTANTS
# =============================================================================

RESERVATION_STATUSES = ('pending', 'confirmed', 'active', 'completed', 'cancelled')
PAYMENT_STATUSES = ('pending', 'paid', 'refunded')

# Statuses that hold the vehicle exclusively
EXCLUSIVE_STATUSES = ('confirmed', 'active')

# Statuses a reservation never leaves
TERMINAL_STATUSES = ('completed', 'cancelled')

# Columns joined in by get_reservation_by_id and friends, not part of the table
_DETAIL_FIELDS = (
    'vehicle_number', 'vehicle_model', 'brand_name',
    'pickup_location_name', 'return_location_name', 'customer_name'
)


@dataclass
class Reservation:
    """One vehicle booking."""

    id: int
    reservation_number: str
    vehicle_id: int
    start_date: str
    end_date: str
    start_time: str
    end_time: str
    status: str
    payment_status: str
    total_amount: float
    version: int
    created_at: str
    updated_at: str
    customer_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    pickup_location_id: Optional[int] = None
    return_location_id: Optional[int] = None
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    actual_pickup_time: Optional[str] = None
    start_mileage: Optional[int] = None
    pickup_notes: Optional[str] = None
    actual_return_time: Optional[str] = None
    return_condition: Optional[str] = None
    return_mileage: Optional[int] = None
    return_notes: Optional[str] = None
    # Joined display fields
    vehicle_number: Optional[str] = None
    vehicle_model: Optional[str] = None
    brand_name: Optional[str] = None
    pickup_location_name: Optional[str] = None
    return_location_name: Optional[str] = None
    customer_name: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> 'Reservation':
        """
        Map a database row (sqlite3.Row or dict) to a Reservation.

        Args:
            row: Row from the reservations table, optionally with joined
                display columns

        Returns:
            Reservation

        Raises:
            MalformedRecordError: Unknown status, unparseable dates/times,
                end not after start, or no customer reference
        """
        data = dict(row)
        row_id = data.get('id')

        for field in ('id', 'reservation_number', 'vehicle_id', 'start_date', 'end_date',
                      'start_time', 'end_time', 'status', 'payment_status'):
            if data.get(field) in (None, ''):
                raise MalformedRecordError(
                    f'Reservation row {row_id} is missing {field}', reservation_id=row_id
                )

        if data['status'] not in RESERVATION_STATUSES:
            raise MalformedRecordError(
                f"Reservation row {row_id} has unknown status {data['status']!r}",
                reservation_id=row_id
            )
        if data['payment_status'] not in PAYMENT_STATUSES:
            raise MalformedRecordError(
                f"Reservation row {row_id} has unknown payment status {data['payment_status']!r}",
                reservation_id=row_id
            )
        if not data.get('customer_id') and not data.get('guest_name'):
            raise MalformedRecordError(
                f'Reservation row {row_id} has no customer reference', reservation_id=row_id
            )

        try:
            ReservationInterval(
                vehicle_id=data['vehicle_id'],
                start=combine(data['start_date'], data['start_time']),
                end=combine(data['end_date'], data['end_time']),
            )
        except ValidationError as exc:
            raise MalformedRecordError(
                f'Reservation row {row_id} has an invalid range: {exc.message}',
                reservation_id=row_id
            )

        fields = {name: data.get(name) for name in cls.__dataclass_fields__}
        fields['total_amount'] = float(data.get('total_amount') or 0)
        fields['version'] = int(data.get('version') or 1)
        if not data.get('customer_name'):
            fields['customer_name'] = data.get('guest_name')
        return cls(**fields)

    @property
    def start_at(self) -> datetime:
        return combine(self.start_date, self.start_time)

    @property
    def end_at(self) -> datetime:
        return combine(self.end_date, self.end_time)

    @property
    def interval(self) -> ReservationInterval:
        return ReservationInterval(
            vehicle_id=self.vehicle_id,
            start=self.start_at,
            end=self.end_at,
            reservation_id=self.id
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def holds_vehicle(self) -> bool:
        return self.status in EXCLUSIVE_STATUSES

    def to_dict(self, include_details: bool = True) -> dict:
        """Serialize for JSON responses."""
        data = asdict(self)
        if not include_details:
            for field in _DETAIL_FIELDS:
                data.pop(field, None)
        data['start'] = format_minutes(self.start_at)
        data['end'] = format_minutes(self.end_at)
        return data
