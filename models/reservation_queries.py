"""
Reservation query functions.
Handles listing, filtering and pagination for the admin reservation views.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from database import get_db
from .reservation_crud import RESERVATION_SELECT
from .reservation_errors import ValidationError
from .reservation_record import Reservation, RESERVATION_STATUSES, PAYMENT_STATUSES

SORT_FIELDS = ('created_at', 'start_date', 'total_amount', 'updated_at')
SORT_ORDERS = ('asc', 'desc')
MAX_PAGE_SIZE = 100


@dataclass
class ReservationQuery:
    """
    Filter, sort and pagination options for get_reservations.

    Attributes:
        statuses: Reservation statuses to include (empty = all)
        payment_statuses: Payment statuses to include (empty = all)
        start_date: Only reservations starting on or after (YYYY-MM-DD)
        end_date: Only reservations ending on or before (YYYY-MM-DD)
        search: Matches guest name, guest email or reservation number
        vehicle_id: Only this vehicle
        location_id: Only reservations picked up at this location
        sort_by: One of SORT_FIELDS
        sort_order: 'asc' or 'desc'
        page: 1-based page number
        limit: Page size
    """

    statuses: Tuple[str, ...] = ()
    payment_statuses: Tuple[str, ...] = ()
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    search: Optional[str] = None
    vehicle_id: Optional[int] = None
    location_id: Optional[int] = None
    sort_by: str = 'created_at'
    sort_order: str = 'desc'
    page: int = 1
    limit: int = 20

    def __post_init__(self):
        self.statuses = tuple(self.statuses or ())
        self.payment_statuses = tuple(self.payment_statuses or ())

        for status in self.statuses:
            if status not in RESERVATION_STATUSES:
                raise ValidationError(f'Unknown reservation status: {status}')
        for status in self.payment_statuses:
            if status not in PAYMENT_STATUSES:
                raise ValidationError(f'Unknown payment status: {status}')
        if self.sort_by not in SORT_FIELDS:
            raise ValidationError(f'Cannot sort by {self.sort_by}')
        if self.sort_order not in SORT_ORDERS:
            raise ValidationError(f'Invalid sort order: {self.sort_order}')

        self.page = max(1, int(self.page))
        self.limit = min(MAX_PAGE_SIZE, max(1, int(self.limit)))


def get_reservations(query: ReservationQuery = None) -> dict:
    """
    Get filtered reservations with pagination (for list view).

    Args:
        query: ReservationQuery (default: newest first, first page)

    Returns:
        dict: {data: list, total: int, page: int, limit: int, total_pages: int}
    """
    query = query or ReservationQuery()

    where = ' WHERE 1=1'
    params = []

    if query.statuses:
        where += f" AND r.status IN ({','.join('?' * len(query.statuses))})"
        params.extend(query.statuses)

    if query.payment_statuses:
        where += f" AND r.payment_status IN ({','.join('?' * len(query.payment_statuses))})"
        params.extend(query.payment_statuses)

    if query.start_date:
        where += ' AND r.start_date >= ?'
        params.append(query.start_date)

    if query.end_date:
        where += ' AND r.end_date <= ?'
        params.append(query.end_date)

    if query.vehicle_id:
        where += ' AND r.vehicle_id = ?'
        params.append(query.vehicle_id)

    if query.location_id:
        where += ' AND r.pickup_location_id = ?'
        params.append(query.location_id)

    if query.search:
        where += ''' AND (
            r.guest_name LIKE ? OR r.guest_email LIKE ? OR
            r.reservation_number LIKE ? OR c.name LIKE ?
        )'''
        term = f'%{query.search.strip()}%'
        params.extend([term, term, term, term])

    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT COUNT(*) as total
        FROM reservations r
        LEFT JOIN customers c ON r.customer_id = c.id
    ''' + where, params)
    total = cursor.fetchone()['total']

    sql = RESERVATION_SELECT + where
    sql += f' ORDER BY r.{query.sort_by} {query.sort_order.upper()}, r.id {query.sort_order.upper()}'
    sql += ' LIMIT ? OFFSET ?'
    cursor.execute(sql, params + [query.limit, (query.page - 1) * query.limit])

    return {
        'data': [Reservation.from_row(row).to_dict() for row in cursor.fetchall()],
        'total': total,
        'page': query.page,
        'limit': query.limit,
        'total_pages': (total + query.limit - 1) // query.limit
    }


def get_pending_reservations() -> list:
    """
    Get reservations awaiting approval, oldest request first.

    Returns:
        list: Reservation dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(RESERVATION_SELECT + '''
        WHERE r.status = 'pending'
        ORDER BY r.created_at ASC, r.id ASC
    ''')
    return [Reservation.from_row(row).to_dict() for row in cursor.fetchall()]


def get_recent_reservations(limit: int = 10) -> list:
    """
    Get the most recently created reservations.

    Args:
        limit: Max results

    Returns:
        list: Reservation dicts, newest first
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(RESERVATION_SELECT + '''
        ORDER BY r.created_at DESC, r.id DESC
        LIMIT ?
    ''', (limit,))
    return [Reservation.from_row(row).to_dict() for row in cursor.fetchall()]
