"""
Vehicle directory data access functions.

Vehicle status is maintained by admins; reservations only touch it on
pickup and return when SYNC_VEHICLE_STATUS_ON_HANDOVER is enabled.
"""

import logging

from database import get_db

logger = logging.getLogger(__name__)

VEHICLE_STATUSES = ('available', 'rented', 'maintenance', 'inactive')

VEHICLE_SELECT = '''
    SELECT v.*,
           b.name as brand_name,
           c.name as category_name,
           l.name as location_name,
           l.address as location_address
    FROM vehicles v
    LEFT JOIN vehicle_brands b ON v.brand_id = b.id
    LEFT JOIN vehicle_categories c ON v.category_id = c.id
    LEFT JOIN vehicle_locations l ON v.location_id = l.id
'''


def get_all_vehicles(location_id: int = None, status: str = None, search: str = None) -> list:
    """
    Get vehicles with optional filters.

    Args:
        location_id: Filter by home location
        status: Filter by vehicle status
        search: Match against vehicle number, model or brand

    Returns:
        List of vehicle dicts ordered by vehicle number
    """
    db = get_db()
    cursor = db.cursor()

    query = VEHICLE_SELECT + ' WHERE 1=1'
    params = []

    if location_id:
        query += ' AND v.location_id = ?'
        params.append(location_id)

    if status:
        query += ' AND v.status = ?'
        params.append(status)

    if search:
        query += ' AND (v.vehicle_number LIKE ? OR v.model LIKE ? OR b.name LIKE ?)'
        term = f'%{search}%'
        params.extend([term, term, term])

    query += ' ORDER BY v.vehicle_number'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_vehicle_by_id(vehicle_id: int) -> dict:
    """
    Get vehicle by ID.

    Args:
        vehicle_id: Vehicle ID

    Returns:
        Vehicle dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(VEHICLE_SELECT + ' WHERE v.id = ?', (vehicle_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def vehicle_exists(vehicle_id: int) -> bool:
    """Check if a vehicle ID exists."""
    db = get_db()
    row = db.execute('SELECT 1 FROM vehicles WHERE id = ?', (vehicle_id,)).fetchone()
    return row is not None


def create_vehicle(
    vehicle_number: str,
    model: str,
    brand_id: int = None,
    category_id: int = None,
    year: int = None,
    color: str = None,
    daily_rate: float = 0.0,
    location_id: int = None,
    status: str = 'available'
) -> int:
    """
    Create a vehicle.

    Args:
        vehicle_number: License plate (unique)
        model: Model name
        brand_id: Brand ID
        category_id: Category ID
        year: Model year
        color: Color
        daily_rate: Daily rental rate
        location_id: Home location
        status: Initial status

    Returns:
        New vehicle ID

    Raises:
        ValueError: If status is unknown
    """
    if status not in VEHICLE_STATUSES:
        raise ValueError(f'Unknown vehicle status: {status}')

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO vehicles (
            vehicle_number, brand_id, category_id, model, year, color,
            daily_rate, location_id, status
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (vehicle_number, brand_id, category_id, model, year, color,
          daily_rate, location_id, status))
    db.commit()
    return cursor.lastrowid


def update_vehicle_status(vehicle_id: int, status: str) -> bool:
    """
    Set a vehicle's status (admin action).

    Args:
        vehicle_id: Vehicle ID
        status: One of VEHICLE_STATUSES

    Returns:
        bool: True if the vehicle was updated

    Raises:
        ValueError: If status is unknown
    """
    if status not in VEHICLE_STATUSES:
        raise ValueError(f'Unknown vehicle status: {status}')

    db = get_db()
    cursor = db.cursor()
    try:
        updated = set_vehicle_status(cursor, vehicle_id, status)
        db.commit()
        return updated
    except Exception:
        db.rollback()
        raise


def set_vehicle_status(cursor, vehicle_id: int, status: str) -> bool:
    """Write a vehicle status using an existing cursor (joins the caller's transaction)."""
    cursor.execute('''
        UPDATE vehicles
        SET status = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (status, vehicle_id))
    if cursor.rowcount:
        logger.info('Vehicle %s status set to %s', vehicle_id, status)
    return cursor.rowcount > 0
