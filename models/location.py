"""
Rental location data access functions.
Pickup and return branches.
"""

from database import get_db


def get_all_locations(active_only: bool = True) -> list:
    """
    Get all rental locations.

    Args:
        active_only: If True, only return active locations

    Returns:
        List of location dicts ordered by name, with vehicle counts
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT l.*,
               (SELECT COUNT(*) FROM vehicles WHERE location_id = l.id) as vehicle_count
        FROM vehicle_locations l
    '''

    if active_only:
        query += ' WHERE l.active = 1'

    query += ' ORDER BY l.name'

    cursor.execute(query)
    return [dict(row) for row in cursor.fetchall()]


def get_location_by_id(location_id: int) -> dict:
    """
    Get location by ID.

    Args:
        location_id: Location ID

    Returns:
        Location dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM vehicle_locations WHERE id = ?', (location_id,))
    row = cursor.fetchone()
    return dict(row) if row else None

