"""
Dashboard statistics.
Reservation counts, revenue and per-location summaries.
"""

from datetime import date, timedelta

from database import get_db
from utils.datetime_helpers import get_today
from .reservation_record import RESERVATION_STATUSES

# Statuses counted as revenue
REVENUE_STATUSES = ('confirmed', 'completed')


def get_reservation_stats(today: date = None) -> dict:
    """
    Get reservation statistics for the dashboard.

    Args:
        today: Reference day (default: today in the configured timezone)

    Returns:
        dict: total_reservations, <status>_count for each status,
            total_revenue (confirmed + completed), today_reservations,
            this_week_reservations (last 7 days), this_month_reservations
    """
    today = today or get_today()
    week_start = (today - timedelta(days=7)).isoformat()
    month_start = today.replace(day=1).isoformat()

    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT status, COUNT(*) as count
        FROM reservations
        GROUP BY status
    ''')
    by_status = {row['status']: row['count'] for row in cursor.fetchall()}

    placeholders = ','.join('?' * len(REVENUE_STATUSES))
    cursor.execute(f'''
        SELECT COALESCE(SUM(total_amount), 0) as revenue
        FROM reservations
        WHERE status IN ({placeholders})
    ''', REVENUE_STATUSES)
    revenue = cursor.fetchone()['revenue']

    # created_at is an ISO timestamp, so its first 10 chars are the local date
    cursor.execute('''
        SELECT
            SUM(CASE WHEN SUBSTR(created_at, 1, 10) = ? THEN 1 ELSE 0 END) as today_count,
            SUM(CASE WHEN SUBSTR(created_at, 1, 10) >= ? THEN 1 ELSE 0 END) as week_count,
            SUM(CASE WHEN SUBSTR(created_at, 1, 10) >= ? THEN 1 ELSE 0 END) as month_count
        FROM reservations
    ''', (today.isoformat(), week_start, month_start))
    periods = cursor.fetchone()

    stats = {'total_reservations': sum(by_status.values())}
    for status in RESERVATION_STATUSES:
        stats[f'{status}_count'] = by_status.get(status, 0)
    stats.update({
        'total_revenue': float(revenue),
        'today_reservations': periods['today_count'] or 0,
        'this_week_reservations': periods['week_count'] or 0,
        'this_month_reservations': periods['month_count'] or 0,
    })
    return stats


def get_location_stats() -> list:
    """
    Get per-location vehicle and reservation summaries.

    Reservations are attributed to a location when they are picked up
    there with one of its vehicles.

    Returns:
        list: Dicts (location_id, location_name, location_address,
            total_vehicles, available_vehicles, total_reservations,
            active_reservations, pending_reservations, total_revenue)
            ordered by location name
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT l.id as location_id,
               l.name as location_name,
               l.address as location_address,
               (SELECT COUNT(*) FROM vehicles v
                WHERE v.location_id = l.id) as total_vehicles,
               (SELECT COUNT(*) FROM vehicles v
                WHERE v.location_id = l.id AND v.status = 'available') as available_vehicles,
               COUNT(r.id) as total_reservations,
               SUM(CASE WHEN r.status = 'active' THEN 1 ELSE 0 END) as active_reservations,
               SUM(CASE WHEN r.status = 'pending' THEN 1 ELSE 0 END) as pending_reservations,
               COALESCE(SUM(r.total_amount), 0) as total_revenue
        FROM vehicle_locations l
        LEFT JOIN vehicles v ON v.location_id = l.id
        LEFT JOIN reservations r ON r.vehicle_id = v.id AND r.pickup_location_id = l.id
        WHERE l.active = 1
        GROUP BY l.id
        ORDER BY l.name
    ''')

    stats = []
    for row in cursor.fetchall():
        entry = dict(row)
        entry['active_reservations'] = entry['active_reservations'] or 0
        entry['pending_reservations'] = entry['pending_reservations'] or 0
        entry['total_revenue'] = float(entry['total_revenue'])
        stats.append(entry)
    return stats
