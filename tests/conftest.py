"""
Pytest configuration and fixtures.
Each test gets an isolated SQLite file, never the real database.
"""

import pytest


@pytest.fixture
def db_path(tmp_path):
    """Path of the per-test database file."""
    return str(tmp_path / 'rentdesk_test.db')


@pytest.fixture
def app(db_path, monkeypatch):
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    monkeypatch.setenv('DATABASE_PATH', db_path)

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = db_path

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def fleet(app):
    """Two vehicles at the first seeded location and one at the second."""
    from database import get_db
    from models.vehicle import create_vehicle

    with app.app_context():
        db = get_db()
        locations = [row['id'] for row in db.execute(
            'SELECT id FROM vehicle_locations ORDER BY id'
        ).fetchall()]
        brand_id = db.execute(
            "SELECT id FROM vehicle_brands WHERE name = 'Hyundai'"
        ).fetchone()['id']

        return {
            'location_ids': locations,
            'sonata': create_vehicle('11GA1111', 'Sonata', brand_id=brand_id,
                                     daily_rate=70000, location_id=locations[0]),
            'avante': create_vehicle('22NA2222', 'Avante', brand_id=brand_id,
                                     daily_rate=55000, location_id=locations[0]),
            'tucson': create_vehicle('33DA3333', 'Tucson', brand_id=brand_id,
                                     daily_rate=80000, location_id=locations[1]),
        }


@pytest.fixture
def make_reservation(app):
    """
    Factory creating a reservation through create_reservation, then forcing
    its status directly in the table (fixture setup, not a transition).
    """
    from database import get_db
    from models.reservation_crud import create_reservation

    def _make(vehicle_id, start, end, status='pending', guest_name='Kim Minsu', **kwargs):
        with app.app_context():
            result = create_reservation(vehicle_id, start, end, guest_name=guest_name, **kwargs)
            assert result['success'], result
            reservation_id = result['reservation']['id']
            if status != 'pending':
                db = get_db()
                db.execute('UPDATE reservations SET status = ? WHERE id = ?',
                           (status, reservation_id))
                db.commit()
            return reservation_id

    return _make
