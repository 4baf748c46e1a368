"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'reservation_status_history',
        'reservations',
        'customers',
        'vehicles',
        'vehicle_categories',
        'vehicle_brands',
        'vehicle_locations'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Vehicle directory
    db.execute('''
        CREATE TABLE vehicle_locations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            address TEXT,
            phone TEXT,
            active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE vehicle_brands (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE vehicle_categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE vehicles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            vehicle_number TEXT UNIQUE NOT NULL,
            brand_id INTEGER REFERENCES vehicle_brands(id),
            category_id INTEGER REFERENCES vehicle_categories(id),
            model TEXT NOT NULL,
            year INTEGER,
            color TEXT,
            daily_rate REAL DEFAULT 0,
            location_id INTEGER REFERENCES vehicle_locations(id),
            status TEXT NOT NULL DEFAULT 'available'
                CHECK(status IN ('available', 'rented', 'maintenance', 'inactive')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Customers
    db.execute('''
        CREATE TABLE customers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            phone TEXT,
            email TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Reservations
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_number TEXT UNIQUE NOT NULL,
            vehicle_id INTEGER NOT NULL REFERENCES vehicles(id),
            customer_id INTEGER REFERENCES customers(id),
            guest_name TEXT,
            guest_phone TEXT,
            guest_email TEXT,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            start_time TEXT NOT NULL DEFAULT '09:00',
            end_time TEXT NOT NULL DEFAULT '18:00',
            pickup_location_id INTEGER REFERENCES vehicle_locations(id),
            return_location_id INTEGER REFERENCES vehicle_locations(id),
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'confirmed', 'active', 'completed', 'cancelled')),
            payment_status TEXT NOT NULL DEFAULT 'pending'
                CHECK(payment_status IN ('pending', 'paid', 'refunded')),
            total_amount REAL NOT NULL DEFAULT 0 CHECK(total_amount >= 0),
            notes TEXT,
            admin_notes TEXT,
            approved_by TEXT,
            approved_at TEXT,
            actual_pickup_time TEXT,
            start_mileage INTEGER,
            pickup_notes TEXT,
            actual_return_time TEXT,
            return_condition TEXT,
            return_mileage INTEGER,
            return_notes TEXT,
            version INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
            from_status TEXT,
            to_status TEXT NOT NULL,
            changed_by TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Vehicle indexes
    db.execute('CREATE INDEX idx_vehicles_location ON vehicles(location_id)')
    db.execute('CREATE INDEX idx_vehicles_status ON vehicles(status)')

    # Reservation indexes
    db.execute('CREATE INDEX idx_reservations_vehicle_dates ON reservations(vehicle_id, start_date, end_date)')
    db.execute('CREATE INDEX idx_reservations_status ON reservations(status)')
    db.execute('CREATE INDEX idx_reservations_created ON reservations(created_at)')

    # History indexes
    db.execute('CREATE INDEX idx_status_history_reservation ON reservation_status_history(reservation_id)')
