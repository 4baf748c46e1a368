"""
Database seed data.
Initial data population for fresh database installations.
"""


def seed_database(db):
    """Insert initial seed data: locations, brands and categories."""

    # 1. Locations
    locations_data = [
        ('Gangnam Branch', 'Teheran-ro 152, Gangnam-gu, Seoul', '02-555-0101'),
        ('Incheon Airport', 'Terminal 1 Arrivals, Incheon', '032-555-0102'),
        ('Busan Station', 'Jungang-daero 206, Dong-gu, Busan', '051-555-0103'),
    ]

    for name, address, phone in locations_data:
        db.execute('''
            INSERT INTO vehicle_locations (name, address, phone)
            VALUES (?, ?, ?)
        ''', (name, address, phone))

    # 2. Brands
    for name in ('Hyundai', 'Kia', 'Genesis', 'Tesla'):
        db.execute('INSERT INTO vehicle_brands (name) VALUES (?)', (name,))

    # 3. Categories
    for name in ('Compact', 'Sedan', 'SUV', 'Van', 'Electric'):
        db.execute('INSERT INTO vehicle_categories (name) VALUES (?)', (name,))


def seed_demo_fleet(db):
    """
    Insert a small demo fleet, one block of vehicles per location.
    Vehicles already present (same plate) are skipped.

    Returns:
        int: Number of vehicles added
    """
    fleet = [
        ('12GA3456', 'Hyundai', 'Sedan', 'Avante', 2023, 'White', 55000, 'Gangnam Branch'),
        ('34NA5678', 'Kia', 'SUV', 'Sorento', 2024, 'Black', 89000, 'Gangnam Branch'),
        ('56DA7890', 'Genesis', 'Sedan', 'G80', 2024, 'Gray', 150000, 'Incheon Airport'),
        ('78RA1234', 'Tesla', 'Electric', 'Model 3', 2023, 'Red', 120000, 'Incheon Airport'),
        ('90MA2345', 'Kia', 'Van', 'Carnival', 2022, 'Silver', 110000, 'Busan Station'),
    ]

    added = 0
    for number, brand, category, model, year, color, rate, location in fleet:
        cursor = db.execute('''
            INSERT OR IGNORE INTO vehicles (
                vehicle_number, brand_id, category_id, model, year, color,
                daily_rate, location_id
            ) VALUES (
                ?,
                (SELECT id FROM vehicle_brands WHERE name = ?),
                (SELECT id FROM vehicle_categories WHERE name = ?),
                ?, ?, ?, ?,
                (SELECT id FROM vehicle_locations WHERE name = ?)
            )
        ''', (number, brand, category, model, year, color, rate, location))
        added += cursor.rowcount

    return added
