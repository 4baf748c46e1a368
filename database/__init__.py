"""
Database package for the RentDesk reservation back office.

This package provides modular database operations:
- connection: Database connection management (get_db, close_db, write_transaction, init_db)
- schema: Table creation and indexes
- seed: Initial seed data

All functions are re-exported from this module.
"""

from database.connection import get_db, close_db, write_transaction, init_db
from database.schema import drop_tables, create_tables, create_indexes
from database.seed import seed_database, seed_demo_fleet

__all__ = [
    # Connection
    'get_db',
    'close_db',
    'write_transaction',
    'init_db',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    # Seed
    'seed_database',
    'seed_demo_fleet',
]
