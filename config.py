"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


class Config:
    """Base configuration class with common settings."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration (raw SQLite)
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/rentdesk.db'
    # Seconds a writer waits for the SQLite write lock before giving up
    DATABASE_TIMEOUT = float(os.environ.get('DATABASE_TIMEOUT', 5.0))

    # Pagination
    ITEMS_PER_PAGE = 20

    # Timezone
    TIMEZONE = os.environ.get('TIMEZONE') or 'Asia/Seoul'

    # Business hours used when a reservation date comes without a time
    DEFAULT_START_TIME = '09:00'
    DEFAULT_END_TIME = '18:00'

    # Statuses shown on the calendar when no status filter is given
    CALENDAR_DEFAULT_STATUSES = ('pending', 'confirmed', 'active')

    # Pickup marks the vehicle as rented, return marks it available again
    SYNC_VEHICLE_STATUS_ON_HANDOVER = (
        os.environ.get('SYNC_VEHICLE_STATUS_ON_HANDOVER', 'true').lower() == 'true'
    )

    # Application settings
    APP_NAME = 'RentDesk'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    DATABASE_TIMEOUT = 5.0
    SECRET_KEY = 'test-secret-key'
    SYNC_VEHICLE_STATUS_ON_HANDOVER = True


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
