"""
Test application factory and configuration.
"""

import os

import pytest
from app import create_app


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app is not None
        assert app.config['TESTING'] is True
        assert app.config['SYNC_VEHICLE_STATUS_ON_HANDOVER'] is True

    def test_create_app_default(self):
        """Test app creation with default config."""
        app = create_app()
        assert app is not None

    def test_app_has_blueprints(self):
        """Test that the API blueprint is registered."""
        app = create_app('test')
        assert list(app.blueprints.keys()) == ['api']

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without a real secret key."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        monkeypatch.setenv('DATABASE_PATH', '/tmp/rentdesk.db')

        with pytest.raises(ValueError, match='SECRET_KEY'):
            create_app('production')

    def test_production_rejects_short_secret_key(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'short')
        monkeypatch.setenv('DATABASE_PATH', '/tmp/rentdesk.db')

        with pytest.raises(ValueError, match='32 characters'):
            create_app('production')


class TestAppConfiguration:
    """Test application configuration."""

    def test_secret_key_set(self):
        """Test that secret key is configured."""
        app = create_app('test')
        assert app.config['SECRET_KEY'] is not None
        assert len(app.config['SECRET_KEY']) > 0

    def test_database_path_set(self):
        """Test that database path is configured."""
        app = create_app('test')
        assert 'DATABASE_PATH' in app.config

    def test_app_name_set(self):
        """Test that app name is configured."""
        app = create_app('test')
        assert app.config.get('APP_NAME') == 'RentDesk'

    def test_fixture_database_path_does_not_leak(self):
        """Per-test database files never outlive their test."""
        assert 'rentdesk_test.db' not in os.environ.get('DATABASE_PATH', '')

    def test_scheduling_defaults(self):
        """Date-only reservations fall back to business hours."""
        app = create_app('test')
        assert app.config['TIMEZONE'] == 'Asia/Seoul'
        assert app.config['DEFAULT_START_TIME'] == '09:00'
        assert app.config['DEFAULT_END_TIME'] == '18:00'
        assert app.config['CALENDAR_DEFAULT_STATUSES'] == ('pending', 'confirmed', 'active')


class TestCLICommands:
    """Test CLI command registration."""

    def test_cli_commands_registered(self):
        """Test that CLI commands are registered."""
        app = create_app('test')

        # Get registered CLI commands
        commands = list(app.cli.commands.keys())

        assert 'init-db' in commands
        assert 'seed-demo' in commands

    def test_init_db_and_seed_demo(self, app):
        """init-db builds the schema, seed-demo is safe to repeat."""
        runner = app.test_cli_runner()

        result = runner.invoke(args=['init-db'])
        assert result.exit_code == 0
        assert 'Database initialized successfully!' in result.output

        result = runner.invoke(args=['seed-demo'])
        assert result.exit_code == 0
        assert 'Added 5 demo vehicles' in result.output

        result = runner.invoke(args=['seed-demo'])
        assert 'Added 0 demo vehicles' in result.output
