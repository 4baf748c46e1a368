"""
RentDesk - Car Rental Reservation Back Office
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import database functions
from database import close_db, init_db, get_db, seed_demo_fleet


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config.get(config_name, config['default'])
    if hasattr(config_class, 'validate'):
        config_class.validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register error handlers. The back office only speaks JSON."""
    from utils.api_response import api_error

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 errors."""
        return api_error(getattr(error, 'description', None) or 'Bad request',
                         status=400, code='validation_error')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Not found', status=404, code='not_found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error('Method not allowed', status=405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        app.logger.error('Unhandled error: %s', error)
        return api_error('Internal server error', status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        db_dir = os.path.dirname(app.config['DATABASE_PATH'])
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir)
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('seed-demo')
    def seed_demo_command():
        """Add demo vehicles to an initialized database."""
        with app.app_context():
            db = get_db()
            count = seed_demo_fleet(db)
            db.commit()
        click.echo(f'Added {count} demo vehicles')


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/rentdesk.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)

        # Model modules log through their own module loggers
        for logger in (app.logger, logging.getLogger('models'), logging.getLogger('database')):
            logger.addHandler(file_handler)
            logger.setLevel(logging.INFO)

        app.logger.info('RentDesk startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)
        logging.getLogger('models').setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
