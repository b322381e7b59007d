"""
RoomBoard - Property Booking Admin Console
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

# Import extensions
from extensions import login_manager, csrf

# Import database functions
from database import close_db, init_db, get_db, seed_initial_data

from utils.api_response import api_success, api_error, api_validation_error
from utils.errors import NotFoundError, PersistenceError, ReferentialIntegrityError, ValidationError
from utils.messages import MESSAGES


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

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    initialize_extensions(app)

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


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.admin import admin_bp
    from blueprints.api.routes import api_bp

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')

    # Set default route
    @app.route('/')
    def index():
        """Application name and version."""
        return api_success(data={
            'app': app.config.get('APP_NAME', 'RoomBoard'),
            'version': app.config.get('APP_VERSION', '1.0.0')
        })


def register_error_handlers(app):
    """Register error handlers. Every error is returned as a JSON envelope."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Handle malformed booking data."""
        return api_validation_error(error.errors, str(error))

    @app.errorhandler(NotFoundError)
    def missing_record_error(error):
        """Handle updates and deletes of missing records."""
        return api_error(str(error), 404)

    @app.errorhandler(ReferentialIntegrityError)
    def integrity_error(error):
        """Handle deletes blocked by dependent records."""
        return api_error(str(error), 409)

    @app.errorhandler(PersistenceError)
    def persistence_error(error):
        """Handle store failures."""
        app.logger.error('Persistence error: %s', error)
        return api_error(str(error), 500)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(MESSAGES['not_found'], 404)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(MESSAGES['server_error'], 500)

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        return api_error(MESSAGES['permission_denied'], 403)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and the admin account."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('seed-data')
    def seed_data_command():
        """Add sample locations, rooms and bookings to an empty database."""
        from utils.datetime_helpers import get_today

        with app.app_context():
            result = seed_initial_data(get_db(), get_today())

        if result['seeded']:
            click.echo(
                f"Seeded {result['locations']} locations, {result['rooms']} rooms "
                f"and {result['bookings']} bookings."
            )
        else:
            click.echo('Locations already exist, nothing to seed.')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.password_option()
    @click.option('--admin', is_flag=True, help='Grant access to the admin console.')
    def create_user_command(username, email, password, admin):
        """Create a new user."""
        import sqlite3
        from models.user import create_user
        from utils.validators import validate_email, validate_password

        if not validate_email(email):
            raise click.BadParameter('Invalid email address', param_hint='EMAIL')

        is_valid, message = validate_password(password)
        if not is_valid:
            raise click.BadParameter(message, param_hint='--password')

        with app.app_context():
            try:
                user_id = create_user(
                    username=username,
                    email=email,
                    password=password,
                    is_admin=admin
                )
                click.echo(f'User created successfully! ID: {user_id}')
            except sqlite3.IntegrityError as e:
                click.echo(f'Error creating user: {str(e)}', err=True)

    @app.cli.command('calendar')
    @click.option('--location', 'location_name', default=None, help='Location name to show.')
    @click.option('--week', default=None, help='Any day of the week to show (YYYY-MM-DD).')
    def calendar_command(location_name, week):
        """Print the occupancy grid for one location and week."""
        from services.calendar_view import CalendarWeekView, format_grid_text
        from services.data_access import SqliteDataAccess
        from services.location_sync import LocationSyncController
        from utils.datetime_helpers import get_today, parse_day
        from utils.helpers import run_async

        try:
            anchor = parse_day(week)
        except ValueError:
            raise click.BadParameter('Expected YYYY-MM-DD', param_hint='--week')

        controller = LocationSyncController(
            SqliteDataAccess(app),
            default_location_name=location_name or app.config.get('DEFAULT_LOCATION_NAME')
        )
        state = run_async(controller.mount())

        if state.error:
            raise click.ClickException(state.error)
        if not state.locations:
            click.echo(MESSAGES['no_locations'])
            return

        with app.app_context():
            view = CalendarWeekView.from_config(controller, app.config, anchor=anchor or get_today())

        location = state.selected_location
        click.echo(format_grid_text(view.grid, title=f'{location.name} - {view.title}'))


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

        file_handler = logging.FileHandler('logs/roomboard.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        # Library modules log through their own named loggers
        for name in ('services', 'models'):
            logging.getLogger(name).addHandler(file_handler)
            logging.getLogger(name).setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('RoomBoard startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
