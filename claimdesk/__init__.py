from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_cors import CORS
import structlog
from sqlalchemy import event
from sqlalchemy.engine import Engine
import sqlite3
from retry import retry
import time

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
logger = structlog.get_logger()


# Database connection retry decorator
@retry(tries=3, delay=2, backoff=2)
def init_db_with_retry(app):
    """Initialize database with retry logic"""
    try:
        if 'sqlalchemy' not in app.extensions:
            db.init_app(app)
        # Test connection
        with app.app_context():
            with db.engine.connect():
                pass
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        raise


def create_app(config_name, overrides=None):
    """
    Application factory function to create and configure the Flask application

    Args:
        config_name (str): Name of the configuration environment
                           ('development', 'production', 'testing').
        overrides (dict, optional): Settings applied on top of the configuration
                                    class, mostly used by tests.

    Returns:
        Flask: Configured Flask application instance
    """
    # Import config dynamically to avoid circular imports
    from .config import get_config

    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    cors_options = {
        'origins': app.config['CORS_ORIGINS'],
        'methods': ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        'allow_headers': ['Content-Type', 'Authorization'],
        'supports_credentials': True
    }
    CORS(app, **cors_options)
    logger.debug(f"CORS Origins configured: {app.config['CORS_ORIGINS']}")

    if app.config.get('LOG_TO_STDOUT'):
        _setup_logging(app)

    _configure_database(app)

    init_db_with_retry(app)
    migrate.init_app(app, db, directory=app.config.get('MIGRATIONS_DIR', 'migrations'))

    _configure_security(app)
    _configure_login_manager(app)

    with app.app_context():
        _init_database_models(app)

    _init_drive_export(app)

    _register_blueprints(app)
    _setup_error_handlers(app)

    app.logger.info(f"Starting application in {config_name} mode")
    return app


def _register_blueprints(app):
    """
    Register application blueprints

    Args:
        app (Flask): Flask application instance
    """
    from .routes import (
        index_bp,
        auth_bp,
        google_auth_bp,
        client_bp,
        records_bp,
        reporting_bp,
        drive_bp
    )

    blueprints = [
        (index_bp, None),
        (auth_bp, '/api'),
        (google_auth_bp, '/auth'),
        (client_bp, '/api/clients'),
        (records_bp, '/api/records'),
        (reporting_bp, '/api'),
        (drive_bp, '/api/drive')
    ]

    for blueprint, url_prefix in blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)


def _setup_error_handlers(app):
    """
    Set up JSON error handlers for the application

    Args:
        app (Flask): Flask application instance
    """

    @app.errorhandler(404)
    def page_not_found(error):
        app.logger.error(f'Page not found: {error}')
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f'Server Error: {error}')
        db.session.rollback()  # Rollback any pending database changes
        return jsonify({"error": "An unexpected error occurred"}), 500


def _configure_database(app):
    """Configure database specific settings"""
    if 'mysql' in app.config['SQLALCHEMY_DATABASE_URI']:
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_size': app.config.get('SQLALCHEMY_POOL_SIZE', 10),
            'pool_recycle': app.config.get('SQLALCHEMY_POOL_RECYCLE', 3600),
            'pool_pre_ping': True,
        }

    # Records rely on ON DELETE CASCADE, which SQLite ignores unless enabled per connection
    @event.listens_for(Engine, "connect")
    def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        if isinstance(dbapi_connection, sqlite3.Connection):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @event.listens_for(Engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(Engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total = time.time() - conn.info['query_start_time'].pop()
        if total > app.config.get('SLOW_QUERY_THRESHOLD', 0.5):
            logger.warning(f"Slow query detected: {total:.2f}s\n{statement}")


def _configure_security(app):
    """Configure security headers and cookie settings"""

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = app.config.get(
            'CONTENT_SECURITY_POLICY',
            "default-src 'self'"
        )
        return response

    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'


def _init_database_models(app):
    """Import models so their tables are registered, then create them"""
    from .models.client import Client
    from .models.record import Record

    db.create_all()
    app.logger.debug(f"Tables ready: {Client.__tablename__}, {Record.__tablename__}")


def _init_drive_export(app):
    """
    Build the Drive exporter and subscribe it to data change events.

    The exporter lives in ``app.extensions['drive_exporter']`` so tests can
    replace it with one wired to in-memory doubles.
    """
    from .services.export_service import build_drive_exporter, on_client_data_changed
    from .signals import client_data_changed

    app.extensions['drive_exporter'] = build_drive_exporter(app)
    client_data_changed.connect(on_client_data_changed)


def _setup_logging(app):
    """Setup stdout logging for the Flask logger"""
    import logging
    import sys

    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(logging.INFO)

    app.logger.addHandler(stream_handler)
    app.logger.setLevel(app.config.get('LOGGING_LEVEL', logging.INFO))


def _configure_login_manager(app):
    """Configure Flask-Login for the single admin account"""
    login_manager.init_app(app)
    login_manager.session_protection = "strong"

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import AdminUser
        admin = AdminUser.from_config(app.config)
        if admin.get_id() == user_id:
            return admin
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            "error": "Unauthorized",
            "message": "You must be logged in to access this resource"
        }), 401

    app.logger.info("Login manager configured")
