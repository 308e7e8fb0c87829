import os


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ['true', 'on', '1']


class BaseConfig:
    """
    Base configuration class using environment variables
    """

    # Application settings
    APP_NAME = os.environ.get('APP_NAME', 'Client Management API')
    APP_URL = os.environ.get('APP_URL', 'http://localhost:5000')

    # Secret Key
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-for-development')

    # CORS
    CORS_ORIGINS = [origin.strip() for origin in os.environ.get('CORS_ORIGINS', '*').split(',')]

    # Logging Configuration
    LOG_TO_STDOUT = _env_flag('LOG_TO_STDOUT', 'false')
    LOGGING_LEVEL = os.environ.get('LOGGING_LEVEL', 'INFO').upper()

    # Admin login
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'change-me')

    # Expiry report
    EXPIRY_WARNING_DAYS = int(os.environ.get('EXPIRY_WARNING_DAYS', 30))

    # Google Drive export
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET')
    GOOGLE_REDIRECT_URI = os.environ.get('GOOGLE_REDIRECT_URI', f'{APP_URL}/auth/google/callback')
    DRIVE_TOKENS_PATH = os.environ.get('DRIVE_TOKENS_PATH', 'drive_tokens.json')
    DRIVE_UPLOAD_LOG_PATH = os.environ.get('DRIVE_UPLOAD_LOG_PATH', 'drive_upload.log')
    DRIVE_UPLOAD_MAX_ATTEMPTS = int(os.environ.get('DRIVE_UPLOAD_MAX_ATTEMPTS', 3))
    DRIVE_UPLOAD_BACKOFF_BASE = float(os.environ.get('DRIVE_UPLOAD_BACKOFF_BASE', 1.0))
    DRIVE_UPLOAD_BACKOFF_FACTOR = float(os.environ.get('DRIVE_UPLOAD_BACKOFF_FACTOR', 2))
    DRIVE_AUTO_EXPORT = _env_flag('DRIVE_AUTO_EXPORT', 'true')


class DatabaseConfig:
    """
    Database configuration with environment variable support
    """
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Connection Pool Settings
    SQLALCHEMY_POOL_SIZE = int(os.environ.get('DATABASE_POOL_SIZE', 10))
    SQLALCHEMY_POOL_RECYCLE = int(os.environ.get('DATABASE_POOL_RECYCLE', 1800))  # 30 minutes

    SQLALCHEMY_ECHO = _env_flag('SQLALCHEMY_ECHO', 'false')
    SLOW_QUERY_THRESHOLD = float(os.environ.get('SLOW_QUERY_THRESHOLD', 0.5))  # In seconds

    @staticmethod
    def get_database_uri(config_name):
        """
        Generate database URI based on configuration environment

        Args:
            config_name: Name of the configuration environment
        Returns:
            str: Database connection URI
        """
        # For testing, always use in-memory SQLite
        if config_name == 'testing':
            return 'sqlite:///:memory:'

        db_url = os.environ.get('DATABASE_URL')
        if db_url:
            return db_url

        db_user = os.environ.get('DATABASE_USER')
        db_password = os.environ.get('DATABASE_PASSWORD')
        db_host = os.environ.get('DATABASE_HOST', 'localhost')
        db_port = os.environ.get('DATABASE_PORT', '3306')
        db_name = os.environ.get('DATABASE_NAME', 'clients')

        if all([db_user, db_password, db_host, db_name]):
            return f'mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}'

        # Fallback to SQLite
        default_db_path = os.path.join(
            os.path.abspath(os.path.dirname(__file__)),
            '..',
            'clients.db'
        )
        return f'sqlite:///{os.path.normpath(default_db_path)}'


class DevelopmentConfig(BaseConfig, DatabaseConfig):
    """
    Development-specific configuration
    """
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('development')


class ProductionConfig(BaseConfig, DatabaseConfig):
    """
    Production-specific configuration
    """
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('production')


class TestingConfig(BaseConfig, DatabaseConfig):
    """
    Testing-specific configuration
    """
    TESTING = True
    SQLALCHEMY_DATABASE_URI = DatabaseConfig.get_database_uri('testing')
    DRIVE_AUTO_EXPORT = False
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'secret'
    GOOGLE_CLIENT_ID = None
    GOOGLE_CLIENT_SECRET = None


def get_config(config_name):
    """
    Factory function to return the appropriate configuration class

    :param config_name: Name of the configuration ('development', 'production', 'testing')
    :return: Configuration class
    """
    config_mapping = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_mapping.get((config_name or 'development').lower(), DevelopmentConfig)
