# rollodex/config.py
import os
from datetime import timedelta
from dotenv import load_dotenv

# Determine the base directory of this config file (rollodex/)
# and the project root (one level up from rollodex/)
CONFIG_FILE_DIR = os.path.abspath(os.path.dirname(__file__))
PROJECT_ROOT = os.path.dirname(CONFIG_FILE_DIR)

dotenv_path = os.path.join(PROJECT_ROOT, '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)

DEFAULT_SECRET_KEY = 'change_this_default_secret_key_in_prod_rollodex'
DEFAULT_JWT_SECRET_KEY = 'change_this_default_jwt_secret_key_in_prod_rollodex'

MB = 1024 * 1024


def _database_url(default):
    url = os.environ.get('DATABASE_URL') or default
    # Hosted Postgres providers still hand out the legacy scheme
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _engine_options(database_uri):
    if database_uri.startswith('sqlite'):
        return {}
    return {
        'pool_size': int(os.environ.get('DB_POOL_SIZE', 20)),
        'pool_timeout': int(os.environ.get('DB_POOL_TIMEOUT', 30)),
        'pool_pre_ping': True,
    }


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY', DEFAULT_SECRET_KEY)
    DEBUG = False
    TESTING = False
    ENVIRONMENT = 'development'

    SQLALCHEMY_DATABASE_URI = _database_url(
        'sqlite:///' + os.path.join(PROJECT_ROOT, 'instance', 'rollodex.sqlite3'))
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    JWT_SECRET_KEY = os.environ.get('JWT_SECRET', os.environ.get('JWT_SECRET_KEY', DEFAULT_JWT_SECRET_KEY))
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_ALGORITHM = 'HS256'

    BCRYPT_ROUNDS = 12

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(PROJECT_ROOT, 'instance', 'uploads'))
    UPLOAD_URL_PREFIX = '/uploads'
    MAX_FILE_SIZE = 10 * MB
    MAX_FILES_PER_REQUEST = 10
    # Whole multipart body: every file at the limit plus the form fields
    MAX_CONTENT_LENGTH = MAX_FILES_PER_REQUEST * MAX_FILE_SIZE + MB
    ALLOWED_EXTENSIONS = {
        'jpg', 'jpeg', 'png', 'gif', 'webp', 'svg',
        'pdf', 'doc', 'docx', 'xls', 'xlsx', 'ppt', 'pptx',
        'zip', 'mp4', 'mov',
    }
    ALLOWED_MIME_TYPES = {
        'image/jpeg', 'image/png', 'image/gif', 'image/webp', 'image/svg+xml',
        'application/pdf',
        'application/msword',
        'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
        'application/vnd.ms-excel',
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        'application/vnd.ms-powerpoint',
        'application/vnd.openxmlformats-officedocument.presentationml.presentation',
        'application/zip', 'application/x-zip-compressed',
        'video/mp4', 'video/quicktime',
    }

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.environ.get('LOG_FILE', None)

    CORS_ORIGINS = os.environ.get('FRONTEND_URL', os.environ.get('CORS_ORIGINS', 'http://localhost:3000'))

    API_VERSION = "2.0.0"

    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', "memory://")
    RATELIMIT_STRATEGY = "fixed-window"
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = "1000 per 15 minutes"
    AUTH_RATELIMITS = "20 per minute;200 per hour"

    TALISMAN_FORCE_HTTPS = False

    DEMO_PASSWORD = os.environ.get('DEMO_PASSWORD', 'password123')

    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Creates missing tables at startup; migrations or `flask init-db` otherwise
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', 'true').lower() in ('true', '1', 't')

    @classmethod
    def validate(cls):
        """Hook for environment-specific checks; the base config accepts defaults."""
        return None


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = 'DEBUG'
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    ENVIRONMENT = 'testing'
    SQLALCHEMY_DATABASE_URI = os.environ.get('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = 'testing-jwt-secret-key-that-is-long-enough-for-hs256'
    BCRYPT_ROUNDS = 4 # bcrypt's minimum, keeps the suite fast
    RATELIMIT_ENABLED = False
    TALISMAN_FORCE_HTTPS = False


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False
    ENVIRONMENT = 'production'
    TALISMAN_FORCE_HTTPS = os.environ.get('TALISMAN_FORCE_HTTPS', 'true').lower() in ('true', '1', 't')

    RATELIMIT_STORAGE_URI = os.environ.get('PROD_RATELIMIT_STORAGE_URI', Config.RATELIMIT_STORAGE_URI)

    @classmethod
    def validate(cls):
        if not cls.SECRET_KEY or cls.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("Production SECRET_KEY is not set or is using the default value.")
        if not cls.JWT_SECRET_KEY or cls.JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
            raise ValueError("Production JWT_SECRET is not set or is using the default value.")
        if cls.SQLALCHEMY_DATABASE_URI.startswith('sqlite'):
            print("WARNING: Production is running on SQLite. Set DATABASE_URL to a server database.")
        if cls.RATELIMIT_STORAGE_URI == "memory://":
            print("WARNING: RATELIMIT_STORAGE_URI is 'memory://' for production. Consider Redis when running several workers.")


config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig,
    default=DevelopmentConfig
)


ENVIRONMENT_VARIABLES = ('FLASK_ENV', 'NODE_ENV')


def production_requested():
    """True when any environment variable names production, whatever the others say."""
    return any((os.getenv(name) or '').strip().lower() == 'production' for name in ENVIRONMENT_VARIABLES)


def current_environment():
    """'production' if any variable asks for it, else FLASK_ENV, then NODE_ENV."""
    if production_requested():
        return 'production'
    return os.getenv('FLASK_ENV') or os.getenv('NODE_ENV') or 'default'


def get_config_by_name(config_name_str=None):
    """
    Retrieves a configuration class by name, validates it and creates
    the directories it points at.
    """
    if config_name_str is None:
        config_name_str = current_environment()

    # A production environment always gets the production checks.
    if production_requested() and config_name_str != 'production':
        print(f"Warning: environment is 'production' but config_name is '{config_name_str}'. Forcing ProductionConfig.")
        config_name_str = 'production'

    SelectedConfigClass = config_by_name.get(config_name_str.lower())
    if not SelectedConfigClass:
        print(f"Warning: Config name '{config_name_str}' not found. Using default.")
        SelectedConfigClass = config_by_name['default']

    SelectedConfigClass.validate()

    paths_to_create = [
        os.path.dirname(SelectedConfigClass.SQLALCHEMY_DATABASE_URI.replace('sqlite:///', ''))
            if SelectedConfigClass.SQLALCHEMY_DATABASE_URI.startswith('sqlite:///')
            and not SelectedConfigClass.SQLALCHEMY_DATABASE_URI.endswith(':memory:')
            else None,
        SelectedConfigClass.UPLOAD_FOLDER,
        os.path.dirname(SelectedConfigClass.LOG_FILE) if SelectedConfigClass.LOG_FILE else None,
    ]
    for path in paths_to_create:
        if path:
            try:
                os.makedirs(path, exist_ok=True)
            except OSError as e:
                print(f"Warning: Could not create directory {path}: {e}")

    return SelectedConfigClass
