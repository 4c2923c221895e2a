# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application configuration classes.

Configuration is read from environment variables when this module is
imported. Each class below tunes the base configuration for one
deployment environment.

Classes:
    Config: Base configuration common to all environments.
    DevelopmentConfig: Configuration for development.
    TestingConfig: Configuration for unit tests.
    IntegrationConfig: Configuration for integration tests.
    StagingConfig: Configuration for staging.
    ProductionConfig: Configuration for production.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from app.utils.constants import (
    BOOLEAN_TRUE_VALUES,
    DEFAULT_COLUMN_MATCH_THRESHOLD,
    DEFAULT_CORS_ALLOW_CREDENTIALS,
    DEFAULT_CORS_ENABLED,
    DEFAULT_CORS_MAX_AGE,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_CURRENCY_SUFFIX,
    DEFAULT_DATABASE_HOST,
    DEFAULT_DATABASE_PATH,
    DEFAULT_DATABASE_PORT_MYSQL,
    DEFAULT_DATABASE_PORT_POSTGRESQL,
    DEFAULT_DATABASE_TYPE,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_PAGE_LIMIT,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_PIVOT_UNASSIGNED_LABEL,
    DEFAULT_RATE_LIMIT_CONFIGURATION,
    DEFAULT_RATE_LIMIT_ENABLED,
    DEFAULT_RATE_LIMIT_STORAGE,
    DEFAULT_RATE_LIMIT_STRATEGY,
    DEFAULT_SEED_COLUMN_SETTINGS,
    DEFAULT_SERVICE_PORT,
    DEFAULT_SETTLEMENT_PAGE_SIZE,
    DEFAULT_SQLALCHEMY_MAX_OVERFLOW,
    DEFAULT_SQLALCHEMY_POOL_RECYCLE,
    DEFAULT_SQLALCHEMY_POOL_SIZE,
    DEFAULT_SQLALCHEMY_POOL_TIMEOUT,
    DEFAULT_USE_REDIS_CACHE,
    ERROR_COLUMN_MATCH_THRESHOLD_INVALID,
    ERROR_DATABASE_CONFIG_INCOMPLETE,
    ERROR_DATABASE_TYPE_INVALID,
    ERROR_DATABASE_URL_NOT_SET,
    ERROR_PIVOT_LABEL_EMPTY,
    ERROR_REDIS_URL_REQUIRED,
    ERROR_SETTLEMENT_PAGE_SIZE_INVALID,
    VALID_DATABASE_TYPES,
    VALID_RATE_LIMIT_STORAGE,
    VALID_RATE_LIMIT_STRATEGIES,
)
from app.utils.logger import logger

# Local runs read .env.development; containers get their environment injected
if not os.environ.get("IN_DOCKER_CONTAINER") and not os.environ.get("APP_MODE"):
    ENV_FILE = ".env.development"
    if Path(ENV_FILE).exists():
        load_dotenv(ENV_FILE)
    else:
        logger.warning(
            f"{ENV_FILE} not found. Ensure environment variables are set manually."
        )


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in BOOLEAN_TRUE_VALUES


class Config:
    """Base configuration common to all environments."""

    # Flask Configuration
    SERVICE_PORT = int(os.environ.get("SERVICE_PORT", DEFAULT_SERVICE_PORT))
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Settlement domain
    COLUMN_MATCH_THRESHOLD = float(
        os.environ.get("COLUMN_MATCH_THRESHOLD", DEFAULT_COLUMN_MATCH_THRESHOLD)
    )
    SETTLEMENT_PAGE_SIZE = int(
        os.environ.get("SETTLEMENT_PAGE_SIZE", DEFAULT_SETTLEMENT_PAGE_SIZE)
    )
    PIVOT_UNASSIGNED_LABEL = os.environ.get(
        "PIVOT_UNASSIGNED_LABEL", DEFAULT_PIVOT_UNASSIGNED_LABEL
    )
    SEED_COLUMN_SETTINGS = _env_flag(
        "SEED_COLUMN_SETTINGS", DEFAULT_SEED_COLUMN_SETTINGS
    )
    CURRENCY_SUFFIX = os.environ.get("CURRENCY_SUFFIX", DEFAULT_CURRENCY_SUFFIX)

    # Redis Cache Configuration (rate limit storage)
    USE_REDIS_CACHE = _env_flag("USE_REDIS_CACHE", DEFAULT_USE_REDIS_CACHE)
    REDIS_HOST = os.environ.get("REDIS_HOST")
    REDIS_PORT = os.environ.get("REDIS_PORT")
    REDIS_DB = os.environ.get("REDIS_DB", "0")
    REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

    REDIS_URL = os.environ.get("REDIS_URL")
    if not REDIS_URL and USE_REDIS_CACHE and REDIS_HOST and REDIS_PORT:
        if REDIS_PASSWORD:
            REDIS_URL = (
                f"redis://:{REDIS_PASSWORD}@{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}"
            )
        else:
            REDIS_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}/{REDIS_DB}"

    # SQLAlchemy Configuration
    SQLALCHEMY_TRACK_MODIFICATIONS = _env_flag(
        "SQLALCHEMY_TRACK_MODIFICATIONS", "false"
    )
    SQLALCHEMY_POOL_SIZE = int(
        os.environ.get("SQLALCHEMY_POOL_SIZE", DEFAULT_SQLALCHEMY_POOL_SIZE)
    )
    SQLALCHEMY_POOL_RECYCLE = int(
        os.environ.get("SQLALCHEMY_POOL_RECYCLE", DEFAULT_SQLALCHEMY_POOL_RECYCLE)
    )
    SQLALCHEMY_POOL_TIMEOUT = int(
        os.environ.get("SQLALCHEMY_POOL_TIMEOUT", DEFAULT_SQLALCHEMY_POOL_TIMEOUT)
    )
    SQLALCHEMY_MAX_OVERFLOW = int(
        os.environ.get("SQLALCHEMY_MAX_OVERFLOW", DEFAULT_SQLALCHEMY_MAX_OVERFLOW)
    )

    # Database Configuration
    # DATABASE_URL wins; otherwise the URL is built from the components
    DATABASE_TYPE = os.environ.get("DATABASE_TYPE", DEFAULT_DATABASE_TYPE).lower()
    DATABASE_HOST = os.environ.get("DATABASE_HOST", DEFAULT_DATABASE_HOST)
    DATABASE_PORT = os.environ.get("DATABASE_PORT")
    DATABASE_USER = os.environ.get("DATABASE_USER")
    DATABASE_PASSWORD = os.environ.get("DATABASE_PASSWORD")
    DATABASE_NAME = os.environ.get("DATABASE_NAME")
    DATABASE_PATH = os.environ.get("DATABASE_PATH", DEFAULT_DATABASE_PATH)

    SQLALCHEMY_DATABASE_URI: str | None = None

    # Logging Configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()

    # CORS Configuration
    CORS_ENABLED = _env_flag("CORS_ENABLED", DEFAULT_CORS_ENABLED)
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    CORS_ALLOW_CREDENTIALS = _env_flag(
        "CORS_ALLOW_CREDENTIALS", DEFAULT_CORS_ALLOW_CREDENTIALS
    )
    CORS_MAX_AGE = int(os.environ.get("CORS_MAX_AGE", DEFAULT_CORS_MAX_AGE))

    # Rate Limiting Configuration
    RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", DEFAULT_RATE_LIMIT_ENABLED)
    RATE_LIMIT_CONFIGURATION = os.environ.get(
        "RATE_LIMIT_CONFIGURATION", DEFAULT_RATE_LIMIT_CONFIGURATION
    )
    RATE_LIMIT_STRATEGY = os.environ.get(
        "RATE_LIMIT_STRATEGY", DEFAULT_RATE_LIMIT_STRATEGY
    ).lower()
    RATE_LIMIT_STORAGE = os.environ.get(
        "RATE_LIMIT_STORAGE", DEFAULT_RATE_LIMIT_STORAGE
    ).lower()

    # Pagination Configuration
    PAGE_LIMIT = int(os.environ.get("PAGE_LIMIT", DEFAULT_PAGE_LIMIT))
    MAX_PAGE_LIMIT = int(os.environ.get("MAX_PAGE_LIMIT", DEFAULT_MAX_PAGE_LIMIT))

    @classmethod
    def validate(cls):
        """Validate configuration consistency after loading.

        Builds the database URI, then checks every group of settings.
        Recoverable mistakes fall back to defaults with a warning;
        unusable values raise ValueError.
        """
        cls._build_database_uri()

        cls._validate_database_type()
        cls._validate_log_format()
        cls._validate_rate_limiting()
        cls._validate_redis()
        cls._validate_settlement_settings()
        cls._validate_database_uri()

        cls._log_validation_status()

    @classmethod
    def _validate_database_type(cls):
        """Validate DATABASE_TYPE configuration."""
        if cls.DATABASE_TYPE not in VALID_DATABASE_TYPES:
            raise ValueError(ERROR_DATABASE_TYPE_INVALID)

    @classmethod
    def _validate_log_format(cls):
        """Validate LOG_FORMAT configuration."""
        if cls.LOG_FORMAT not in ["json", "text"]:
            logger.warning(
                f"Invalid LOG_FORMAT '{cls.LOG_FORMAT}'. Using default 'text'."
            )
            cls.LOG_FORMAT = "text"

    @classmethod
    def _validate_rate_limiting(cls):
        """Validate rate limiting configuration."""
        if cls.RATE_LIMIT_STRATEGY not in VALID_RATE_LIMIT_STRATEGIES:
            logger.warning(
                f"Invalid RATE_LIMIT_STRATEGY '{cls.RATE_LIMIT_STRATEGY}'. "
                f"Using default '{DEFAULT_RATE_LIMIT_STRATEGY}'."
            )
            cls.RATE_LIMIT_STRATEGY = DEFAULT_RATE_LIMIT_STRATEGY

        if cls.RATE_LIMIT_STORAGE not in VALID_RATE_LIMIT_STORAGE:
            logger.warning(
                f"Invalid RATE_LIMIT_STORAGE '{cls.RATE_LIMIT_STORAGE}'. "
                f"Using default '{DEFAULT_RATE_LIMIT_STORAGE}'."
            )
            cls.RATE_LIMIT_STORAGE = DEFAULT_RATE_LIMIT_STORAGE

        if cls.RATE_LIMIT_ENABLED and cls.RATE_LIMIT_STORAGE == "memory":
            logger.warning(
                "RATE_LIMIT_STORAGE is set to 'memory'. Limits are per process; "
                "use 'redis' when running several workers."
            )

    @classmethod
    def _validate_redis(cls):
        """Validate Redis configuration."""
        if cls.USE_REDIS_CACHE and not cls.REDIS_URL:
            logger.error(ERROR_REDIS_URL_REQUIRED)
            raise ValueError(ERROR_REDIS_URL_REQUIRED)

        if not cls.USE_REDIS_CACHE and cls.REDIS_URL:
            logger.info("USE_REDIS_CACHE is disabled. REDIS_URL will be ignored.")
            cls.REDIS_URL = None

    @classmethod
    def _validate_settlement_settings(cls):
        """Validate the settlement domain settings."""
        if not 0 < cls.COLUMN_MATCH_THRESHOLD <= 1:
            raise ValueError(ERROR_COLUMN_MATCH_THRESHOLD_INVALID)
        if cls.SETTLEMENT_PAGE_SIZE < 1:
            raise ValueError(ERROR_SETTLEMENT_PAGE_SIZE_INVALID)
        if not cls.PIVOT_UNASSIGNED_LABEL or not cls.PIVOT_UNASSIGNED_LABEL.strip():
            raise ValueError(ERROR_PIVOT_LABEL_EMPTY)

    @classmethod
    def _validate_database_uri(cls):
        """Validate SQLALCHEMY_DATABASE_URI if required."""
        if (
            getattr(cls, "REQUIRES_DATABASE_URL", False)
            and not cls.SQLALCHEMY_DATABASE_URI
        ):
            raise ValueError(ERROR_DATABASE_URL_NOT_SET)

    @classmethod
    def _log_validation_status(cls):
        """Log the validation status for debugging."""
        logger.debug(
            f"Validating {cls.__name__}: "
            f"USE_REDIS_CACHE={cls.USE_REDIS_CACHE}, "
            f"CORS_ENABLED={cls.CORS_ENABLED}, "
            f"RATE_LIMIT_ENABLED={cls.RATE_LIMIT_ENABLED}, "
            f"COLUMN_MATCH_THRESHOLD={cls.COLUMN_MATCH_THRESHOLD}, "
            f"SEED_COLUMN_SETTINGS={cls.SEED_COLUMN_SETTINGS}"
        )

    @classmethod
    def _build_database_uri(cls):
        """Build SQLALCHEMY_DATABASE_URI from environment variables.

        Priority:
        1. SQLALCHEMY_DATABASE_URI already set on the class (e.g. TestingConfig)
        2. DATABASE_URL
        3. Individual components (DATABASE_TYPE, DATABASE_HOST, ...)
        """
        if cls.SQLALCHEMY_DATABASE_URI:
            return

        database_url = os.environ.get("DATABASE_URL")
        if database_url:
            cls.SQLALCHEMY_DATABASE_URI = database_url
            return

        cls._validate_production_database_config()

        if cls.DATABASE_TYPE == "sqlite":
            cls._build_sqlite_uri()
        elif cls.DATABASE_TYPE in ("postgresql", "mysql"):
            cls._build_sql_server_uri()

    @classmethod
    def _validate_production_database_config(cls):
        """Reject SQLite and incomplete connection settings in staging/production."""
        if not getattr(cls, "REQUIRES_DATABASE_URL", False):
            return

        if cls.DATABASE_TYPE == "sqlite":
            raise ValueError(ERROR_DATABASE_CONFIG_INCOMPLETE)

        if not all(
            [
                cls.DATABASE_HOST,
                cls.DATABASE_USER,
                cls.DATABASE_PASSWORD,
                cls.DATABASE_NAME,
            ]
        ):
            raise ValueError(ERROR_DATABASE_CONFIG_INCOMPLETE)

    @classmethod
    def _build_sqlite_uri(cls):
        """Build SQLite database URI."""
        db_path = Path(cls.DATABASE_PATH).resolve()
        cls.SQLALCHEMY_DATABASE_URI = f"sqlite:///{db_path}"

    @classmethod
    def _build_sql_server_uri(cls):
        """Build PostgreSQL or MySQL database URI."""
        if not all(
            [
                cls.DATABASE_HOST,
                cls.DATABASE_USER,
                cls.DATABASE_PASSWORD,
                cls.DATABASE_NAME,
            ]
        ):
            return

        if not cls.DATABASE_PORT:
            if cls.DATABASE_TYPE == "postgresql":
                cls.DATABASE_PORT = DEFAULT_DATABASE_PORT_POSTGRESQL
            elif cls.DATABASE_TYPE == "mysql":
                cls.DATABASE_PORT = DEFAULT_DATABASE_PORT_MYSQL

        driver = "postgresql" if cls.DATABASE_TYPE == "postgresql" else "mysql+pymysql"
        cls.SQLALCHEMY_DATABASE_URI = (
            f"{driver}://{cls.DATABASE_USER}:{cls.DATABASE_PASSWORD}"
            f"@{cls.DATABASE_HOST}:{cls.DATABASE_PORT}/{cls.DATABASE_NAME}"
        )


class DevelopmentConfig(Config):
    """Configuration for the development environment."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = f"sqlite:///{Path('dev.db').resolve()}"


class TestingConfig(Config):
    """Configuration for the testing environment."""

    # Rate limiting disabled in testing to avoid interference with tests
    RATE_LIMIT_ENABLED = False

    TESTING = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


class IntegrationConfig(Config):
    """Configuration for the integration testing environment."""

    RATE_LIMIT_ENABLED = False

    TESTING = True
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///:memory:")


class StagingConfig(Config):
    """Configuration for the staging environment."""

    REQUIRES_DATABASE_URL = True

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")


class ProductionConfig(Config):
    """Configuration for the production environment."""

    REQUIRES_DATABASE_URL = True

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")


# FLASK_ENV value -> configuration class import path
CONFIG_CLASSES = {
    "development": "app.config.DevelopmentConfig",
    "testing": "app.config.TestingConfig",
    "integration": "app.config.IntegrationConfig",
    "staging": "app.config.StagingConfig",
    "production": "app.config.ProductionConfig",
}


def config_class_for(env: str | None, default: str = "development") -> str:
    """Return the configuration import path for a FLASK_ENV value."""
    return CONFIG_CLASSES.get(env or default, CONFIG_CLASSES[default])
