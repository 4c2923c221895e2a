# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Application constants.

Default configuration values and configuration error messages used by
app.config. Settlement domain defaults live here too so that the
configuration layer has a single source for them.
"""

# Configuration error messages
ERROR_DATABASE_URL_NOT_SET = (
    "DATABASE_URL or database connection variables are not set."
)
ERROR_DATABASE_TYPE_INVALID = "DATABASE_TYPE must be one of: sqlite, postgresql, mysql."
ERROR_DATABASE_CONFIG_INCOMPLETE = (
    "Database configuration incomplete. Provide either DATABASE_URL or all "
    "required connection variables (HOST, PORT, USER, PASSWORD, NAME for "
    "postgresql/mysql)."
)
ERROR_REDIS_URL_REQUIRED = (
    "REDIS_URL or REDIS_HOST is required when USE_REDIS_CACHE is enabled."
)
ERROR_COLUMN_MATCH_THRESHOLD_INVALID = (
    "COLUMN_MATCH_THRESHOLD must be a number greater than 0 and at most 1."
)
ERROR_SETTLEMENT_PAGE_SIZE_INVALID = "SETTLEMENT_PAGE_SIZE must be at least 1."
ERROR_PIVOT_LABEL_EMPTY = "PIVOT_UNASSIGNED_LABEL cannot be empty."

# Default configuration values
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "text"
DEFAULT_SERVICE_PORT = "5000"
DEFAULT_LOG_FILE_NAME = "cso_portal.log"

# Pagination defaults
DEFAULT_PAGE_LIMIT = 20
DEFAULT_MAX_PAGE_LIMIT = 100

DEFAULT_USE_REDIS_CACHE = "false"

# Database default values
DEFAULT_DATABASE_TYPE = "sqlite"
DEFAULT_DATABASE_HOST = "localhost"
DEFAULT_DATABASE_PORT_POSTGRESQL = "5432"
DEFAULT_DATABASE_PORT_MYSQL = "3306"
DEFAULT_DATABASE_PATH = "dev.db"

# SQLAlchemy default values
DEFAULT_SQLALCHEMY_POOL_SIZE = "5"
DEFAULT_SQLALCHEMY_POOL_RECYCLE = "3600"
DEFAULT_SQLALCHEMY_POOL_TIMEOUT = "30"
DEFAULT_SQLALCHEMY_MAX_OVERFLOW = "10"

# CORS default values
DEFAULT_CORS_ENABLED = "true"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"
DEFAULT_CORS_ALLOW_CREDENTIALS = "true"
DEFAULT_CORS_MAX_AGE = "3600"

# Rate Limiting default values
DEFAULT_RATE_LIMIT_ENABLED = "true"
DEFAULT_RATE_LIMIT_CONFIGURATION = "60 per minute"
DEFAULT_RATE_LIMIT_STRATEGY = "fixed-window"
DEFAULT_RATE_LIMIT_STORAGE = "redis"

# Settlement domain defaults
DEFAULT_COLUMN_MATCH_THRESHOLD = "0.6"
DEFAULT_SETTLEMENT_PAGE_SIZE = "50"
DEFAULT_PIVOT_UNASSIGNED_LABEL = "(미지정)"
DEFAULT_SEED_COLUMN_SETTINGS = "true"
DEFAULT_CURRENCY_SUFFIX = "원"

# Valid database types
VALID_DATABASE_TYPES = ("sqlite", "postgresql", "mysql")

# Valid rate limit strategies
VALID_RATE_LIMIT_STRATEGIES = ("fixed-window", "sliding-window", "token-bucket")
VALID_RATE_LIMIT_STORAGE = ("redis", "memory")

# Boolean value representations
BOOLEAN_TRUE_VALUES = ("true", "yes", "1")

# Configuration keys masked in logs and in the configuration endpoint
SENSITIVE_CONFIG_KEYS = (
    "SECRET_KEY",
    "SQLALCHEMY_DATABASE_URI",
    "DATABASE_URL",
    "DATABASE_PASSWORD",
    "REDIS_PASSWORD",
    "REDIS_URL",
    "RATELIMIT_STORAGE_URI",
)
