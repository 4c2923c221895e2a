# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Flask application factory and initialization.

This module is the main entry point for initializing the Flask application.
It is responsible for configuring Flask extensions, registering custom error
handlers, registering REST API routes, seeding the default settlement column
settings and creating the Flask application via the create_app factory.

Functions:
    register_extensions: Initialize and register Flask extensions.
    register_error_handlers: Register custom error handlers for the app.
    create_app: Application factory that creates and configures the Flask app.
"""

import os
from typing import Any

from flask import Flask, abort, g, request
from flask_cors import CORS
from flask_marshmallow import Marshmallow
from flask_migrate import Migrate
from prometheus_flask_exporter import PrometheusMetrics
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import InternalServerError
from werkzeug.utils import import_string

# Model modules are imported so that every table is registered on db.metadata
from app.models.column_setting import ColumnSetting
from app.models.company_settings import CompanySettings  # noqa: F401
from app.models.cso_matching import CsoMatching  # noqa: F401
from app.models.db import db
from app.models.email_log import EmailLog  # noqa: F401
from app.models.password_reset_token import PasswordResetToken  # noqa: F401
from app.models.settlement import Settlement  # noqa: F401
from app.models.user import User  # noqa: F401
from app.routes import register_routes
from app.service import api_prefix
from app.utils.constants import SENSITIVE_CONFIG_KEYS
from app.utils.limiter import limiter
from app.utils.logger import logger

# Initialisation des extensions Flask
migrate = Migrate()
ma = Marshmallow()
metrics = PrometheusMetrics(app=None)

# Export create_app
__all__ = ["create_app"]


def register_test_routes(app):
    """Register test-only routes that trigger error handlers directly.

    Args:
        app (Flask): The Flask application instance.
    """

    @app.route("/unauthorized")
    def trigger_unauthorized():
        abort(401)

    @app.route("/forbidden")
    def trigger_forbidden():
        abort(403)

    @app.route("/bad")
    def trigger_bad():
        abort(400)

    @app.route("/conflict")
    def trigger_conflict():
        abort(409)

    @app.route("/unprocessable")
    def trigger_unprocessable():
        abort(422)

    @app.route("/fail")
    def trigger_fail():
        raise InternalServerError("Test internal error")


def register_extensions(app):
    """Initialize and register Flask extensions on the application.

    Args:
        app (Flask): The Flask application instance.
    """
    db.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)

    # Prometheus exposes /{api_version}/metrics
    api_version = api_prefix()
    metrics.path = f"/{api_version}/metrics"
    metrics.init_app(app)
    logger.info("Prometheus metrics initialized.", path=metrics.path)

    # Flask-Limiter reads its settings from app.config
    rate_limit_storage = app.config.get("RATE_LIMIT_STORAGE", "memory")
    redis_url = app.config.get("REDIS_URL")
    if rate_limit_storage == "redis" and redis_url:
        app.config["RATELIMIT_STORAGE_URI"] = redis_url
    else:
        app.config["RATELIMIT_STORAGE_URI"] = "memory://"
    app.config["RATELIMIT_STRATEGY"] = app.config.get(
        "RATE_LIMIT_STRATEGY", "fixed-window"
    )
    app.config["RATELIMIT_ENABLED"] = app.config.get("RATE_LIMIT_ENABLED", False)

    limiter.init_app(app)

    if app.config["RATELIMIT_ENABLED"]:
        logger.info(
            "Rate limiter enabled.",
            storage=rate_limit_storage,
            strategy=app.config["RATELIMIT_STRATEGY"],
        )
    else:
        logger.info(
            "Rate limiter initialized but disabled (no limits will be enforced)."
        )

    logger.info("Extensions registered successfully.")


def _request_details() -> dict[str, Any]:
    return {
        "path": request.path,
        "method": request.method,
        "request_id": getattr(g, "request_id", None),
    }


def _error_response(code: int, error: str, message: str, **extra) -> tuple:
    """Error envelope shared by every framework-level error."""
    return {
        "success": False,
        "error": error,
        "message": message,
        "details": {**_request_details(), **extra},
    }, code


def register_error_handlers(app):
    """Register custom error handlers for the Flask application.

    Every handler answers with the portal envelope
    ``{"success": false, "error", "message", "details"}``.

    Args:
        app (Flask): The Flask application instance.
    """

    @app.errorhandler(400)
    def bad_request(err):
        """Handler for 400 (bad request) errors."""
        logger.warning("Bad request received.", error=str(err), **_request_details())
        return _error_response(400, "bad_request", "Bad request")

    @app.errorhandler(401)
    def unauthorized(err):
        """Handler for 401 (unauthorized) errors."""
        logger.warning(
            "Unauthorized access attempt detected.",
            error=str(err),
            **_request_details(),
        )
        return _error_response(401, "unauthorized", "Unauthorized")

    @app.errorhandler(403)
    def forbidden(err):
        """Handler for 403 (forbidden) errors."""
        logger.warning(
            "Forbidden access attempt detected.", error=str(err), **_request_details()
        )
        return _error_response(403, "forbidden", "Forbidden")

    @app.errorhandler(404)
    def not_found(err):
        """Handler for 404 (resource not found) errors."""
        logger.warning("Resource not found.", error=str(err), **_request_details())
        return _error_response(404, "not_found", "Resource not found")

    @app.errorhandler(409)
    def conflict(err):
        """Handler for 409 (conflict) errors."""
        logger.warning("Conflict detected.", error=str(err), **_request_details())
        return _error_response(409, "conflict", "Conflict")

    @app.errorhandler(415)
    def unsupported_media_type(err):
        """Handler for 415 (unsupported media type) errors."""
        logger.warning("Unsupported media type.", error=str(err), **_request_details())
        return _error_response(
            415,
            "unsupported_media_type",
            "Unsupported media type",
            exception=str(err),
        )

    @app.errorhandler(422)
    def unprocessable_entity(err):
        """Handler for 422 (unprocessable entity) errors."""
        logger.warning("Unprocessable entity.", error=str(err), **_request_details())
        return _error_response(422, "validation_error", "Unprocessable entity")

    @app.errorhandler(429)
    def ratelimit_handler(err):
        """Handler for 429 (too many requests) errors."""
        logger.warning("Rate limit exceeded.", error=str(err), **_request_details())
        return _error_response(
            429,
            "rate_limit_exceeded",
            "Rate limit exceeded. Please try again later.",
            description=(
                str(err.description) if hasattr(err, "description") else str(err)
            ),
        )

    @app.errorhandler(500)
    def internal_error(err):
        """Handler for 500 (internal server error) errors."""
        logger.error(
            "Internal server error", error=str(err), exc_info=True, **_request_details()
        )
        body, code = _error_response(500, "internal_error", "Internal server error")
        if app.config.get("DEBUG"):
            body["details"]["exception"] = str(err)
        return body, code

    logger.info("Error handlers registered successfully.")


def _get_endpoint_string(host, port):
    """Format endpoint as HOST:PORT if both exist, otherwise just host."""
    if host and port:
        return f"{host}:{port}"
    if host:
        return host
    return None


def _format_config_value(key, value, sensitive_keys):
    """Format a config value for logging, masking if sensitive.

    Args:
        key: The configuration key
        value: The configuration value
        sensitive_keys: Set of sensitive key patterns

    Returns:
        str: Formatted key=value string
    """
    if any(sensitive in key.upper() for sensitive in sensitive_keys):
        masked_value = "<MASKED>" if value else "<NOT SET>"
        return f"  {key}={masked_value}"

    if isinstance(value, (str, int, bool, float)) or value is None:
        return f"  {key}={value}"
    return f"  {key}={type(value).__name__}"


def _log_environment_variables(app):
    """Log the configuration at application startup with sensitive values masked.

    Args:
        app (Flask): The Flask application instance.
    """
    sensitive_keys = {*SENSITIVE_CONFIG_KEYS, "PASSWORD", "TOKEN", "API_KEY"}

    config = app.config
    env_vars = []

    db_endpoint = _get_endpoint_string(
        config.get("DATABASE_HOST"), config.get("DATABASE_PORT")
    )
    if db_endpoint:
        env_vars.append(f"  DATABASE_ENDPOINT={db_endpoint}")

    redis_endpoint = _get_endpoint_string(
        config.get("REDIS_HOST"), config.get("REDIS_PORT")
    )
    if redis_endpoint:
        env_vars.append(f"  REDIS_ENDPOINT={redis_endpoint}")

    for key in sorted(config.keys()):
        if not key.startswith("_"):
            env_vars.append(_format_config_value(key, config.get(key), sensitive_keys))

    config_str = "\n".join(sorted(set(env_vars)))
    logger.info(f"Application configuration:\n{config_str}")


def _seed_column_settings_at_startup(app) -> None:
    """Seed the default column settings when enabled and the table exists.

    A database that is not migrated yet only skips seeding; the import
    command can seed later.
    """
    if not app.config.get("SEED_COLUMN_SETTINGS", False):
        logger.info("Column settings seeding disabled.")
        return

    from app.services.column_registry import seed_column_settings_on_startup

    with app.app_context():
        try:
            if not inspect(db.engine).has_table(ColumnSetting.__tablename__):
                logger.info(
                    "Column settings table not found, seeding skipped.",
                    table=ColumnSetting.__tablename__,
                )
                return
            seed_column_settings_on_startup()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Failed to seed column settings.", error=str(e))


def create_app(config_class):
    """Factory to create and configure the Flask application.

    Args:
        config_class: The configuration class or import path to use for Flask.

    Returns:
        Flask: The configured and ready-to-use Flask application instance.
    """
    app = Flask(__name__)

    app.config.from_object(config_class)

    # Validate configuration consistency
    if isinstance(config_class, str):
        config_cls = import_string(config_class)
    else:
        config_cls = config_class

    if hasattr(config_cls, "validate"):
        config_cls.validate()
        # validate() may have built the database URI from its components
        if getattr(config_cls, "SQLALCHEMY_DATABASE_URI", None):
            app.config["SQLALCHEMY_DATABASE_URI"] = config_cls.SQLALCHEMY_DATABASE_URI

    env = os.getenv("FLASK_ENV")
    logger.info("Creating app in environment.", environment=env)

    if app.config.get("CORS_ENABLED", True):
        cors_origins = app.config.get("CORS_ORIGINS", "*")
        if isinstance(cors_origins, str):
            origins_list = [origin.strip() for origin in cors_origins.split(",")]
        else:
            origins_list = cors_origins

        cors_allow_credentials = app.config.get("CORS_ALLOW_CREDENTIALS", True)
        cors_max_age = app.config.get("CORS_MAX_AGE", 3600)

        CORS(
            app,
            supports_credentials=cors_allow_credentials,
            origins=origins_list,
            max_age=cors_max_age,
        )
        logger.info(
            "CORS enabled.",
            origins=origins_list,
            credentials=cors_allow_credentials,
            max_age=cors_max_age,
        )
    else:
        logger.info("CORS disabled.")

    register_extensions(app)
    register_error_handlers(app)
    register_routes(app)
    if app.config.get("TESTING"):
        register_test_routes(app)

    _seed_column_settings_at_startup(app)

    _log_environment_variables(app)

    logger.info("App created successfully.")
    return app
