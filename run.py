# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Development server for the CSO settlement portal API.

Loads ``.env.development`` (or ``.env``) outside containers, picks the
configuration class from FLASK_ENV and starts Flask's built-in server.
Use wsgi.py behind Gunicorn for anything else.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from app import create_app
from app.config import config_class_for
from app.utils.logger import logger


def _load_env_file():
    # Containers get their environment from the orchestrator
    if os.environ.get("IN_DOCKER_CONTAINER") or os.environ.get("APP_MODE"):
        logger.info("Running in Docker container, skipping .env file loading")
        return

    for env_file in (".env.development", ".env"):
        if Path(env_file).exists():
            load_dotenv(env_file)
            logger.info("Loaded environment file.", env_file=env_file)
            return
    logger.warning("No .env.development or .env file found")


def main():
    """Create the application for FLASK_ENV and run the development server."""
    _load_env_file()
    env = os.environ.get("FLASK_ENV", "development")

    config_class = config_class_for(env)
    logger.info("Selected configuration.", environment=env, config=config_class)

    app = create_app(config_class)

    debug = app.config.get("DEBUG", False)
    port = app.config.get("SERVICE_PORT", 5000)

    logger.info("Starting Flask development server.", port=port, debug=debug)
    app.run(host="0.0.0.0", port=port, debug=debug)  # nosec B104


if __name__ == "__main__":
    main()
