# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""WSGI entry point of the settlement portal.

``gunicorn wsgi:app`` serves the application created for FLASK_ENV,
which defaults to production here.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Containers get their environment from the orchestrator
if not os.environ.get("IN_DOCKER_CONTAINER") and not os.environ.get("APP_MODE"):
    ENV_FILE = ".env.development"
    if Path(ENV_FILE).exists():
        load_dotenv(ENV_FILE)
    elif Path(".env").exists():
        load_dotenv(".env")

from app import create_app  # noqa: E402
from app.config import config_class_for  # noqa: E402

env = os.environ.get("FLASK_ENV", "production")
config_class = config_class_for(env, default="production")

app = create_app(config_class)

if __name__ == "__main__":
    app.run()
