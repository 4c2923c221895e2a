# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Integration tests configuration.

This conftest.py is for integration tests that run against real services
(PostgreSQL, Redis) running in Docker containers. Without
DATABASE_URL the suite falls back to an in-memory SQLite database.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pytest import fixture

# Load integration testing environment
dotenv_path = Path(__file__).parent.parent.parent / ".env.integration"
if dotenv_path.exists():
    load_dotenv(dotenv_path=dotenv_path, override=True)

os.environ["APP_MODE"] = "integration"
os.environ["FLASK_ENV"] = "integration"

# Disable rate limiting for tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_STORAGE"] = "memory"
os.environ.setdefault("USE_REDIS_CACHE", "false")
os.environ.setdefault("SEED_COLUMN_SETTINGS", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from app import create_app  # noqa: E402
from app.models.db import db  # noqa: E402
from app.services.column_registry import ColumnSettingsSeeder  # noqa: E402


@fixture(scope="session")
def app():
    """Create Flask application for integration testing.

    Tables are created once and the default column settings seeded, like
    a freshly migrated deployment.
    """
    app = create_app("app.config.IntegrationConfig")

    with app.app_context():
        db.create_all()
        ColumnSettingsSeeder().seed()
        yield app

        # Clean up
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@fixture(scope="function")
def client(app):
    """Create test client for making HTTP requests."""
    return app.test_client()


@fixture(scope="function")
def session(app):
    """Provide a database session, emptied of portal data after each test."""
    from app.models.cso_matching import CsoMatching
    from app.models.settlement import Settlement
    from app.models.user import User

    with app.app_context():
        yield db.session

        db.session.rollback()
        for model in (Settlement, CsoMatching, User):
            model.query.delete()
        db.session.commit()


@fixture
def api_version(app):
    """Get API version prefix from VERSION file."""
    version_file = Path(__file__).parent.parent.parent / "VERSION"
    try:
        version = version_file.read_text().strip()
        major_version = version.split(".")[0]
        return f"v{major_version}"
    except (FileNotFoundError, IndexError):
        return "v0"


@fixture
def api_url(api_version):
    """Build API URL with version prefix."""

    def _build_url(path: str) -> str:
        path = path.lstrip("/")
        return f"/{api_version}/{path}"

    return _build_url
