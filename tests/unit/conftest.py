# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit test configuration and fixtures.

The environment is configured before any application module is imported
so that .env.development is never loaded and the in-memory SQLite
database of TestingConfig is used.

Fixtures:
    app: Flask application with every table created.
    client: Test client for HTTP requests.
    session: Database session for direct data manipulation.
    api_version / api_url: Versioned URL helpers.
    member_factory: Creates member accounts.
    cso_matching: Adds CSO matching rows.
    settlement_rows: Stores settlement rows.
    seeded_columns: Default column settings written to the database.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pytest import fixture

# Set APP_MODE BEFORE any app imports to prevent loading .env.development
os.environ["APP_MODE"] = "testing"
os.environ["FLASK_ENV"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_STORAGE"] = "memory"
os.environ["USE_REDIS_CACHE"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["SEED_COLUMN_SETTINGS"] = "false"

dotenv_path = Path(__file__).parent.parent.parent / ".env.testing"
if dotenv_path.exists():
    load_dotenv(dotenv_path=dotenv_path)

# Import app modules AFTER environment is configured  # noqa: E402
from app import create_app  # noqa: E402
from app.models.cso_matching import CsoMatching  # noqa: E402
from app.models.db import db  # noqa: E402
from app.models.settlement import Settlement  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.column_registry import ColumnSettingsSeeder  # noqa: E402


@fixture
def app():
    """Create a Flask application backed by a fresh in-memory database.

    Yields:
        Flask: The configured Flask application instance.
    """
    app = create_app("app.config.TestingConfig")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@fixture
def client(app):
    return app.test_client()


@fixture
def session(app):
    with app.app_context():
        yield db.session


@fixture
def api_version():
    """Get the API version prefix from the VERSION file (e.g. 'v0')."""
    version_file = Path(__file__).parent.parent.parent / "VERSION"
    try:
        version = version_file.read_text().strip()
        major_version = version.split(".")[0]
        return f"v{major_version}"
    except (FileNotFoundError, IndexError):
        return "v0"


@fixture
def api_url(api_version):
    """Build versioned API URLs: api_url('health') returns '/v0/health'."""

    def _build_url(path: str) -> str:
        return f"/{api_version}/{path.lstrip('/')}"

    return _build_url


@fixture
def member_factory(session):
    """Create and commit member accounts.

    Returns:
        callable: ``member_factory(business_number, company_name=..., **kwargs)``.
    """

    def _create(business_number, company_name="테스트상사", **kwargs):
        kwargs.setdefault("ceo_name", "홍길동")
        kwargs.setdefault("email", f"{business_number[-4:]}@example.com")
        kwargs.setdefault("password", "secret123")
        kwargs.setdefault("is_approved", True)
        user = User(
            business_number=business_number, company_name=company_name, **kwargs
        )
        session.add(user)
        session.commit()
        return user

    return _create


@fixture
def cso_matching(session):
    """Add CSO matching rows: ``cso_matching({"한국CSO": "1234567890"})``."""

    def _add(mapping: dict):
        for name, business_number in mapping.items():
            session.add(
                CsoMatching(cso_company_name=name, business_number=business_number)
            )
        session.commit()

    return _add


@fixture
def settlement_rows(session):
    """Store settlement records keyed by column key and return them."""

    def _add(records: list[dict]):
        rows = [Settlement.from_record(record) for record in records]
        session.add_all(rows)
        session.commit()
        return rows

    return _add


@fixture
def seeded_columns(session):
    """Write the default column settings to the database."""
    return ColumnSettingsSeeder().seed()


@fixture
def sample_records():
    """Two CSOs, three customers, two months."""
    return [
        {
            "정산월": "2026-01",
            "CSO관리업체": "한국CSO",
            "거래처명": "서울병원",
            "제품명": "아스피린정",
            "영업사원": "김영업",
            "수량": 10,
            "금액": 100000,
            "제약수수료_합계": 10000,
            "담당수수료_합계": 3000,
        },
        {
            "정산월": "2026-01",
            "CSO관리업체": "한국CSO",
            "거래처명": "부산의원",
            "제품명": "타이레놀",
            "영업사원": "이영업",
            "수량": 5,
            "금액": 50000,
            "제약수수료_합계": 5000,
            "담당수수료_합계": 1500,
        },
        {
            "정산월": "2026-01",
            "CSO관리업체": "대한파마",
            "거래처명": "서울병원",
            "제품명": "아스피린정",
            "영업사원": "박영업",
            "수량": 2,
            "금액": 20000,
            "제약수수료_합계": 2000,
            "담당수수료_합계": 600,
        },
        {
            "정산월": "2025-12",
            "CSO관리업체": "한국CSO",
            "거래처명": "서울병원",
            "제품명": "아스피린정",
            "영업사원": "김영업",
            "수량": 8,
            "금액": 80000,
            "제약수수료_합계": 8000,
            "담당수수료_합계": 2400,
        },
    ]
