# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the admin system status endpoint."""

from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from app.models.company_settings import CompanySettings
from app.service import SERVICE_NAME


class TestSystemStatusResource:
    def test_counts_and_company(
        self, client, api_url, session, member_factory, settlement_rows,
        sample_records,
    ):
        member_factory("1111111111")
        member_factory("2222222222", is_approved=False)
        member_factory("3333333333", is_admin=True)
        settlement_rows(sample_records)
        session.add(CompanySettings(company_name="웨이브팜", ceo_name="김대표"))
        session.commit()

        response = client.get(api_url("system/status"))

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["service"] == SERVICE_NAME
        assert data["database"] == {"configured": True, "connected": True}
        assert data["userCount"] == 3
        assert data["memberCount"] == 1
        assert data["pendingApprovalCount"] == 1
        assert data["settlementCount"] == 4
        assert data["settlementMonths"] == ["2026-01", "2025-12"]
        assert data["emailStats"]["total"] == 0
        assert data["companyName"] == "웨이브팜"
        assert data["environment"] == "Development"
        assert data["version"]

    def test_without_company(self, client, api_url, session):
        data = client.get(api_url("system/status")).get_json()["data"]
        assert data["company"] is None
        assert data["companyName"] is None

    def test_database_failure_is_reported(self, client, api_url, session):
        with patch(
            "app.resources.system_status._data_summary",
            side_effect=SQLAlchemyError("down"),
        ):
            response = client.get(api_url("system/status"))

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["database"]["connected"] is False
        assert data["userCount"] is None
        assert data["settlementMonths"] == []

    def test_production_label(self, app, client, api_url, session):
        app.config["ENVIRONMENT"] = "production"
        data = client.get(api_url("system/status")).get_json()["data"]
        assert data["environment"] == "Production"
