# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for health endpoint."""

from datetime import datetime
from unittest.mock import patch

from app.service import SERVICE_NAME


class TestHealthEndpoint:
    """Test cases for the /health endpoint."""

    def test_health_endpoint_returns_ok_status(self, client, api_url):
        """Test that health endpoint returns ok status."""
        response = client.get(api_url("health"))

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["service"] == SERVICE_NAME

    def test_health_endpoint_timestamp_format(self, client, api_url):
        """Test that health endpoint returns proper ISO timestamp."""
        response = client.get(api_url("health"))
        timestamp = response.get_json()["timestamp"]

        assert timestamp.endswith("Z")
        datetime.fromisoformat(timestamp.replace("Z", "+00:00"))

    def test_health_endpoint_does_not_touch_database(self, client, api_url):
        """Liveness must not depend on the database."""
        with patch("app.models.db.db.session.execute") as mock_execute:
            response = client.get(api_url("health"))

        assert response.status_code == 200
        mock_execute.assert_not_called()

    def test_health_endpoint_has_rate_limiting(self):
        """Test that health endpoint has rate limiting configured."""
        from app.resources.health import HealthResource

        assert hasattr(HealthResource.get, "__wrapped__")

    def test_health_endpoint_response_structure(self, client, api_url):
        """Test that health endpoint returns correct response structure."""
        response = client.get(api_url("health"))
        data = response.get_json()

        assert set(data.keys()) == {"status", "service", "timestamp"}
