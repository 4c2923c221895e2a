# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the framework error handlers."""

import pytest


@pytest.mark.parametrize(
    "path,status,error,message",
    [
        ("/bad", 400, "bad_request", "Bad request"),
        ("/unauthorized", 401, "unauthorized", "Unauthorized"),
        ("/forbidden", 403, "forbidden", "Forbidden"),
        ("/nonexistent-route", 404, "not_found", "Resource not found"),
        ("/conflict", 409, "conflict", "Conflict"),
        ("/unprocessable", 422, "validation_error", "Unprocessable entity"),
        ("/fail", 500, "internal_error", "Internal server error"),
    ],
)
def test_error_envelope(client, path, status, error, message):
    """Every handler answers with the same envelope."""
    response = client.get(path)

    assert response.status_code == status
    data = response.get_json()
    assert data["success"] is False
    assert data["error"] == error
    assert data["message"] == message
    assert data["details"]["path"] == path
    assert data["details"]["method"] == "GET"
    assert "request_id" in data["details"]


def test_not_found_keeps_method(client):
    response = client.post("/v0/settlements/unknown")
    assert response.status_code == 404
    assert response.get_json()["details"]["method"] == "POST"


def test_internal_server_error_handler_with_debug(app, client):
    """The exception text is included when DEBUG is on."""
    app.config["DEBUG"] = True

    data = client.get("/fail").get_json()

    assert "Test internal error" in data["details"]["exception"]


def test_internal_server_error_handler_without_debug(app, client):
    """Test the 500 error handler hides exception details when DEBUG is False."""
    app.config["DEBUG"] = False

    data = client.get("/fail").get_json()

    assert "exception" not in data["details"]
