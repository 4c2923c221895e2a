# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the column mapping endpoint."""

from app.resources.constants import ERROR_VALIDATION, MSG_NO_INPUT_DATA
from app.schemas.constants import HEADERS_EMPTY


class TestColumnMappingResource:
    """POST /column-mappings proposes registry headers."""

    def test_exact_and_wrapped_headers(self, client, api_url):
        response = client.post(
            api_url("column-mappings"),
            json={"headers": ["사업자번호", "정산월", "제약수수료\n\n합계"]},
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        mappings = body["data"]["mappings"]
        assert [m["columnKey"] for m in mappings] == [
            "business_number",
            "정산월",
            "제약수수료_합계",
        ]
        assert all(m["score"] == 1.0 for m in mappings)
        assert mappings[0]["isRequired"] is True
        assert body["data"]["missingRequired"] == []
        assert "사업자번호" in body["data"]["dbColumnOptions"]

    def test_blank_cells_are_dropped(self, client, api_url):
        response = client.post(
            api_url("column-mappings"), json={"headers": ["  정산월 ", None, ""]}
        )

        data = response.get_json()["data"]
        assert [m["excelColumn"] for m in data["mappings"]] == ["정산월"]
        assert data["missingRequired"] == ["사업자번호"]

    def test_unknown_header_is_unmapped(self, client, api_url):
        response = client.post(
            api_url("column-mappings"),
            json={"headers": ["zzzzzz"], "threshold": 0.99},
        )

        mapping = response.get_json()["data"]["mappings"][0]
        assert mapping["dbColumn"] is None
        assert mapping["columnKey"] is None
        assert mapping["score"] == 0.0

    def test_missing_body(self, client, api_url):
        response = client.post(api_url("column-mappings"), json={})

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "message": MSG_NO_INPUT_DATA,
        }

    def test_validation_error(self, client, api_url):
        response = client.post(
            api_url("column-mappings"), json={"headers": [], "threshold": 2}
        )

        assert response.status_code == 422
        body = response.get_json()
        assert body["message"] == ERROR_VALIDATION
        assert body["errors"]["headers"] == [HEADERS_EMPTY]
        assert "threshold" in body["errors"]
