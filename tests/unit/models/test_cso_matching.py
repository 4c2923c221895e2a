# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the CsoMatching model."""

from app.models.cso_matching import CsoMatching


class TestUpsertMany:
    """Test suite for CsoMatching.upsert_many."""

    def test_creates_new_mappings(self, session):
        result = CsoMatching.upsert_many(
            [
                {"cso_company_name": "한국CSO", "business_number": "123-45-67890"},
                {"cso_company_name": "대한파마", "business_number": "2222222222"},
            ]
        )

        assert result == {"upserted": 2, "errors": [], "has_more_errors": False}
        assert CsoMatching.query.count() == 2
        assert CsoMatching.names_for_business_number("1234567890") == ["한국CSO"]

    def test_updates_existing_mapping_by_name(self, cso_matching):
        cso_matching({"한국CSO": "1111111111"})

        CsoMatching.upsert_many(
            [{"cso_company_name": "한국CSO", "business_number": "2222222222"}]
        )

        assert CsoMatching.query.count() == 1
        assert CsoMatching.query.one().business_number == "2222222222"

    def test_invalid_items_are_reported_with_row_numbers(self, session):
        result = CsoMatching.upsert_many(
            [
                {"cso_company_name": "", "business_number": "1234567890"},
                {"cso_company_name": "한국CSO", "business_number": "12345"},
                {"cso_company_name": "대한파마", "business_number": "2222222222"},
            ]
        )

        assert result["upserted"] == 1
        assert result["errors"] == [
            "행 1: 업체명이 비어있습니다.",
            "행 2: 유효하지 않은 사업자번호 (12345)",
        ]

    def test_errors_are_capped(self, session):
        items = [
            {"cso_company_name": f"업체{i}", "business_number": "1"} for i in range(12)
        ]

        result = CsoMatching.upsert_many(items)

        assert result["upserted"] == 0
        assert len(result["errors"]) == 10
        assert result["has_more_errors"] is True

    def test_later_duplicate_name_wins(self, session):
        CsoMatching.upsert_many(
            [
                {"cso_company_name": "한국CSO", "business_number": "1111111111"},
                {"cso_company_name": "한국CSO", "business_number": "2222222222"},
            ]
        )
        assert CsoMatching.query.one().business_number == "2222222222"

    def test_dry_run_writes_nothing(self, session):
        result = CsoMatching.upsert_many(
            [{"cso_company_name": "한국CSO", "business_number": "1234567890"}],
            dry_run=True,
        )
        assert result["upserted"] == 1
        assert CsoMatching.query.count() == 0


class TestCsoMatchingQueries:
    def test_names_for_unknown_number(self, session):
        assert CsoMatching.names_for_business_number(None) == []
        assert CsoMatching.names_for_business_number("9999999999") == []

    def test_to_dict(self, cso_matching):
        cso_matching({"한국CSO": "1111111111"})
        data = CsoMatching.query.one().to_dict()
        assert data["cso_company_name"] == "한국CSO"
        assert data["business_number"] == "1111111111"
        assert data["updated_at"] is not None
