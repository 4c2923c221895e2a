# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the offline importer."""

import json

import pytest

from app.models.cso_matching import CsoMatching
from app.models.settlement import Settlement
from app.models.user import User
from app.services.importer import (
    MORE_ERRORS,
    NO_VALID_ROWS,
    ImportFileError,
    cap_errors,
    default_password,
    import_cso_matching,
    import_settlements,
    import_users,
    load_import_file,
)


def _member(business_number, **kwargs):
    record = {
        "business_number": business_number,
        "company_name": "테스트상사",
        "ceo_name": "홍길동",
        "email": "member@example.com",
    }
    record.update(kwargs)
    return record


class TestLoadImportFile:
    def test_plain_list(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps([{"a": 1}]), encoding="utf-8")
        assert load_import_file(path) == ([{"a": 1}], None)

    def test_records_with_mapping(self, tmp_path):
        path = tmp_path / "settlements.json"
        path.write_text(
            json.dumps({"records": [{"a": 1}], "mapping": {"정산 월": "정산월"}}),
            encoding="utf-8",
        )
        assert load_import_file(path) == ([{"a": 1}], {"정산 월": "정산월"})

    @pytest.mark.parametrize(
        "content",
        ["{not json", json.dumps({"records": "x"}), json.dumps([1, 2])],
    )
    def test_invalid_files(self, tmp_path, content):
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ImportFileError):
            load_import_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportFileError, match="not found"):
            load_import_file(tmp_path / "missing.json")


class TestHelpers:
    def test_cap_errors(self):
        errors = [f"e{i}" for i in range(12)]
        capped = cap_errors(errors)
        assert capped[:10] == errors[:10]
        assert capped[-1] == MORE_ERRORS
        assert cap_errors(["e"]) == ["e"]
        assert cap_errors(["e"], has_more=True) == ["e", MORE_ERRORS]

    def test_default_password(self):
        assert default_password("1234567890") == "u1234567890"


class TestImportUsers:
    def test_imports_members_with_default_password(self, session):
        result = import_users([_member("123-45-67890")])

        assert result == {"imported": 1, "skipped": 0, "errors": [], "dry_run": False}
        user = User.get_by_business_number("1234567890")
        assert user.check_password("u1234567890")
        assert user.must_change_password is True
        assert user.is_approved is True

    def test_explicit_password_is_kept(self, session):
        import_users([_member("1234567890", password="mypassword")])
        user = User.get_by_business_number("1234567890")
        assert user.check_password("mypassword")
        assert user.must_change_password is False

    def test_registered_and_repeated_numbers_are_skipped(self, member_factory):
        member_factory("1111111111")

        result = import_users(
            [
                _member("1111111111"),
                _member("2222222222"),
                _member("222-22-22222"),
            ]
        )

        assert result["imported"] == 1
        assert result["skipped"] == 2
        assert result["errors"] == [
            "행 1: 이미 등록된 사업자번호 (1111111111)",
            "행 3: 중복된 사업자번호 (2222222222)",
        ]

    def test_invalid_records_are_reported(self, session):
        result = import_users([_member("123", email="not-an-email")])

        assert result["imported"] == 0
        assert result["skipped"] == 0
        assert result["errors"][0].startswith("행 1: ")
        assert "business_number" in result["errors"][0]
        assert "email" in result["errors"][0]

    def test_dry_run_writes_nothing(self, session):
        result = import_users([_member("1234567890")], dry_run=True)
        assert result["imported"] == 1
        assert result["dry_run"] is True
        assert User.query.count() == 0


class TestImportCsoMatching:
    def test_upserts_and_reports(self, session):
        result = import_cso_matching(
            [
                {"cso_company_name": "한국CSO", "business_number": "1111111111"},
                {"cso_company_name": "", "business_number": "1111111111"},
            ]
        )
        assert result["imported"] == 1
        assert result["errors"] == ["행 2: 업체명이 비어있습니다."]
        assert CsoMatching.query.count() == 1

    def test_more_errors_marker(self, session):
        records = [{"cso_company_name": "x", "business_number": "1"}] * 11
        result = import_cso_matching(records)
        assert len(result["errors"]) == 11
        assert result["errors"][-1] == MORE_ERRORS


class TestImportSettlements:
    def _record(self, business_number="1234567890", month="2026-01"):
        return {
            "정산월": month,
            "사업자번호": business_number,
            "CSO관리업체": "한국CSO",
            "제약수수료\n\n합계": "1,000",
        }

    def test_stores_rows_by_registry_headers(self, session):
        result = import_settlements([self._record(), self._record(month="2025-12")])

        assert result["rowCount"] == 2
        assert result["settlementMonths"] == ["2026-01", "2025-12"]
        assert result["errors"] == []
        row = Settlement.query.filter_by(settlement_month="2026-01").one()
        assert row.pharma_fee_total == 1000.0
        assert row.business_number == "1234567890"

    def test_custom_mapping(self, session):
        records = [{"정산 년월": "2026-01", "사업자 번호": "1234567890"}]
        mapping = {"정산 년월": "정산월", "사업자 번호": "사업자번호"}

        result = import_settlements(records, mapping)

        assert result["rowCount"] == 1
        assert Settlement.query.one().settlement_month == "2026-01"

    def test_invalid_business_numbers_are_reported(self, session):
        result = import_settlements(
            [self._record(), self._record(""), self._record("12-34")]
        )

        assert result["rowCount"] == 1
        assert result["skipped"] == 2
        assert result["errors"] == [
            "행 2: 사업자번호가 없습니다.",
            '행 3: 유효하지 않은 사업자번호 "12-34"',
        ]

    def test_no_valid_rows(self, session):
        result = import_settlements([self._record("")])

        assert result["rowCount"] == 0
        assert result["errors"][-1] == NO_VALID_ROWS
        assert Settlement.query.count() == 0

    def test_dry_run_counts_months(self, session):
        result = import_settlements(
            [self._record(), self._record(month="")], dry_run=True
        )

        assert result["rowCount"] == 1
        assert result["settlementMonths"] == ["2026-01"]
        assert result["skipped"] == 1
        assert Settlement.query.count() == 0
