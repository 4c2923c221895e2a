# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""End-to-end settlement flow.

Members, CSO matching and a spreadsheet export are imported the way the
import command does it, then read back through the REST API.
"""

import pytest

from app.services.importer import (
    import_cso_matching,
    import_settlements,
    import_users,
)

SPREADSHEET = [
    {
        "정산월": "2026-01",
        "사업자번호": "111-11-11111",
        "CSO관리업체": "한국CSO",
        "거래처명": "서울병원",
        "수량": "10",
        "금액": "100,000",
        "제약수수료\n\n합계": "10,000",
    },
    {
        "정산월": "2026-01",
        "사업자번호": "111-11-11111",
        "CSO관리업체": "한국CSO",
        "거래처명": "부산의원",
        "수량": "5",
        "금액": "50,000",
        "제약수수료\n\n합계": "5,000",
    },
    {
        "정산월": "2026-01",
        "사업자번호": "222-22-22222",
        "CSO관리업체": "대한파마",
        "거래처명": "서울병원",
        "수량": "2",
        "금액": "20,000",
        "제약수수료\n\n합계": "2,000",
    },
]


@pytest.fixture
def imported(session):
    import_users(
        [
            {
                "business_number": "111-11-11111",
                "company_name": "한국상사",
                "ceo_name": "홍길동",
                "email": "korea@example.com",
            }
        ]
    )
    import_cso_matching(
        [{"cso_company_name": "한국CSO", "business_number": "1111111111"}]
    )
    result = import_settlements(SPREADSHEET)
    assert result["rowCount"] == 3
    return result


class TestSettlementFlow:
    def test_column_mapping_of_export_headers(self, client, api_url):
        response = client.post(
            api_url("column-mappings"), json={"headers": list(SPREADSHEET[0])}
        )

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["missingRequired"] == []
        assert all(m["dbColumn"] for m in data["mappings"])

    def test_totals_for_all_members(self, client, api_url, imported):
        data = client.get(
            api_url("settlements/totals"), query_string={"settlement_month": "2026-01"}
        ).get_json()["data"]

        assert data["totals"]["금액"] == 170000
        assert data["pagination"]["total"] == 3

    def test_member_sees_only_own_rows(self, client, api_url, imported):
        data = client.get(
            api_url("settlements/pivot"),
            query_string={"business_number": "1111111111"},
        ).get_json()["data"]

        assert [g["csoName"] for g in data["groups"]] == ["한국CSO"]
        assert data["totals"]["금액"] == 150000

    def test_integrity_report(self, client, api_url, imported):
        data = client.get(api_url("cso-matching/integrity")).get_json()["data"]

        statuses = {r["cso_company_name"]: r["status"] for r in data["results"]}
        assert statuses == {"한국CSO": "normal", "대한파마": "unregistered"}

    def test_mail_merge_render(self, client, api_url, imported):
        response = client.post(
            api_url("mail-merge/render"),
            json={
                "subject": "{{정산월}} 정산서",
                "body": "{{업체명}} {{총_금액}}",
                "business_number": "1111111111",
                "settlement_month": "2026-01",
            },
        )

        assert response.status_code == 200
        assert response.get_json()["data"]["body"] == "한국상사 150,000원"

    def test_reimport_replaces_month(self, client, api_url, imported):
        import_settlements(SPREADSHEET[:1])

        data = client.get(api_url("settlements/stats")).get_json()["data"]
        assert data["totalRows"] == 1
