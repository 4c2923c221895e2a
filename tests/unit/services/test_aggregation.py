# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for in-memory settlement aggregations."""

from app.services.aggregation import (
    build_pivot,
    compute_totals,
    cso_subtotals,
    monthly_summary,
    paginate,
    pivot_table,
    settlement_stats_by_month,
    settlement_summary,
)

COLUMNS = [
    {"column_key": "CSO관리업체", "column_name": "CSO"},
    {"column_key": "거래처명", "column_name": "거래처"},
    {"column_key": "제품명", "column_name": "제품"},
    {"column_key": "금액", "column_name": "금액"},
]


class TestComputeTotals:
    def test_sums_quantity_amount_and_fees(self, sample_records):
        assert compute_totals(sample_records) == {
            "수량": 25,
            "금액": 250000,
            "제약수수료_합계": 25000,
            "담당수수료_합계": 7500,
        }

    def test_missing_and_invalid_values_count_as_zero(self):
        rows = [{"금액": None}, {"금액": "abc"}, {"금액": "1,500"}, {"금액": float("nan")}]
        assert compute_totals(rows)["금액"] == 1500

    def test_empty_rows(self):
        assert compute_totals([]) == {
            "수량": 0,
            "금액": 0,
            "제약수수료_합계": 0,
            "담당수수료_합계": 0,
        }


class TestBuildPivot:
    def test_groups_are_sorted_with_subtotals(self, sample_records):
        pivot = build_pivot(sample_records[:3])

        assert [g["csoName"] for g in pivot["groups"]] == ["대한파마", "한국CSO"]
        korea = pivot["groups"][1]
        assert [c["customerName"] for c in korea["customers"]] == ["부산의원", "서울병원"]
        assert korea["customers"][1]["subtotal"] == {
            "수량": 10,
            "금액": 100000,
            "제약수수료_합계": 10000,
        }
        assert korea["total"]["금액"] == 150000
        assert pivot["grandTotal"]["금액"] == 170000

    def test_unassigned_label(self):
        pivot = build_pivot([{"금액": 10}], unassigned_label="미배정")
        assert pivot["groups"][0]["csoName"] == "미배정"
        assert pivot["groups"][0]["customers"][0]["customerName"] == "미배정"


class TestPivotTable:
    def test_row_types_and_labels(self, sample_records):
        table = pivot_table(build_pivot(sample_records[2:3]), COLUMNS)

        assert table["header"] == ["CSO", "거래처", "제품", "금액"]
        assert [r["type"] for r in table["rows"]] == ["detail", "subtotal", "total"]
        assert table["rows"][0]["cells"] == ["대한파마", "서울병원", "아스피린정", 20000]
        assert table["rows"][1]["cells"] == [None, "서울병원 합계", None, 20000]
        assert table["rows"][2]["cells"] == ["대한파마 총합계", None, None, 20000]

    def test_labels_fall_back_to_first_column(self, sample_records):
        columns = [
            {"column_key": "제품명", "column_name": "제품"},
            {"column_key": "금액", "column_name": "금액"},
        ]
        table = pivot_table(build_pivot(sample_records[2:3]), columns)
        assert table["rows"][1]["cells"] == ["서울병원 합계", 20000]
        assert table["rows"][2]["cells"] == ["대한파마 총합계", 20000]

    def test_subtotal_label_uses_cso_column_without_customer(self, sample_records):
        columns = [
            {"column_key": "금액", "column_name": "금액"},
            {"column_key": "CSO관리업체", "column_name": "CSO"},
        ]
        table = pivot_table(build_pivot(sample_records[2:3]), columns)
        assert table["rows"][1]["cells"] == [20000, "서울병원 합계"]


class TestCsoSubtotals:
    def test_sorted_by_name(self, sample_records):
        subtotals = cso_subtotals(sample_records)
        assert [s["csoName"] for s in subtotals] == ["대한파마", "한국CSO"]
        assert subtotals[1]["금액"] == 230000


class TestPaginate:
    def test_slices_pages(self):
        rows, pagination = paginate(list(range(5)), page=2, page_size=2)
        assert rows == [2, 3]
        assert pagination == {"page": 2, "pageSize": 2, "total": 5, "totalPages": 3}

    def test_page_past_the_end(self):
        rows, pagination = paginate(list(range(3)), page=5, page_size=2)
        assert rows == []
        assert pagination["totalPages"] == 2

    def test_invalid_values_are_clamped(self):
        rows, pagination = paginate([1, 2], page=0, page_size=0)
        assert rows == [1]
        assert pagination["page"] == 1
        assert pagination["pageSize"] == 1

    def test_empty_rows(self):
        assert paginate([], 1, 50) == (
            [],
            {"page": 1, "pageSize": 50, "total": 0, "totalPages": 0},
        )


class TestStatsAndSummaries:
    def test_stats_by_month_newest_first(self, sample_records):
        sample_records[0]["business_number"] = "1111111111"
        sample_records[1]["business_number"] = "1111111111"
        sample_records[2]["business_number"] = "2222222222"

        stats = settlement_stats_by_month(sample_records)

        assert stats["totalRows"] == 4
        assert stats["totalBusinesses"] == 2
        assert stats["months"][0] == {
            "month": "2026-01",
            "count": 3,
            "businessCount": 2,
            "totalAmount": 170000,
        }
        assert stats["months"][1]["month"] == "2025-12"
        assert stats["months"][1]["businessCount"] == 0

    def test_monthly_summary(self, sample_records):
        summary = monthly_summary(sample_records, ["금액", "제약수수료_합계"])
        assert [m["settlement_month"] for m in summary] == ["2026-01", "2025-12"]
        assert summary[0]["summaries"] == {"금액": 170000, "제약수수료_합계": 17000}
        assert summary[0]["row_count"] == 3

    def test_settlement_summary(self, sample_records):
        summary = settlement_summary(sample_records[:2])
        assert summary == {
            "총_금액": 150000,
            "총_수수료": 19500,
            "제약수수료_합계": 15000,
            "담당수수료_합계": 4500,
            "데이터_건수": 2,
            "총_수량": 15,
        }
