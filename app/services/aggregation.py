# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Aggregations over settlement rows already loaded in memory.

All functions take rows as dicts keyed by column key (see
Settlement.to_dict) and never touch the database. Missing or
non-numeric amounts count as zero.
"""

import math
from collections import defaultdict

from app.models.settlement import parse_number

TOTAL_FIELDS = ("수량", "금액", "제약수수료_합계", "담당수수료_합계")
SUBTOTAL_FIELDS = ("수량", "금액", "제약수수료_합계")

CUSTOMER_COLUMN = "거래처명"
CSO_COLUMN = "CSO관리업체"
DEFAULT_UNASSIGNED_LABEL = "(미지정)"


def _number(value) -> float:
    parsed = parse_number(value)
    if parsed is None or math.isnan(parsed):
        return 0
    return parsed


def _sum(rows: list[dict], fields) -> dict:
    return {field: sum(_number(row.get(field)) for row in rows) for field in fields}


def compute_totals(rows: list[dict]) -> dict:
    """Sum quantity, amount and both fee totals."""
    return _sum(rows, TOTAL_FIELDS)


def build_pivot(
    rows: list[dict], unassigned_label: str = DEFAULT_UNASSIGNED_LABEL
) -> dict:
    """Group rows by CSO company, then by customer.

    Both levels are sorted by name. Each customer carries its rows and a
    subtotal of SUBTOTAL_FIELDS; each CSO carries the sum of its customer
    subtotals.

    Returns:
        ``{"groups": [{csoName, customers: [{customerName, rows,
        subtotal}], total}], "grandTotal": {...}}``
    """
    grouped: dict[str, dict[str, list]] = defaultdict(lambda: defaultdict(list))
    for row in rows:
        cso_name = row.get(CSO_COLUMN) or unassigned_label
        customer_name = row.get(CUSTOMER_COLUMN) or unassigned_label
        grouped[cso_name][customer_name].append(row)

    groups = []
    grand_total = dict.fromkeys(SUBTOTAL_FIELDS, 0)
    for cso_name in sorted(grouped):
        customers = []
        cso_total = dict.fromkeys(SUBTOTAL_FIELDS, 0)
        for customer_name in sorted(grouped[cso_name]):
            customer_rows = grouped[cso_name][customer_name]
            subtotal = _sum(customer_rows, SUBTOTAL_FIELDS)
            customers.append(
                {
                    "customerName": customer_name,
                    "rows": customer_rows,
                    "subtotal": subtotal,
                }
            )
            for field in SUBTOTAL_FIELDS:
                cso_total[field] += subtotal[field]
        for field in SUBTOTAL_FIELDS:
            grand_total[field] += cso_total[field]
        groups.append({"csoName": cso_name, "customers": customers, "total": cso_total})

    return {"groups": groups, "grandTotal": grand_total}


def _summary_cells(
    column_keys: list[str], label_index: int, label: str, sums: dict
) -> list:
    cells = []
    for index, key in enumerate(column_keys):
        if index == label_index:
            cells.append(label)
        elif key in SUBTOTAL_FIELDS:
            cells.append(sums[key])
        else:
            cells.append(None)
    return cells


def pivot_table(pivot: dict, columns: list[dict]) -> dict:
    """Lay a pivot out as a flat table with subtotal and total rows.

    Args:
        pivot: Result of build_pivot.
        columns: Ordered ``{"column_key", "column_name"}`` dicts.

    Returns:
        ``{"header": [names], "rows": [{"type", "cells"}]}`` with row types
        ``detail``, ``subtotal`` (``"{customer} 합계"``) and ``total``
        (``"{cso} 총합계"``). A subtotal label sits in the customer column,
        else the CSO column, else the first column; a CSO total label sits
        in the CSO column, else the first column.
    """
    column_keys = [c["column_key"] for c in columns]
    cso_index = column_keys.index(CSO_COLUMN) if CSO_COLUMN in column_keys else 0
    if CUSTOMER_COLUMN in column_keys:
        label_index = column_keys.index(CUSTOMER_COLUMN)
    else:
        label_index = cso_index

    table_rows = []
    for group in pivot["groups"]:
        for customer in group["customers"]:
            for row in customer["rows"]:
                table_rows.append(
                    {"type": "detail", "cells": [row.get(k) for k in column_keys]}
                )
            table_rows.append(
                {
                    "type": "subtotal",
                    "cells": _summary_cells(
                        column_keys,
                        label_index,
                        f"{customer['customerName']} 합계",
                        customer["subtotal"],
                    ),
                }
            )
        table_rows.append(
            {
                "type": "total",
                "cells": _summary_cells(
                    column_keys, cso_index, f"{group['csoName']} 총합계", group["total"]
                ),
            }
        )

    return {"header": [c["column_name"] for c in columns], "rows": table_rows}


def cso_subtotals(
    rows: list[dict], unassigned_label: str = DEFAULT_UNASSIGNED_LABEL
) -> list[dict]:
    """Per-CSO sums of SUBTOTAL_FIELDS, sorted by CSO name."""
    grouped: dict[str, list] = defaultdict(list)
    for row in rows:
        grouped[row.get(CSO_COLUMN) or unassigned_label].append(row)
    return [
        {"csoName": name, **_sum(grouped[name], SUBTOTAL_FIELDS)}
        for name in sorted(grouped)
    ]


def paginate(rows: list, page: int = 1, page_size: int = 50) -> tuple[list, dict]:
    """Slice one page out of rows.

    Returns:
        ``(page_rows, {"page", "pageSize", "total", "totalPages"})``
    """
    page = max(int(page), 1)
    page_size = max(int(page_size), 1)
    total = len(rows)
    start = (page - 1) * page_size
    return rows[start : start + page_size], {
        "page": page,
        "pageSize": page_size,
        "total": total,
        "totalPages": math.ceil(total / page_size),
    }


def settlement_stats_by_month(rows: list[dict]) -> dict:
    """Row and business counts per settlement month, newest first."""
    months: dict[str, dict] = {}
    businesses = set()
    for row in rows:
        business_number = row.get("business_number")
        if business_number:
            businesses.add(business_number)
        month = row.get("정산월")
        if not month:
            continue
        entry = months.setdefault(
            month, {"count": 0, "businesses": set(), "amount": 0}
        )
        entry["count"] += 1
        if business_number:
            entry["businesses"].add(business_number)
        entry["amount"] += _number(row.get("금액"))

    return {
        "totalRows": len(rows),
        "totalBusinesses": len(businesses),
        "months": [
            {
                "month": month,
                "count": entry["count"],
                "businessCount": len(entry["businesses"]),
                "totalAmount": entry["amount"],
            }
            for month, entry in sorted(months.items(), reverse=True)
        ],
    }


def monthly_summary(rows: list[dict], summary_columns: list[str]) -> list[dict]:
    """Sum the summary columns per settlement month, newest first."""
    by_month: dict[str, list] = defaultdict(list)
    for row in rows:
        month = row.get("정산월")
        if month:
            by_month[month].append(row)

    return [
        {
            "settlement_month": month,
            "summaries": _sum(by_month[month], summary_columns),
            "row_count": len(by_month[month]),
        }
        for month in sorted(by_month, reverse=True)
    ]


def settlement_summary(rows: list[dict]) -> dict:
    """Figures used by mail merge for one business and month."""
    totals = compute_totals(rows)
    return {
        "총_금액": totals["금액"],
        "총_수수료": totals["제약수수료_합계"] + totals["담당수수료_합계"],
        "제약수수료_합계": totals["제약수수료_합계"],
        "담당수수료_합계": totals["담당수수료_합계"],
        "데이터_건수": len(rows),
        "총_수량": totals["수량"],
    }
