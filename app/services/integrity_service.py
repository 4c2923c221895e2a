# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""CSO matching integrity check.

Every ``CSO관리업체`` name found in settlements is classified:

- ``unregistered``: no CSO matching entry for the name.
- ``pending_join``: matched to a business number no member has.
- ``normal``: matched to an existing member.

Members whose business number appears in settlement rows but that no
matched name points to are reported as ``missing_match``.
"""

from app.models.cso_matching import CsoMatching
from app.models.db import db
from app.models.settlement import Settlement
from app.models.user import User
from app.services.settlement_service import available_months
from app.utils.text import normalize_text

STATUS_ORDER = {"unregistered": 0, "pending_join": 1, "missing_match": 2, "normal": 3}


def _collect_cso_stats(month: str | None) -> dict[str, dict]:
    query = db.session.query(
        Settlement.cso_company, Settlement.settlement_month, Settlement.business_number
    )
    if month:
        query = query.filter(Settlement.settlement_month == month)

    stats: dict[str, dict] = {}
    for cso_name, settlement_month, business_number in query.all():
        if not cso_name:
            continue
        entry = stats.setdefault(
            cso_name, {"count": 0, "last_month": None, "business_numbers": set()}
        )
        entry["count"] += 1
        if settlement_month and (
            entry["last_month"] is None or settlement_month > entry["last_month"]
        ):
            entry["last_month"] = settlement_month
        if business_number:
            entry["business_numbers"].add(business_number)
    return stats


def _result(
    result_id, name, business_number, status, member, last_month, row_count
) -> dict:
    return {
        "id": result_id,
        "cso_company_name": name,
        "business_number": business_number,
        "status": status,
        "erp_company_name": member.company_name if member else None,
        "last_settlement_month": last_month,
        "is_approved": bool(member.is_approved) if member else None,
        "row_count": row_count,
    }


def check_integrity(month: str | None = None) -> dict:
    """Classify the CSO names of the settlements (of one month).

    Returns:
        ``{"results", "availableMonths", "stats"}``. Results are sorted by
        status (problems first), then by name.
    """
    cso_stats = _collect_cso_stats(month)

    matching = {
        normalize_text(m.cso_company_name): m.business_number
        for m in CsoMatching.query.all()
    }
    members = {
        user.business_number: user
        for user in User.query.filter_by(is_admin=False).all()
    }

    results = []
    for cso_name, stats in cso_stats.items():
        normalized = normalize_text(cso_name)
        business_number = matching.get(normalized)
        member = members.get(business_number) if business_number else None
        if business_number is None:
            status = "unregistered"
        elif member is None:
            status = "pending_join"
        else:
            status = "normal"
        results.append(
            _result(
                f"cso-{normalized}",
                cso_name,
                business_number,
                status,
                member,
                stats["last_month"],
                stats["count"],
            )
        )

    processed = {r["business_number"] for r in results if r["business_number"]}
    settlement_numbers = set()
    for stats in cso_stats.values():
        settlement_numbers |= stats["business_numbers"]

    for business_number in sorted(settlement_numbers - processed):
        member = members.get(business_number)
        if member is None:
            continue
        related = [
            s for s in cso_stats.values() if business_number in s["business_numbers"]
        ]
        months = [s["last_month"] for s in related if s["last_month"]]
        results.append(
            _result(
                f"user-{business_number}",
                member.company_name,
                business_number,
                "missing_match",
                member,
                max(months) if months else None,
                sum(s["count"] for s in related),
            )
        )

    results.sort(key=lambda r: (STATUS_ORDER[r["status"]], r["cso_company_name"]))

    counts = dict.fromkeys(STATUS_ORDER, 0)
    for result in results:
        counts[result["status"]] += 1

    return {
        "results": results,
        "availableMonths": available_months(),
        "stats": {"total": len(results), **counts},
    }
