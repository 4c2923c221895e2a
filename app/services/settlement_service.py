# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Settlement storage and scoped queries.

Uploads replace whole settlement months: every row of a month present in
the upload is deleted before the new rows are inserted, so uploading the
same workbook twice leaves the table unchanged.

Members see the rows whose ``CSO관리업체`` is mapped to their business
number in CSO matching (compared after normalize_text), plus the rows
carrying their business number directly.
"""

from sqlalchemy.exc import SQLAlchemyError

from app.models.cso_matching import CsoMatching
from app.models.db import db
from app.models.settlement import Settlement, parse_text
from app.utils.business_number import normalize_business_number
from app.utils.logger import logger
from app.utils.text import normalize_text

SEARCH_FIELDS = ("제품명", "거래처명", "영업사원")


def replace_settlement_months(records: list[dict]) -> dict:
    """Store uploaded rows, replacing the months they cover.

    Args:
        records: Rows keyed by column key. Rows without ``정산월`` are
            skipped.

    Returns:
        ``{"rowCount", "settlementMonths", "skipped"}``; months are sorted
        newest first.

    Raises:
        SQLAlchemyError: When the write fails; nothing is kept.
    """
    rows = []
    skipped = 0
    for record in records:
        month = parse_text(record.get("정산월"))
        if not month:
            skipped += 1
            continue
        rows.append(Settlement.from_record({**record, "정산월": month}))

    months = sorted({row.settlement_month for row in rows}, reverse=True)

    try:
        if months:
            Settlement.query.filter(Settlement.settlement_month.in_(months)).delete(
                synchronize_session=False
            )
        db.session.add_all(rows)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.error(
            "Failed to store settlement upload.", months=months, exc_info=True
        )
        raise

    logger.info(
        "Settlement months replaced.",
        months=months,
        row_count=len(rows),
        skipped=skipped,
    )
    return {"rowCount": len(rows), "settlementMonths": months, "skipped": skipped}


def delete_settlement_month(month: str, dry_run: bool = False) -> int:
    """Delete every row of a settlement month and return how many went.

    With ``dry_run`` the rows are only counted.
    """
    query = Settlement.query.filter_by(settlement_month=month)
    if dry_run:
        return query.count()
    try:
        deleted = query.delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info("Settlement month deleted.", month=month, deleted=deleted)
    return deleted


def _month_query(month: str | None = None):
    query = Settlement.query
    if month:
        query = query.filter_by(settlement_month=month)
    return query.order_by(Settlement.id)


def settlements_for_business(business_number, month: str | None = None) -> list[dict]:
    """Rows visible to one member, as dicts keyed by column key."""
    digits = normalize_business_number(business_number)
    names = {
        normalize_text(name)
        for name in CsoMatching.names_for_business_number(digits)
    }
    names.discard("")

    rows = []
    for row in _month_query(month).all():
        if row.business_number == digits or (
            names and normalize_text(row.cso_company) in names
        ):
            rows.append(row.to_dict())
    return rows


def _matches_search(row: dict, needle: str) -> bool:
    for field in SEARCH_FIELDS:
        value = row.get(field)
        if value and needle in str(value).lower():
            return True
    return False


def query_settlements(
    month: str | None = None,
    business_number=None,
    search: str | None = None,
) -> list[dict]:
    """Fetch rows for the analysis views.

    Without a business number every row (of the month) is returned; with
    one the rows are scoped by CSO matching. ``search`` keeps rows whose
    product, customer or sales rep contains it, ignoring case.
    """
    if business_number:
        rows = settlements_for_business(business_number, month)
    else:
        rows = [row.to_dict() for row in _month_query(month).all()]

    if search and search.strip():
        needle = search.strip().lower()
        rows = [row for row in rows if _matches_search(row, needle)]
    return rows


def available_months(business_number=None) -> list[str]:
    """Distinct settlement months, newest first."""
    if business_number:
        months = {row["정산월"] for row in settlements_for_business(business_number)}
    else:
        months = {
            month
            for (month,) in db.session.query(Settlement.settlement_month).distinct()
        }
    return sorted((m for m in months if m), reverse=True)


def business_numbers_for_month(month: str) -> list[str]:
    """Business numbers carried by the rows of a settlement month."""
    numbers = (
        db.session.query(Settlement.business_number)
        .filter(Settlement.settlement_month == month)
        .distinct()
        .all()
    )
    return sorted(number for (number,) in numbers if number)
