# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""CSO matching: company names in settlement rows mapped to members.

Settlement spreadsheets name the CSO company (``CSO관리업체``) as free
text. Each matching row ties one such name to the 사업자번호 of the
member who should see those rows. Several names may point to the same
business number.
"""

from datetime import datetime, timezone

from app.models.constants import (
    CSO_COMPANY_NAME_MAX_LENGTH,
    CSO_MATCHING_MAX_REPORTED_ERRORS,
)
from app.models.db import db
from app.models.types import BusinessNumber
from app.utils.business_number import (
    is_valid_business_number,
    normalize_business_number,
)


class CsoMatching(db.Model):
    """Mapping of a CSO company name to a business number.

    Attributes:
        id: Integer primary key.
        cso_company_name: Name as written in ``CSO관리업체``, unique.
        business_number: 사업자번호 of the member the name belongs to.
        updated_at: Last upsert time.
    """

    __tablename__ = "cso_matching"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cso_company_name = db.Column(
        db.String(CSO_COMPANY_NAME_MAX_LENGTH), nullable=False, unique=True
    )
    business_number = db.Column(BusinessNumber(), nullable=False, index=True)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<CsoMatching {self.cso_company_name}> ({self.business_number})"

    @classmethod
    def names_for_business_number(cls, business_number) -> list[str]:
        """CSO company names mapped to a business number."""
        digits = normalize_business_number(business_number)
        if not digits:
            return []
        rows = (
            cls.query.filter_by(business_number=digits)
            .order_by(cls.cso_company_name)
            .all()
        )
        return [row.cso_company_name for row in rows]

    @classmethod
    def upsert_many(cls, items: list[dict], dry_run: bool = False) -> dict:
        """Validate and upsert mappings by company name.

        Each item needs a non-empty ``cso_company_name`` and a
        ``business_number`` that normalizes to 10 digits. Invalid items are
        reported as ``행 N: ...`` (1-based) and skipped. Valid items update
        the existing mapping of the same name or create a new one, and the
        whole batch is committed once. With ``dry_run`` nothing is written.

        Returns:
            ``{"upserted": int, "errors": [str], "has_more_errors": bool}``
            with at most CSO_MATCHING_MAX_REPORTED_ERRORS errors listed.
        """
        errors = []
        valid = {}
        for index, item in enumerate(items, start=1):
            name = str(item.get("cso_company_name") or "").strip()
            raw_number = item.get("business_number")
            if not name:
                errors.append(f"행 {index}: 업체명이 비어있습니다.")
                continue
            if not is_valid_business_number(raw_number):
                errors.append(f"행 {index}: 유효하지 않은 사업자번호 ({raw_number})")
                continue
            # Later rows win when a name repeats in one batch
            valid[name] = normalize_business_number(raw_number)

        if valid and not dry_run:
            existing = {
                row.cso_company_name: row
                for row in cls.query.filter(
                    cls.cso_company_name.in_(list(valid))
                ).all()
            }
            now = datetime.now(timezone.utc)
            for name, business_number in valid.items():
                row = existing.get(name)
                if row is None:
                    db.session.add(
                        cls(cso_company_name=name, business_number=business_number)
                    )
                else:
                    row.business_number = business_number
                    row.updated_at = now
            db.session.commit()

        return {
            "upserted": len(valid),
            "errors": errors[:CSO_MATCHING_MAX_REPORTED_ERRORS],
            "has_more_errors": len(errors) > CSO_MATCHING_MAX_REPORTED_ERRORS,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "cso_company_name": self.cso_company_name,
            "business_number": self.business_number,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
