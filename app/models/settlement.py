# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Settlement rows uploaded from the monthly commission spreadsheets.

Database columns keep the Korean names used by the spreadsheets and by
column settings (``정산월``, ``제약수수료_합계`` ...). Python attributes are
ASCII. Records travelling through the services are plain dicts keyed by
the Korean column key; ``from_record`` and ``to_dict`` translate.
"""

import math

from sqlalchemy import inspect as sa_inspect

from app.models.constants import (
    SETTLEMENT_CODE_MAX_LENGTH,
    SETTLEMENT_MONTH_MAX_LENGTH,
    SETTLEMENT_NOTE_MAX_LENGTH,
    SETTLEMENT_TEXT_MAX_LENGTH,
)
from app.models.db import db
from app.models.types import BusinessNumber
from app.utils.business_number import normalize_business_number

# Column keys of the numeric settlement fields
NUMERIC_COLUMNS = (
    "수량",
    "단가",
    "금액",
    "제약수수료_제한금액",
    "제약_수수료율",
    "추가수수료율_제약",
    "제약수수료율_통합",
    "제약_수수료",
    "거래처제품_인센티브율_제약",
    "거래처제품_제약",
    "관리업체_인센티브율_제약",
    "관리업체_제약",
    "제약수수료_합계",
    "담당_수수료율",
    "추가수수료율_담당",
    "담당수수료율_통합",
    "담당_수수료",
    "거래처제품_인센티브율_담당",
    "거래처제품_담당",
    "관리업체_인센티브율_담당",
    "관리업체_담당",
    "담당수수료_합계",
)

# Keys managed by the database rather than by uploaded records
_SYSTEM_COLUMNS = ("id", "upload_date")


def _code(name: str):
    return db.Column(name, db.String(SETTLEMENT_CODE_MAX_LENGTH), nullable=True)


def _text(name: str):
    return db.Column(name, db.String(SETTLEMENT_TEXT_MAX_LENGTH), nullable=True)


def _note(name: str):
    return db.Column(name, db.String(SETTLEMENT_NOTE_MAX_LENGTH), nullable=True)


def _number(name: str):
    return db.Column(name, db.Float, nullable=True)


def parse_number(value) -> float | None:
    """Parse a spreadsheet cell into a float.

    Thousands separators and surrounding spaces are ignored. Empty,
    unparseable or non-finite cells (``inf``, ``nan``) yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).replace(",", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_text(value) -> str | None:
    """Turn a cell into stripped text; empty cells become None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


class Settlement(db.Model):
    """One commission calculation line for a prescription month.

    A row belongs to a settlement month (``정산월``, ``YYYY-MM``) and is
    attributed to members through its ``CSO관리업체`` name (see
    CsoMatching) or directly through ``business_number``.
    """

    __tablename__ = "settlements"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    business_number = db.Column(BusinessNumber(), nullable=True, index=True)
    prescription_month = db.Column(
        "처방월", db.String(SETTLEMENT_MONTH_MAX_LENGTH), nullable=True
    )
    settlement_month = db.Column(
        "정산월", db.String(SETTLEMENT_MONTH_MAX_LENGTH), nullable=False, index=True
    )
    web_code = _code("웹코드")
    customer_name = _text("거래처명")
    internal_code = _code("자체코드")
    cso_company = db.Column(
        "CSO관리업체", db.String(SETTLEMENT_TEXT_MAX_LENGTH), nullable=True, index=True
    )
    cso_company2 = _text("CSO관리업체2")
    department1 = _text("부서1")
    department2 = _text("부서2")
    department3 = _text("부서3")
    sales_rep = _text("영업사원")
    manufacturer = _text("제조사")
    insurance_code = _code("보험코드")
    product_name = _text("제품명")

    quantity = _number("수량")
    unit_price = _number("단가")
    amount = _number("금액")

    pharma_fee_cap = _number("제약수수료_제한금액")
    pharma_fee_rate = _number("제약_수수료율")
    pharma_extra_fee_rate = _number("추가수수료율_제약")
    pharma_combined_fee_rate = _number("제약수수료율_통합")
    pharma_fee = _number("제약_수수료")
    pharma_customer_incentive_rate = _number("거래처제품_인센티브율_제약")
    pharma_customer_incentive = _number("거래처제품_제약")
    pharma_manager_incentive_rate = _number("관리업체_인센티브율_제약")
    pharma_manager_incentive = _number("관리업체_제약")
    pharma_fee_total = _number("제약수수료_합계")

    rep_fee_rate = _number("담당_수수료율")
    rep_extra_fee_rate = _number("추가수수료율_담당")
    rep_combined_fee_rate = _number("담당수수료율_통합")
    rep_fee = _number("담당_수수료")
    rep_customer_incentive_rate = _number("거래처제품_인센티브율_담당")
    rep_customer_incentive = _number("거래처제품_담당")
    rep_manager_incentive_rate = _number("관리업체_인센티브율_담당")
    rep_manager_incentive = _number("관리업체_담당")
    rep_fee_total = _number("담당수수료_합계")

    prescription_note = _note("처방전_비고")
    prescription_detail_note = _note("처방전_상세_비고")
    product_note = _note("제품_비고")
    product_note2 = _note("제품_비고_2")
    modified_at_text = _text("수정일시")
    modified_by = _text("수정자")

    upload_date = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return (
            f"<Settlement {self.id}> ({self.settlement_month}, "
            f"{self.cso_company}, {self.product_name})"
        )

    @classmethod
    def column_attributes(cls) -> dict[str, str]:
        """Map each database column name to its Python attribute name."""
        return {
            attr.columns[0].name: attr.key
            for attr in sa_inspect(cls).column_attrs
        }

    @classmethod
    def column_keys(cls) -> list[str]:
        """Column keys an uploaded record may carry."""
        return [
            name
            for name in cls.column_attributes()
            if name not in _SYSTEM_COLUMNS
        ]

    @classmethod
    def from_record(cls, record: dict) -> "Settlement":
        """Build a row from a dict keyed by column key.

        Unknown keys are ignored. Numeric columns are parsed leniently,
        text columns are stripped and the business number is normalized.
        """
        settlement = cls()
        for column_name, attribute in cls.column_attributes().items():
            if column_name in _SYSTEM_COLUMNS or column_name not in record:
                continue
            value = record[column_name]
            if column_name == "business_number":
                value = normalize_business_number(value) or None
            elif column_name in NUMERIC_COLUMNS:
                value = parse_number(value)
            else:
                value = parse_text(value)
            setattr(settlement, attribute, value)
        return settlement

    def to_dict(self) -> dict:
        """Serialize the row keyed by column key."""
        data = {}
        for column_name, attribute in self.column_attributes().items():
            value = getattr(self, attribute)
            if column_name == "upload_date" and value is not None:
                value = value.isoformat()
            data[column_name] = value
        return data
