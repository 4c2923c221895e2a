# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for settlement query strings."""

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_load,
    pre_load,
    validate,
    validates,
)

from app.schemas.constants import (
    BUSINESS_NUMBER_INVALID,
    PAGE_INVALID,
    PAGE_SIZE_INVALID,
    SETTLEMENT_MONTH_INVALID,
    SETTLEMENT_MONTH_PATTERN,
)
from app.utils.business_number import (
    is_valid_business_number,
    normalize_business_number,
)


def _drop_blank(data) -> dict:
    cleaned = {}
    for key, value in dict(data).items():
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        cleaned[key] = value
    return cleaned


class SettlementQuerySchema(Schema):
    """Query string shared by the settlement analysis endpoints.

    ``year_month`` is accepted as an alias of ``settlement_month``.
    ``columns`` is a comma separated list of column keys and loads as a
    list. Blank values count as absent.
    """

    settlement_month = fields.Str(
        required=False,
        allow_none=True,
        validate=validate.Regexp(
            SETTLEMENT_MONTH_PATTERN, error=SETTLEMENT_MONTH_INVALID
        ),
    )
    business_number = fields.Str(required=False, allow_none=True)
    search = fields.Str(required=False, allow_none=True)
    columns = fields.Str(required=False, allow_none=True)
    page = fields.Int(
        required=False,
        load_default=1,
        validate=validate.Range(min=1, error=PAGE_INVALID),
    )
    page_size = fields.Int(
        required=False,
        allow_none=True,
        validate=validate.Range(min=1, error=PAGE_SIZE_INVALID),
    )

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE

    @pre_load
    def normalize_params(self, data, **kwargs):
        """Drop blank parameters, resolve the month alias, clean 사업자번호."""
        data = _drop_blank(data)
        year_month = data.pop("year_month", None)
        if year_month and "settlement_month" not in data:
            data["settlement_month"] = year_month
        if "business_number" in data:
            data["business_number"] = normalize_business_number(data["business_number"])
        return data

    @validates("business_number")
    def validate_business_number(self, value, **kwargs):
        # A supplied filter must scope the rows, never fall back to all of them
        if value is not None and not is_valid_business_number(value):
            raise ValidationError(BUSINESS_NUMBER_INVALID)
        return value

    @post_load
    def split_columns(self, data, **kwargs):
        if data.get("columns"):
            data["columns"] = [
                key.strip() for key in data["columns"].split(",") if key.strip()
            ]
        return data


class IntegrityQuerySchema(Schema):
    """Query string of the CSO integrity check."""

    month = fields.Str(
        required=False,
        allow_none=True,
        validate=validate.Regexp(
            SETTLEMENT_MONTH_PATTERN, error=SETTLEMENT_MONTH_INVALID
        ),
    )

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        return _drop_blank(data)
