# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for mail-merge rendering requests."""

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates,
)

from app.models.constants import EMAIL_SUBJECT_MAX_LENGTH
from app.schemas.constants import (
    BODY_EMPTY,
    BUSINESS_NUMBER_INVALID,
    RECIPIENTS_EMPTY,
    SETTLEMENT_MONTH_INVALID,
    SETTLEMENT_MONTH_PATTERN,
    SUBJECT_EMPTY,
    SUBJECT_TOO_LONG,
)
from app.utils.business_number import (
    is_valid_business_number,
    normalize_business_number,
)


class MailMergePreviewSchema(Schema):
    """Template rendered with sample values.

    Attributes:
        subject: Subject template (required, non-empty).
        body: Body template (required, non-empty).
        year_month: Month shown in place of ``{{정산월}}`` (optional).
    """

    subject = fields.Str(
        required=True,
        validate=validate.Length(max=EMAIL_SUBJECT_MAX_LENGTH, error=SUBJECT_TOO_LONG),
    )
    body = fields.Str(required=True)
    year_month = fields.Str(
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
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("subject"), str):
            data["subject"] = data["subject"].strip()
        if data.get("year_month") == "":
            data["year_month"] = None
        return data

    @validates("subject")
    def validate_subject(self, value, **kwargs):
        if not value:
            raise ValidationError(SUBJECT_EMPTY)
        return value

    @validates("body")
    def validate_body(self, value, **kwargs):
        if not value or not value.strip():
            raise ValidationError(BODY_EMPTY)
        return value


class MailMergeRenderSchema(MailMergePreviewSchema):
    """Template rendered for one member and settlement month."""

    business_number = fields.Str(required=True)
    settlement_month = fields.Str(
        required=False,
        allow_none=True,
        validate=validate.Regexp(
            SETTLEMENT_MONTH_PATTERN, error=SETTLEMENT_MONTH_INVALID
        ),
    )

    @pre_load
    def clean_business_number(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("business_number") is not None:
            data["business_number"] = normalize_business_number(
                data["business_number"]
            )
        if data.get("settlement_month") == "":
            data["settlement_month"] = None
        return data

    @validates("business_number")
    def validate_business_number(self, value, **kwargs):
        if not is_valid_business_number(value):
            raise ValidationError(BUSINESS_NUMBER_INVALID)
        return value


class MailMergeRecipientsSchema(Schema):
    """Recipient selector: ``["all"]``, ``["year_month:YYYY-MM"]`` or numbers."""

    recipients = fields.List(
        fields.Str(),
        required=True,
        validate=validate.Length(min=1, error=RECIPIENTS_EMPTY),
    )

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE
