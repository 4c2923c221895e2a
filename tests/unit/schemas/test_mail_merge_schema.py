# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for mail-merge request schemas."""

import pytest
from marshmallow import ValidationError

from app.schemas.constants import (
    BODY_EMPTY,
    BUSINESS_NUMBER_INVALID,
    RECIPIENTS_EMPTY,
    SUBJECT_EMPTY,
    SUBJECT_TOO_LONG,
)
from app.schemas.mail_merge_schema import (
    MailMergePreviewSchema,
    MailMergeRecipientsSchema,
    MailMergeRenderSchema,
)


class TestMailMergePreviewSchema:
    """Test cases for MailMergePreviewSchema."""

    def test_valid_template(self):
        result = MailMergePreviewSchema().load(
            {"subject": " {{정산월}} 정산서 ", "body": "본문", "year_month": ""}
        )
        assert result == {"subject": "{{정산월}} 정산서", "body": "본문", "year_month": None}

    def test_blank_subject_and_body(self):
        """Whitespace-only subject and body are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            MailMergePreviewSchema().load({"subject": "  ", "body": "\n "})
        assert exc_info.value.messages["subject"] == [SUBJECT_EMPTY]
        assert exc_info.value.messages["body"] == [BODY_EMPTY]

    def test_subject_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            MailMergePreviewSchema().load({"subject": "가" * 501, "body": "b"})
        assert exc_info.value.messages["subject"] == [SUBJECT_TOO_LONG]

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            MailMergePreviewSchema().load({})
        assert set(exc_info.value.messages) == {"subject", "body"}


class TestMailMergeRenderSchema:
    """Test cases for MailMergeRenderSchema."""

    def test_business_number_is_normalized(self):
        result = MailMergeRenderSchema().load(
            {
                "subject": "s",
                "body": "b",
                "business_number": "123-45-67890",
                "settlement_month": "",
            }
        )
        assert result["business_number"] == "1234567890"
        assert result["settlement_month"] is None

    def test_invalid_business_number(self):
        with pytest.raises(ValidationError) as exc_info:
            MailMergeRenderSchema().load(
                {"subject": "s", "body": "b", "business_number": "12-34"}
            )
        assert exc_info.value.messages["business_number"] == [
            BUSINESS_NUMBER_INVALID
        ]

    def test_business_number_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            MailMergeRenderSchema().load({"subject": "s", "body": "b"})
        assert "business_number" in exc_info.value.messages


class TestMailMergeRecipientsSchema:
    def test_recipients(self):
        assert MailMergeRecipientsSchema().load({"recipients": ["all"]}) == {
            "recipients": ["all"]
        }

    def test_empty_recipients(self):
        with pytest.raises(ValidationError) as exc_info:
            MailMergeRecipientsSchema().load({"recipients": []})
        assert exc_info.value.messages["recipients"] == [RECIPIENTS_EMPTY]
