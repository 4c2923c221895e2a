# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for the member import schema."""

import pytest
from marshmallow import ValidationError

from app.schemas.constants import (
    BUSINESS_NUMBER_INVALID,
    BUSINESS_NUMBER_NOT_UNIQUE,
    CEO_NAME_EMPTY,
    COMPANY_NAME_EMPTY,
    PASSWORD_TOO_SHORT,
)
from app.schemas.user_schema import UserImportSchema


def _record(**kwargs):
    record = {
        "business_number": "123-45-67890",
        "company_name": " 테스트상사 ",
        "ceo_name": "홍길동",
        "email": "member@example.com",
    }
    record.update(kwargs)
    return record


class TestUserImportSchema:
    """Test cases for UserImportSchema."""

    def test_valid_record_is_cleaned(self, session):
        """Strings are stripped and the business number reduced to digits."""
        result = UserImportSchema().load(_record(password="", phone1=" 010 "))

        assert result["business_number"] == "1234567890"
        assert result["company_name"] == "테스트상사"
        assert result["phone1"] == "010"
        assert result["password"] is None

    def test_unknown_fields_are_excluded(self, session):
        result = UserImportSchema().load(_record(비고="메모"))
        assert "비고" not in result

    def test_invalid_business_number(self, session):
        with pytest.raises(ValidationError) as exc_info:
            UserImportSchema().load(_record(business_number="123-45"))
        assert exc_info.value.messages["business_number"] == [
            BUSINESS_NUMBER_INVALID
        ]

    def test_registered_business_number(self, member_factory):
        """A business number already used by a member is rejected."""
        member_factory("1234567890")
        with pytest.raises(ValidationError) as exc_info:
            UserImportSchema().load(_record())
        assert exc_info.value.messages["business_number"] == [
            BUSINESS_NUMBER_NOT_UNIQUE
        ]

    def test_empty_names(self, session):
        with pytest.raises(ValidationError) as exc_info:
            UserImportSchema().load(_record(company_name=" ", ceo_name=""))
        assert exc_info.value.messages["company_name"] == [COMPANY_NAME_EMPTY]
        assert exc_info.value.messages["ceo_name"] == [CEO_NAME_EMPTY]

    def test_invalid_email_and_short_password(self, session):
        with pytest.raises(ValidationError) as exc_info:
            UserImportSchema().load(_record(email="nope", password="123"))
        assert "email" in exc_info.value.messages
        assert exc_info.value.messages["password"] == [PASSWORD_TOO_SHORT]

    def test_non_object_record(self, session):
        """A record that is not an object fails validation instead of crashing."""
        with pytest.raises(ValidationError) as exc_info:
            UserImportSchema().load(["1234567890"])
        assert "_schema" in exc_info.value.messages
