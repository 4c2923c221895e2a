# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""
Unit tests for settlement query string schemas.

Covers the month alias, blank parameter handling, 사업자번호 cleanup,
column list splitting and pagination validation.
"""

import pytest
from marshmallow import ValidationError

from app.schemas.constants import (
    BUSINESS_NUMBER_INVALID,
    PAGE_INVALID,
    PAGE_SIZE_INVALID,
    SETTLEMENT_MONTH_INVALID,
)
from app.schemas.settlement_schema import IntegrityQuerySchema, SettlementQuerySchema


class TestSettlementQuerySchema:
    """Test cases for SettlementQuerySchema."""

    def test_defaults(self):
        """An empty query string loads with page 1."""
        assert SettlementQuerySchema().load({}) == {"page": 1}

    def test_year_month_alias(self):
        """year_month fills settlement_month when it is absent."""
        result = SettlementQuerySchema().load({"year_month": "2026-01"})
        assert result["settlement_month"] == "2026-01"

    def test_settlement_month_wins_over_alias(self):
        """An explicit settlement_month is kept over the alias."""
        result = SettlementQuerySchema().load(
            {"settlement_month": "2026-02", "year_month": "2026-01"}
        )
        assert result["settlement_month"] == "2026-02"

    @pytest.mark.parametrize("month", ["2026-13", "202601", "26-01", "2026-1"])
    def test_invalid_month(self, month):
        """Months must use the YYYY-MM format."""
        with pytest.raises(ValidationError) as exc_info:
            SettlementQuerySchema().load({"settlement_month": month})
        assert exc_info.value.messages["settlement_month"] == [
            SETTLEMENT_MONTH_INVALID
        ]

    def test_blank_values_are_ignored(self):
        """Blank strings count as absent parameters."""
        result = SettlementQuerySchema().load(
            {"settlement_month": " ", "search": "", "columns": "  "}
        )
        assert result == {"page": 1}

    def test_business_number_is_normalized(self):
        """Dashes are removed from the business number."""
        result = SettlementQuerySchema().load({"business_number": "123-45-67890"})
        assert result["business_number"] == "1234567890"

    @pytest.mark.parametrize("value", ["abc", "123", "123-45-678901"])
    def test_malformed_business_number_is_rejected(self, value):
        """A supplied business number must hold exactly 10 digits."""
        with pytest.raises(ValidationError) as exc_info:
            SettlementQuerySchema().load({"business_number": value})
        assert exc_info.value.messages["business_number"] == [BUSINESS_NUMBER_INVALID]

    def test_columns_are_split(self):
        """The comma separated column list loads as a list of keys."""
        result = SettlementQuerySchema().load({"columns": "제품명, 금액,,수량 "})
        assert result["columns"] == ["제품명", "금액", "수량"]

    def test_pagination(self):
        """Page values are integers of at least 1."""
        result = SettlementQuerySchema().load({"page": "2", "page_size": "10"})
        assert result["page"] == 2
        assert result["page_size"] == 10

        with pytest.raises(ValidationError) as exc_info:
            SettlementQuerySchema().load({"page": "0", "page_size": "0"})
        assert exc_info.value.messages["page"] == [PAGE_INVALID]
        assert exc_info.value.messages["page_size"] == [PAGE_SIZE_INVALID]

    def test_unknown_parameters_are_excluded(self):
        """Unknown query parameters are ignored."""
        assert SettlementQuerySchema().load({"sort": "asc"}) == {"page": 1}


class TestIntegrityQuerySchema:
    """Test cases for IntegrityQuerySchema."""

    def test_month(self):
        assert IntegrityQuerySchema().load({"month": "2026-01"}) == {
            "month": "2026-01"
        }

    def test_blank_month(self):
        assert IntegrityQuerySchema().load({"month": ""}) == {}

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            IntegrityQuerySchema().load({"month": "January"})
