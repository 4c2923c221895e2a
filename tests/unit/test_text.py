# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Unit tests for name normalization."""

from app.utils.text import normalize_column_name, normalize_text


def test_normalize_text_ignores_spaces_punctuation_and_case():
    assert normalize_text("(주) 한국 CSO") == "주한국cso"
    assert normalize_text("주한국cso") == normalize_text("(주)한국CSO")


def test_normalize_text_empty_values():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""
    assert normalize_text(" - ") == ""


def test_normalize_column_name():
    assert normalize_column_name("제약수수료\n\n합계") == "제약수수료합계"
    assert normalize_column_name("Product Name") == "productname"
    assert normalize_column_name(None) == ""
