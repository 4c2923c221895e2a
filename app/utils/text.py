# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Text normalization used when comparing names typed by humans."""

import re

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w가-힣]")
_COLUMN_NOISE = re.compile(r"[\n\r\s]+")


def normalize_text(text: str | None) -> str:
    """Normalize a company name for matching.

    Removes whitespace and punctuation, keeping word characters and Hangul,
    then lowercases. ``"(주) 한국 CSO"`` and ``"주한국cso"`` compare equal.
    """
    if not text:
        return ""
    text = _WHITESPACE.sub("", text)
    return _NON_WORD.sub("", text).lower()


def normalize_column_name(name: str | None) -> str:
    """Normalize a spreadsheet header: drop line breaks and spaces, lowercase."""
    if not name:
        return ""
    return _COLUMN_NOISE.sub("", name).lower()
