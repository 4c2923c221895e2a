# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Korean business registration number (사업자번호) helpers.

Business numbers arrive in many shapes (``123-45-67890``, ``1234567890``,
numbers read from spreadsheets as floats). They are always stored as the
bare 10-digit string.
"""

import re

BUSINESS_NUMBER_LENGTH = 10

_NON_DIGITS = re.compile(r"\D")


def normalize_business_number(value) -> str:
    """Strip everything but digits from a business number.

    Args:
        value: Raw business number (str, int or None).

    Returns:
        The digits only, or an empty string for None.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return _NON_DIGITS.sub("", str(value))


def is_valid_business_number(value) -> bool:
    """Return True when the value normalizes to exactly 10 digits."""
    return len(normalize_business_number(value)) == BUSINESS_NUMBER_LENGTH


def format_business_number(value) -> str:
    """Format a business number as ``XXX-XX-XXXXX``.

    Values that are not valid business numbers are returned unchanged.
    """
    digits = normalize_business_number(value)
    if len(digits) != BUSINESS_NUMBER_LENGTH:
        return value
    return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"
