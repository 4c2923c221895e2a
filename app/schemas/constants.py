# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Validation error messages for schema validation.

This module centralizes all validation error messages used across
Marshmallow schemas to ensure consistency and easier maintenance.
"""

from app.models.constants import (
    COMPANY_NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    EMAIL_SUBJECT_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PERSON_NAME_MAX_LENGTH,
)

# Settlement month format, e.g. 2026-01
SETTLEMENT_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

# User import validation messages
BUSINESS_NUMBER_INVALID = "Business number must contain exactly 10 digits."
BUSINESS_NUMBER_NOT_UNIQUE = "Business number is already registered."
COMPANY_NAME_EMPTY = "Company name cannot be empty."
COMPANY_NAME_TOO_LONG = (
    f"Company name cannot exceed {COMPANY_NAME_MAX_LENGTH} characters."
)
CEO_NAME_EMPTY = "CEO name cannot be empty."
CEO_NAME_TOO_LONG = f"CEO name cannot exceed {PERSON_NAME_MAX_LENGTH} characters."
EMAIL_TOO_LONG = f"Email cannot exceed {EMAIL_MAX_LENGTH} characters."
PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters."

# Settlement query validation messages
SETTLEMENT_MONTH_INVALID = "Settlement month must use the YYYY-MM format."
PAGE_INVALID = "Page must be at least 1."
PAGE_SIZE_INVALID = "Page size must be at least 1."

# Column mapping validation messages
HEADERS_EMPTY = "At least one header is required."

# Mail merge validation messages
SUBJECT_EMPTY = "Subject cannot be empty."
SUBJECT_TOO_LONG = f"Subject cannot exceed {EMAIL_SUBJECT_MAX_LENGTH} characters."
BODY_EMPTY = "Body cannot be empty."
RECIPIENTS_EMPTY = "At least one recipient is required."
