# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Field sizes and fixed values shared by the portal models."""

# Users
BUSINESS_NUMBER_MAX_LENGTH = 10
COMPANY_NAME_MAX_LENGTH = 200
PERSON_NAME_MAX_LENGTH = 100
ZIPCODE_MAX_LENGTH = 10
ADDRESS_MAX_LENGTH = 300
PHONE_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 255
PASSWORD_HASH_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6

# Settlements
SETTLEMENT_MONTH_MAX_LENGTH = 7
SETTLEMENT_CODE_MAX_LENGTH = 100
SETTLEMENT_TEXT_MAX_LENGTH = 255
SETTLEMENT_NOTE_MAX_LENGTH = 1000

# Column settings
COLUMN_KEY_MAX_LENGTH = 100
COLUMN_NAME_MAX_LENGTH = 100

# CSO matching
CSO_COMPANY_NAME_MAX_LENGTH = 200
CSO_MATCHING_MAX_REPORTED_ERRORS = 10

# Email logs
EMAIL_SUBJECT_MAX_LENGTH = 500
EMAIL_TEMPLATE_TYPES = (
    "registration_request",
    "approval_complete",
    "approval_rejected",
    "settlement_uploaded",
    "password_reset",
    "mail_merge",
)
EMAIL_STATUSES = ("pending", "sent", "failed")

# Company settings
COMPANY_FIELD_MAX_LENGTH = 255

# Password reset tokens
RESET_TOKEN_MAX_LENGTH = 255
RESET_TOKEN_EXPIRY_MINUTES = 30
