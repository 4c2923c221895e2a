# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Resource constants.

This module defines constant values used throughout the application resources.
These constants help avoid code duplication and make the codebase easier to maintain.
"""

# Error messages for resources
ERROR_VALIDATION = "Validation error"
ERROR_VALIDATION_LOG = "Validation error: %s"
ERROR_DATABASE = "Database error"
ERROR_DATABASE_LOG = "Database error: %s"

MSG_NO_INPUT_DATA = "No input data provided"

# Column mapping messages
LOG_MAPPING_COLUMNS = "Auto-mapping %s spreadsheet headers"
LOG_MISSING_REQUIRED_HEADERS = "Required headers not mapped: %s"

# Settlement analysis messages
MSG_BUSINESS_NUMBER_REQUIRED = "business_number is required"
MSG_SUMMARY_PARAMS_REQUIRED = "business_number and settlement_month are required"
LOG_BUILDING_PIVOT = "Building settlement pivot for month %s"
LOG_COMPUTING_TOTALS = "Computing settlement totals for month %s"
LOG_COMPUTING_STATS = "Computing settlement statistics by month"
LOG_LISTING_MONTHS = "Listing settlement months"
LOG_MONTHLY_SUMMARY = "Computing monthly summary for business %s"
LOG_SETTLEMENT_SUMMARY = "Computing settlement summary for business %s, month %s"

# CSO integrity messages
LOG_CHECKING_INTEGRITY = "Checking CSO matching integrity for month %s"
LOG_INTEGRITY_RESULT = "Integrity check found %s CSO entries, %s unregistered"

# Mail merge messages
MSG_BUSINESS_NOT_FOUND = "No member is registered with this business number"
MSG_BUSINESS_NOT_APPROVED = "The member with this business number is not approved"
LOG_MAIL_MERGE_PREVIEW = "Rendering mail merge preview"
LOG_MAIL_MERGE_RENDER = "Rendering mail merge for business %s"
LOG_MAIL_MERGE_BUSINESS_NOT_FOUND = "Mail merge business not found: %s"
LOG_MAIL_MERGE_BUSINESS_NOT_APPROVED = "Mail merge business not approved: %s"
MSG_NO_RECIPIENTS = "No recipients match the selection"
LOG_RESOLVING_RECIPIENTS = "Resolving %s mail merge recipient selectors"
LOG_NO_RECIPIENTS = "No mail merge recipients resolved from %s"

# System status messages
LOG_SYSTEM_STATUS = "System status requested"
LOG_SYSTEM_STATUS_DB_FAILED = "System status database query failed: %s"
