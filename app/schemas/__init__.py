# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas module exports.

This module provides convenient access to all Marshmallow schemas
used for data serialization and validation throughout the application.
"""

from app.schemas.column_mapping_schema import ColumnMappingRequestSchema
from app.schemas.mail_merge_schema import (
    MailMergePreviewSchema,
    MailMergeRecipientsSchema,
    MailMergeRenderSchema,
)
from app.schemas.settlement_schema import IntegrityQuerySchema, SettlementQuerySchema
from app.schemas.user_schema import UserImportSchema

__all__ = [
    "ColumnMappingRequestSchema",
    "IntegrityQuerySchema",
    "MailMergePreviewSchema",
    "MailMergeRecipientsSchema",
    "MailMergeRenderSchema",
    "SettlementQuerySchema",
    "UserImportSchema",
]
