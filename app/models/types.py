# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Custom column types and mixins shared by the portal models.

GUID keeps user identifiers portable between SQLite (tests, local runs)
and PostgreSQL. BusinessNumber stores 사업자번호 values in one canonical
shape whatever the caller passes in.
"""

import uuid

from sqlalchemy import String, TypeDecorator
from sqlalchemy.dialects.postgresql import UUID as PostgreSQLUUID  # noqa: N811

from app.models.constants import BUSINESS_NUMBER_MAX_LENGTH
from app.models.db import db
from app.utils.business_number import normalize_business_number


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Native UUID on PostgreSQL, CHAR(36) elsewhere. Always yields
    ``uuid.UUID`` objects.
    """

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgreSQLUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(
        self, value: uuid.UUID | str | None, dialect
    ) -> uuid.UUID | str | None:
        """Accept UUID objects or their string form."""
        if value is None:
            return value

        if isinstance(value, str):
            value = uuid.UUID(value)

        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(
        self, value: uuid.UUID | str | None, dialect
    ) -> uuid.UUID | None:
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            return uuid.UUID(value)
        return value


class BusinessNumber(TypeDecorator):
    """사업자번호 column stored as bare digits.

    ``123-45-67890``, ``1234567890`` and ``1234567890.0`` are all written
    as ``1234567890``. An empty value is stored as NULL.

    Example:
        >>> class Shop(db.Model):
        ...     business_number = db.Column(BusinessNumber(), unique=True)
    """

    impl = String(BUSINESS_NUMBER_MAX_LENGTH)
    cache_ok = True

    def process_bind_param(self, value, dialect) -> str | None:
        digits = normalize_business_number(value)
        return digits or None

    def process_result_value(self, value, dialect) -> str | None:
        return value


class UUIDMixin:
    """Adds a UUID primary key generated with uuid.uuid4()."""

    id = db.Column(GUID(), primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """Adds created_at and updated_at, both maintained by the database."""

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )
