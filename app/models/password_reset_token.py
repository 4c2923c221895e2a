# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""One-time password reset tokens.

Tokens are issued to a member's email and stay usable for
RESET_TOKEN_EXPIRY_MINUTES, once.
"""

import secrets
from datetime import datetime, timedelta, timezone

from app.models.constants import (
    EMAIL_MAX_LENGTH,
    RESET_TOKEN_EXPIRY_MINUTES,
    RESET_TOKEN_MAX_LENGTH,
)
from app.models.db import db
from app.models.types import GUID, BusinessNumber, UUIDMixin


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PasswordResetToken(UUIDMixin, db.Model):
    """Reset token for one user.

    Attributes:
        user_id: Owner (users.id).
        business_number: Owner's 사업자번호, kept for lookups.
        email: Address the token was sent to.
        token: Random URL-safe token, unique.
        expires_at: Naive UTC expiry time.
        used_at: Set once the token has been consumed.
        created_at: Issue time.
    """

    __tablename__ = "password_reset_tokens"

    user_id = db.Column(
        GUID(), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    business_number = db.Column(BusinessNumber(), nullable=False)
    email = db.Column(db.String(EMAIL_MAX_LENGTH), nullable=False)
    token = db.Column(
        db.String(RESET_TOKEN_MAX_LENGTH), nullable=False, unique=True, index=True
    )
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return (
            f"<PasswordResetToken {self.business_number}> (expires {self.expires_at})"
        )

    @classmethod
    def issue(cls, user, now: datetime | None = None) -> "PasswordResetToken":
        """Create (without committing) a fresh token for a user."""
        now = now or _utcnow()
        return cls(
            user_id=user.id,
            business_number=user.business_number,
            email=user.email,
            token=secrets.token_urlsafe(32),
            expires_at=now + timedelta(minutes=RESET_TOKEN_EXPIRY_MINUTES),
        )

    @classmethod
    def get_by_token(cls, token: str) -> "PasswordResetToken | None":
        if not token:
            return None
        return cls.query.filter_by(token=token).first()

    def check_usable(self, now: datetime | None = None) -> str | None:
        """Return why the token cannot be used, or None when it can.

        Reasons are ``used`` and ``expired``. ``not_found`` is reported by
        check_token for unknown tokens.
        """
        now = now or _utcnow()
        if self.used_at is not None:
            return "used"
        if self.expires_at <= now:
            return "expired"
        return None

    @classmethod
    def check_token(cls, token: str, now: datetime | None = None) -> str | None:
        """Look a token up and return None if usable, else the reason."""
        record = cls.get_by_token(token)
        if record is None:
            return "not_found"
        return record.check_usable(now)

    def mark_used(self, now: datetime | None = None) -> None:
        self.used_at = now or _utcnow()
