# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""History of notification emails.

The portal keeps one row per email it queued. Sending itself happens
outside this service; the log is read for the admin dashboard.
"""

from app.models.constants import (
    EMAIL_MAX_LENGTH,
    EMAIL_STATUSES,
    EMAIL_SUBJECT_MAX_LENGTH,
    EMAIL_TEMPLATE_TYPES,
)
from app.models.db import db
from app.models.types import UUIDMixin


class EmailLog(UUIDMixin, db.Model):
    """One notification email and its delivery status.

    Attributes:
        recipient_email: Address the email went to.
        subject: Rendered subject line.
        template_type: One of EMAIL_TEMPLATE_TYPES.
        status: One of EMAIL_STATUSES.
        error_message: Delivery error, when status is ``failed``.
        sent_at: Delivery time, when status is ``sent``.
        created_at: Time the email was queued.
    """

    __tablename__ = "email_logs"

    recipient_email = db.Column(db.String(EMAIL_MAX_LENGTH), nullable=False)
    subject = db.Column(db.String(EMAIL_SUBJECT_MAX_LENGTH), nullable=False)
    template_type = db.Column(
        db.Enum(*EMAIL_TEMPLATE_TYPES, name="email_template_type"), nullable=False
    )
    status = db.Column(
        db.Enum(*EMAIL_STATUSES, name="email_status"),
        nullable=False,
        default="pending",
    )
    error_message = db.Column(db.Text, nullable=True)
    sent_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return (
            f"<EmailLog {self.template_type}> ({self.recipient_email}, {self.status})"
        )

    @classmethod
    def get_recent(
        cls, status: str | None = None, limit: int | None = None
    ) -> list["EmailLog"]:
        query = cls.query
        if status:
            query = query.filter_by(status=status)
        query = query.order_by(cls.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @classmethod
    def get_stats(cls) -> dict[str, int]:
        """Count logs per status.

        Returns:
            ``{"total", "sent", "failed", "pending"}`` counts.
        """
        rows = (
            db.session.query(cls.status, db.func.count(cls.id))
            .group_by(cls.status)
            .all()
        )
        counts = {status: 0 for status in EMAIL_STATUSES}
        for status, count in rows:
            counts[status] = count
        return {
            "total": sum(counts.values()),
            "sent": counts["sent"],
            "failed": counts["failed"],
            "pending": counts["pending"],
        }

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "recipient_email": self.recipient_email,
            "subject": self.subject,
            "template_type": self.template_type,
            "status": self.status,
            "error_message": self.error_message,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
