# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Company information printed in the portal footer and in emails."""

from app.models.constants import (
    BUSINESS_NUMBER_MAX_LENGTH,
    COMPANY_FIELD_MAX_LENGTH,
)
from app.models.db import db
from app.models.types import UUIDMixin


class CompanySettings(UUIDMixin, db.Model):
    """Operator company details. The portal uses a single row."""

    __tablename__ = "company_settings"

    company_name = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    ceo_name = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    business_number = db.Column(db.String(BUSINESS_NUMBER_MAX_LENGTH), nullable=True)
    address = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    phone = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    fax = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    email = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    website = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    copyright = db.Column(db.String(COMPANY_FIELD_MAX_LENGTH), nullable=True)
    additional_info = db.Column(db.Text, nullable=True)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<CompanySettings {self.company_name}>"

    @classmethod
    def get_current(cls) -> "CompanySettings | None":
        """Return the settings row, or None when nothing was saved yet."""
        return cls.query.order_by(cls.updated_at.desc()).first()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "company_name": self.company_name,
            "ceo_name": self.ceo_name,
            "business_number": self.business_number,
            "address": self.address,
            "phone": self.phone,
            "fax": self.fax,
            "email": self.email,
            "website": self.website,
            "copyright": self.copyright,
            "additional_info": self.additional_info,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
