# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Portal member accounts.

A member is a business (CSO or the admin company) identified by its
사업자번호. Admins see every settlement; members only see the rows that
CSO matching attributes to them.
"""

from datetime import datetime, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from app.models.constants import (
    ADDRESS_MAX_LENGTH,
    BUSINESS_NUMBER_MAX_LENGTH,
    COMPANY_NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PASSWORD_HASH_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PERSON_NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    ZIPCODE_MAX_LENGTH,
)
from app.models.db import db
from app.models.types import BusinessNumber, TimestampMixin, UUIDMixin
from app.utils.business_number import normalize_business_number


class User(UUIDMixin, TimestampMixin, db.Model):
    """Business account registered on the portal.

    Attributes:
        id: UUID identifier (inherited from UUIDMixin).
        business_number: 10-digit 사업자번호, unique.
        company_name: Registered company name.
        ceo_name: Representative's name.
        zipcode, address1, address2: Postal address.
        phone1, phone2: Contact numbers.
        email, email2: Contact addresses; ``email`` receives notifications.
        email_verified: Whether ``email`` was confirmed.
        password_hash: werkzeug password hash, never serialized.
        is_admin: Admin accounts manage the portal and see all rows.
        is_approved: Members can only sign in once approved.
        must_change_password: Set for imported or reset accounts.
        password_changed_at: Last time the password was set.
    """

    __tablename__ = "users"

    business_number = db.Column(
        BusinessNumber(), nullable=False, unique=True, index=True
    )
    company_name = db.Column(db.String(COMPANY_NAME_MAX_LENGTH), nullable=False)
    ceo_name = db.Column(db.String(PERSON_NAME_MAX_LENGTH), nullable=False)
    zipcode = db.Column(db.String(ZIPCODE_MAX_LENGTH), nullable=True)
    address1 = db.Column(db.String(ADDRESS_MAX_LENGTH), nullable=True)
    address2 = db.Column(db.String(ADDRESS_MAX_LENGTH), nullable=True)
    phone1 = db.Column(db.String(PHONE_MAX_LENGTH), nullable=True)
    phone2 = db.Column(db.String(PHONE_MAX_LENGTH), nullable=True)
    email = db.Column(db.String(EMAIL_MAX_LENGTH), nullable=False)
    email2 = db.Column(db.String(EMAIL_MAX_LENGTH), nullable=True)
    email_verified = db.Column(db.Boolean, nullable=False, default=False)
    password_hash = db.Column(db.String(PASSWORD_HASH_MAX_LENGTH), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_approved = db.Column(db.Boolean, nullable=False, default=False)
    must_change_password = db.Column(db.Boolean, nullable=False, default=False)
    password_changed_at = db.Column(db.DateTime, nullable=True)

    def __init__(
        self,
        business_number: str,
        company_name: str,
        ceo_name: str,
        email: str,
        password: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.business_number = normalize_business_number(business_number)
        self.company_name = company_name
        self.ceo_name = ceo_name
        self.email = email
        if password is not None:
            self.set_password(password)

    def __repr__(self) -> str:
        return f"<User {self.business_number}> ({self.company_name})"

    def set_password(self, raw_password: str) -> None:
        """Hash and store a new password.

        Raises:
            ValueError: If the password is shorter than PASSWORD_MIN_LENGTH.
        """
        if raw_password is None or len(raw_password) < PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters."
            )
        self.password_hash = generate_password_hash(raw_password)
        self.password_changed_at = datetime.now(timezone.utc)

    def check_password(self, raw_password: str) -> bool:
        if not self.password_hash or raw_password is None:
            return False
        return check_password_hash(self.password_hash, raw_password)

    @classmethod
    def get_by_business_number(cls, business_number) -> "User | None":
        """Find a user by 사업자번호, accepting formatted or raw input."""
        digits = normalize_business_number(business_number)
        if len(digits) != BUSINESS_NUMBER_MAX_LENGTH:
            return None
        return cls.query.filter_by(business_number=digits).first()

    @classmethod
    def get_members(cls) -> list["User"]:
        """Approved, non-admin accounts: the recipients of settlements."""
        return (
            cls.query.filter_by(is_admin=False, is_approved=True)
            .order_by(cls.company_name)
            .all()
        )

    def to_dict(self) -> dict:
        """Serialize the account; the password hash is left out."""
        return {
            "id": str(self.id),
            "business_number": self.business_number,
            "company_name": self.company_name,
            "ceo_name": self.ceo_name,
            "zipcode": self.zipcode,
            "address1": self.address1,
            "address2": self.address2,
            "phone1": self.phone1,
            "phone2": self.phone2,
            "email": self.email,
            "email2": self.email2,
            "email_verified": bool(self.email_verified),
            "is_admin": bool(self.is_admin),
            "is_approved": bool(self.is_approved),
            "must_change_password": bool(self.must_change_password),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
