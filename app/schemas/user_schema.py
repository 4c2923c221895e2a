# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schemas for member accounts.

UserImportSchema validates the member records loaded by the import
command.
"""

from marshmallow import EXCLUDE, ValidationError, fields, pre_load, validate, validates
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from app.models.constants import (
    COMPANY_NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PERSON_NAME_MAX_LENGTH,
)
from app.models.user import User
from app.schemas.constants import (
    BUSINESS_NUMBER_INVALID,
    BUSINESS_NUMBER_NOT_UNIQUE,
    CEO_NAME_EMPTY,
    CEO_NAME_TOO_LONG,
    COMPANY_NAME_EMPTY,
    COMPANY_NAME_TOO_LONG,
    EMAIL_TOO_LONG,
    PASSWORD_TOO_SHORT,
)
from app.utils.business_number import (
    is_valid_business_number,
    normalize_business_number,
)

_STRIPPED_FIELDS = (
    "business_number",
    "company_name",
    "ceo_name",
    "zipcode",
    "address1",
    "address2",
    "phone1",
    "phone2",
    "email",
    "email2",
)


class UserImportSchema(SQLAlchemyAutoSchema):
    """Validate one member record of an import file.

    Business numbers may be written with or without dashes; they are
    reduced to their 10 digits before validation. The password is
    optional, the importer falls back to a default one.

    Attributes:
        business_number: 사업자번호, 10 digits, not yet registered.
        company_name: Company name (required).
        ceo_name: Representative's name (required).
        email: Notification address (required, email format).
        password: Initial password, at least 6 characters (load only).
    """

    business_number = fields.Str(required=True)
    company_name = fields.Str(
        required=True,
        validate=validate.Length(
            max=COMPANY_NAME_MAX_LENGTH, error=COMPANY_NAME_TOO_LONG
        ),
    )
    ceo_name = fields.Str(
        required=True,
        validate=validate.Length(max=PERSON_NAME_MAX_LENGTH, error=CEO_NAME_TOO_LONG),
    )
    email = fields.Email(
        required=True,
        validate=validate.Length(max=EMAIL_MAX_LENGTH, error=EMAIL_TOO_LONG),
    )
    email2 = fields.Email(required=False, allow_none=True)
    password = fields.Str(
        required=False,
        allow_none=True,
        load_only=True,
        validate=validate.Length(min=PASSWORD_MIN_LENGTH, error=PASSWORD_TOO_SHORT),
    )

    class Meta:
        """Marshmallow schema configuration for imports.

        Attributes:
            model: The User SQLAlchemy model class.
            load_instance: If True, deserialize to model instances.
            exclude: Fields that an import never sets.
            unknown: How to handle unknown fields (EXCLUDE to ignore them).
        """

        model = User
        load_instance = False
        exclude = (
            "id",
            "password_hash",
            "password_changed_at",
            "created_at",
            "updated_at",
        )
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        """Strip string fields, drop blank optional values, normalize 사업자번호."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name in _STRIPPED_FIELDS:
            if isinstance(data.get(name), str):
                data[name] = data[name].strip()
        for name in ("email2", "password"):
            if data.get(name) == "":
                data[name] = None
        if data.get("business_number") is not None:
            data["business_number"] = normalize_business_number(
                data["business_number"]
            )
        return data

    @validates("business_number")
    def validate_business_number(self, value, **kwargs):
        """Validate the 10 digits and uniqueness of the business number.

        Raises:
            ValidationError: If the number is malformed or already used.
        """
        if not is_valid_business_number(value):
            raise ValidationError(BUSINESS_NUMBER_INVALID)
        if User.get_by_business_number(value):
            raise ValidationError(BUSINESS_NUMBER_NOT_UNIQUE)
        return value

    @validates("company_name")
    def validate_company_name(self, value, **kwargs):
        if not value:
            raise ValidationError(COMPANY_NAME_EMPTY)
        return value

    @validates("ceo_name")
    def validate_ceo_name(self, value, **kwargs):
        if not value:
            raise ValidationError(CEO_NAME_EMPTY)
        return value
