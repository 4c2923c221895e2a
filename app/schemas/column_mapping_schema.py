# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Marshmallow schema for spreadsheet header auto-mapping requests."""

from marshmallow import EXCLUDE, Schema, fields, validate

from app.schemas.constants import HEADERS_EMPTY


class ColumnMappingRequestSchema(Schema):
    """Header row of an uploaded worksheet.

    Cells may be numbers or empty; they are kept raw and cleaned by the
    matcher, which drops blank ones.
    """

    headers = fields.List(
        fields.Raw(allow_none=True),
        required=True,
        validate=validate.Length(min=1, error=HEADERS_EMPTY),
    )
    threshold = fields.Float(
        required=False,
        allow_none=True,
        validate=validate.Range(min=0, max=1, min_inclusive=False),
    )

    class Meta:
        """Schema configuration."""

        unknown = EXCLUDE
