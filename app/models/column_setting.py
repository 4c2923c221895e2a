# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Per-column display settings for settlement tables.

Column settings decide which settlement columns members see, in which
order, and which of them are summed in monthly summaries. Defaults are
seeded from ``app/data/settlement_columns.json``.
"""

from app.models.constants import COLUMN_KEY_MAX_LENGTH, COLUMN_NAME_MAX_LENGTH
from app.models.db import db
from app.models.types import TimestampMixin, UUIDMixin


class ColumnSetting(UUIDMixin, TimestampMixin, db.Model):
    """Display configuration of one settlement column.

    Attributes:
        column_key: Settlement column key (e.g. ``제약수수료_합계``), unique.
        column_name: Label shown to members.
        display_order: Position in tables, ascending.
        is_visible: Whether members see the column.
        is_required: Required columns cannot be hidden.
        is_summary: Whether the column is summed in monthly summaries.
    """

    __tablename__ = "column_settings"

    column_key = db.Column(
        db.String(COLUMN_KEY_MAX_LENGTH), nullable=False, unique=True, index=True
    )
    column_name = db.Column(db.String(COLUMN_NAME_MAX_LENGTH), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    is_visible = db.Column(db.Boolean, nullable=False, default=False)
    is_required = db.Column(db.Boolean, nullable=False, default=False)
    is_summary = db.Column(db.Boolean, nullable=False, default=False)

    def __init__(
        self,
        column_key: str,
        column_name: str,
        display_order: int = 0,
        is_visible: bool = False,
        is_required: bool = False,
        is_summary: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.column_key = column_key
        self.column_name = column_name
        self.display_order = display_order
        self.is_visible = is_visible
        self.is_required = is_required
        self.is_summary = is_summary

    def __repr__(self) -> str:
        return f"<ColumnSetting {self.column_key}> (order: {self.display_order})"

    @classmethod
    def get_ordered(cls) -> list["ColumnSetting"]:
        return cls.query.order_by(cls.display_order, cls.column_key).all()

    @classmethod
    def get_visible(cls) -> list["ColumnSetting"]:
        """Columns members see, in display order."""
        return (
            cls.query.filter_by(is_visible=True)
            .order_by(cls.display_order, cls.column_key)
            .all()
        )

    @classmethod
    def get_summary_columns(cls) -> list["ColumnSetting"]:
        return (
            cls.query.filter_by(is_summary=True)
            .order_by(cls.display_order, cls.column_key)
            .all()
        )

    @classmethod
    def get_by_key(cls, column_key: str) -> "ColumnSetting | None":
        return cls.query.filter_by(column_key=column_key).first()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "column_key": self.column_key,
            "column_name": self.column_name,
            "display_order": self.display_order,
            "is_visible": bool(self.is_visible),
            "is_required": bool(self.is_required),
            "is_summary": bool(self.is_summary),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
