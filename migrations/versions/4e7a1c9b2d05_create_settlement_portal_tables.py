"""Create settlement portal tables

Revision ID: 4e7a1c9b2d05
Revises:
Create Date: 2026-01-12 10:04:51.482913

"""

import sqlalchemy as sa
from alembic import op

from app.models.types import GUID, BusinessNumber

# revision identifiers, used by Alembic.
revision = "4e7a1c9b2d05"
down_revision = None
branch_labels = None
depends_on = None

SETTLEMENT_TEXT_COLUMNS = (
    ("웹코드", 100),
    ("거래처명", 255),
    ("자체코드", 100),
    ("CSO관리업체", 255),
    ("CSO관리업체2", 255),
    ("부서1", 255),
    ("부서2", 255),
    ("부서3", 255),
    ("영업사원", 255),
    ("제조사", 255),
    ("보험코드", 100),
    ("제품명", 255),
)

SETTLEMENT_NUMERIC_COLUMNS = (
    "수량",
    "단가",
    "금액",
    "제약수수료_제한금액",
    "제약_수수료율",
    "추가수수료율_제약",
    "제약수수료율_통합",
    "제약_수수료",
    "거래처제품_인센티브율_제약",
    "거래처제품_제약",
    "관리업체_인센티브율_제약",
    "관리업체_제약",
    "제약수수료_합계",
    "담당_수수료율",
    "추가수수료율_담당",
    "담당수수료율_통합",
    "담당_수수료",
    "거래처제품_인센티브율_담당",
    "거래처제품_담당",
    "관리업체_인센티브율_담당",
    "관리업체_담당",
    "담당수수료_합계",
)

SETTLEMENT_NOTE_COLUMNS = ("처방전_비고", "처방전_상세_비고", "제품_비고", "제품_비고_2")


def _timestamps():
    return [
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("business_number", BusinessNumber(), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("ceo_name", sa.String(length=100), nullable=False),
        sa.Column("zipcode", sa.String(length=10), nullable=True),
        sa.Column("address1", sa.String(length=300), nullable=True),
        sa.Column("address2", sa.String(length=300), nullable=True),
        sa.Column("phone1", sa.String(length=20), nullable=True),
        sa.Column("phone2", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("email2", sa.String(length=255), nullable=True),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("must_change_password", sa.Boolean(), nullable=False),
        sa.Column("password_changed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_users_business_number", "users", ["business_number"], unique=True
    )

    op.create_table(
        "settlements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("business_number", BusinessNumber(), nullable=True),
        sa.Column("처방월", sa.String(length=7), nullable=True),
        sa.Column("정산월", sa.String(length=7), nullable=False),
        *[
            sa.Column(name, sa.String(length=length), nullable=True)
            for name, length in SETTLEMENT_TEXT_COLUMNS
        ],
        *[
            sa.Column(name, sa.Float(), nullable=True)
            for name in SETTLEMENT_NUMERIC_COLUMNS
        ],
        *[
            sa.Column(name, sa.String(length=1000), nullable=True)
            for name in SETTLEMENT_NOTE_COLUMNS
        ],
        sa.Column("수정일시", sa.String(length=255), nullable=True),
        sa.Column("수정자", sa.String(length=255), nullable=True),
        sa.Column(
            "upload_date", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Months are replaced and queried as a whole
    op.create_index("ix_settlements_정산월", "settlements", ["정산월"])
    op.create_index(
        "ix_settlements_business_number", "settlements", ["business_number"]
    )
    op.create_index("ix_settlements_CSO관리업체", "settlements", ["CSO관리업체"])

    op.create_table(
        "column_settings",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("column_key", sa.String(length=100), nullable=False),
        sa.Column("column_name", sa.String(length=100), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_visible", sa.Boolean(), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("is_summary", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_column_settings_column_key", "column_settings", ["column_key"], unique=True
    )

    op.create_table(
        "cso_matching",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cso_company_name", sa.String(length=200), nullable=False),
        sa.Column("business_number", BusinessNumber(), nullable=False),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cso_company_name"),
    )
    op.create_index(
        "ix_cso_matching_business_number", "cso_matching", ["business_number"]
    )

    op.create_table(
        "email_logs",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("recipient_email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column(
            "template_type",
            sa.Enum(
                "registration_request",
                "approval_complete",
                "approval_rejected",
                "settlement_uploaded",
                "password_reset",
                "mail_merge",
                name="email_template_type",
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("pending", "sent", "failed", name="email_status"),
            nullable=False,
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_email_logs_created_at", "email_logs", ["created_at"])

    op.create_table(
        "company_settings",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=True),
        sa.Column("ceo_name", sa.String(length=255), nullable=True),
        sa.Column("business_number", sa.String(length=10), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=255), nullable=True),
        sa.Column("fax", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("copyright", sa.String(length=255), nullable=True),
        sa.Column("additional_info", sa.Text(), nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "password_reset_tokens",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("user_id", GUID(), nullable=False),
        sa.Column("business_number", BusinessNumber(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("token", sa.String(length=255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_password_reset_tokens_token",
        "password_reset_tokens",
        ["token"],
        unique=True,
    )


def downgrade():
    op.drop_index("ix_password_reset_tokens_token", table_name="password_reset_tokens")
    op.drop_table("password_reset_tokens")
    op.drop_table("company_settings")
    op.drop_index("ix_email_logs_created_at", table_name="email_logs")
    op.drop_table("email_logs")
    op.drop_index("ix_cso_matching_business_number", table_name="cso_matching")
    op.drop_table("cso_matching")
    op.drop_index("ix_column_settings_column_key", table_name="column_settings")
    op.drop_table("column_settings")
    op.drop_index("ix_settlements_CSO관리업체", table_name="settlements")
    op.drop_index("ix_settlements_business_number", table_name="settlements")
    op.drop_index("ix_settlements_정산월", table_name="settlements")
    op.drop_table("settlements")
    op.drop_index("ix_users_business_number", table_name="users")
    op.drop_table("users")
    sa.Enum(name="email_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="email_template_type").drop(op.get_bind(), checkfirst=True)
