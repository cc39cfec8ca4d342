"""redemption core tables

Revision ID: 4e7d1a9b2c30
Revises:
Create Date: 2026-10-19 09:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4e7d1a9b2c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(bind, table_name: str) -> bool:
    insp = sa.inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()

    if not _table_exists(bind, "businesses"):
        op.create_table(
            "businesses",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=150), nullable=False),
            sa.Column("description", sa.String(length=500), nullable=True),
            sa.Column("city", sa.String(length=100), nullable=True),
            sa.Column("state", sa.String(length=50), nullable=True),
            sa.Column("zip_code", sa.String(length=20), nullable=True),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not _table_exists(bind, "rewards"):
        op.create_table(
            "rewards",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("business_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("businesses.id"), nullable=True),
            sa.Column("reward_source", sa.String(length=30), nullable=False, server_default="LOCAL_BUSINESS"),
            sa.Column("title", sa.String(length=150), nullable=False),
            sa.Column("description", sa.String(length=1000), nullable=True),
            sa.Column("redemption_instructions", sa.String(length=1000), nullable=True),
            sa.Column("point_cost", sa.Integer(), nullable=False),
            sa.Column("retail_value", sa.Float(), nullable=True),
            sa.Column("status", sa.String(length=30), nullable=False, server_default="DRAFT"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
            sa.Column("total_available", sa.Integer(), nullable=True),
            sa.Column("current_redemptions", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("redemptions", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not _table_exists(bind, "points_ledger_entries"):
        op.create_table(
            "points_ledger_entries",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("user_id", sa.String(length=100), nullable=False),
            sa.Column("family_id", sa.String(length=100), nullable=False),
            sa.Column("user_name", sa.String(length=150), nullable=True),
            sa.Column("amount", sa.Integer(), nullable=False),
            sa.Column("entry_type", sa.String(length=20), nullable=False),
            sa.Column("source_type", sa.String(length=30), nullable=False),
            sa.Column("source_id", sa.String(length=100), nullable=True),
            sa.Column("redemption_id", postgresql.UUID(as_uuid=True), nullable=True),
            sa.Column("description", sa.String(length=500), nullable=True),
            sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        )
        op.create_index(
            "ix_points_ledger_entries_user_id_created_at",
            "points_ledger_entries",
            ["user_id", "created_at"],
        )
        op.create_index(
            "ix_points_ledger_entries_family_id_created_at",
            "points_ledger_entries",
            ["family_id", "created_at"],
        )

    if not _table_exists(bind, "redemptions"):
        op.create_table(
            "redemptions",
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("reward_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("rewards.id"), nullable=False),
            sa.Column("business_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("businesses.id"), nullable=True),
            sa.Column("user_id", sa.String(length=100), nullable=False),
            sa.Column("user_name", sa.String(length=150), nullable=True),
            sa.Column("family_id", sa.String(length=100), nullable=False),
            sa.Column("child_age", sa.Integer(), nullable=True),
            sa.Column("points_spent", sa.Integer(), nullable=False),
            sa.Column("jobs_used", sa.JSON(), nullable=False),
            sa.Column("ledger_entry_ids", sa.JSON(), nullable=False),
            sa.Column("redemption_code", sa.String(length=14), nullable=False),
            sa.Column("qr_code_data", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
            sa.Column("idempotency_key", sa.String(length=150), nullable=True),
            sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
            sa.Column("expires_at", sa.TIMESTAMP(), nullable=False),
            sa.Column("fulfilled_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("cancelled_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("cancellation_reason", sa.String(length=500), nullable=True),
            sa.Column("cancelled_by", sa.String(length=150), nullable=True),
            sa.Column("business_verified_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("business_verified_by", sa.String(length=150), nullable=True),
            sa.Column("redemption_city", sa.String(length=100), nullable=True),
            sa.Column("redemption_zip", sa.String(length=20), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.UniqueConstraint("user_id", "idempotency_key", name="uq_redemptions_user_id_idempotency_key"),
        )
        op.create_index("ix_redemptions_redemption_code", "redemptions", ["redemption_code"], unique=True)
        op.create_index("ix_redemptions_user_id", "redemptions", ["user_id"])
        op.create_index("ix_redemptions_family_id", "redemptions", ["family_id"])


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()

    if _table_exists(bind, "redemptions"):
        op.drop_index("ix_redemptions_family_id", table_name="redemptions")
        op.drop_index("ix_redemptions_user_id", table_name="redemptions")
        op.drop_index("ix_redemptions_redemption_code", table_name="redemptions")
        op.drop_table("redemptions")

    if _table_exists(bind, "points_ledger_entries"):
        op.drop_index("ix_points_ledger_entries_family_id_created_at", table_name="points_ledger_entries")
        op.drop_index("ix_points_ledger_entries_user_id_created_at", table_name="points_ledger_entries")
        op.drop_table("points_ledger_entries")

    if _table_exists(bind, "rewards"):
        op.drop_table("rewards")

    if _table_exists(bind, "businesses"):
        op.drop_table("businesses")
