"""Add farmers, milk_records and feed_records

Revision ID: 0002_farm_records
Revises: 0001_initial
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0002_farm_records"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # -- farmers --------------------------------------------------------
    op.create_table(
        "farmers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("village", sa.String(255), nullable=False),
        sa.Column("contact", sa.String(32), nullable=False),
        sa.Column("bank_acc", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_farmers_name", "farmers", ["name"])

    # -- milk_records ---------------------------------------------------
    op.create_table(
        "milk_records",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "farmer_id",
            sa.String(36),
            sa.ForeignKey("farmers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("shift", sa.Enum("MORNING", "EVENING", name="milk_shift"), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("fat", sa.Float(), nullable=False),
        sa.Column("degree", sa.Float(), nullable=False),
        sa.Column("rate", sa.Float(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_milk_records_farmer_id", "milk_records", ["farmer_id"])
    op.create_index("idx_milk_records_date", "milk_records", ["date"])

    # -- feed_records ---------------------------------------------------
    op.create_table(
        "feed_records",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "farmer_id",
            sa.String(36),
            sa.ForeignKey("farmers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("feed_type", sa.String(128), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "PAID", name="feed_payment_status"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_feed_records_farmer_id", "feed_records", ["farmer_id"])
    op.create_index("idx_feed_records_date", "feed_records", ["date"])


def downgrade() -> None:
    op.drop_index("idx_feed_records_date", table_name="feed_records")
    op.drop_index("idx_feed_records_farmer_id", table_name="feed_records")
    op.drop_table("feed_records")
    op.drop_index("idx_milk_records_date", table_name="milk_records")
    op.drop_index("idx_milk_records_farmer_id", table_name="milk_records")
    op.drop_table("milk_records")
    op.drop_index("idx_farmers_name", table_name="farmers")
    op.drop_table("farmers")
