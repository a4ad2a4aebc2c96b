"""Initial schema: crops and their interests

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "crops",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(100), nullable=False),
        sa.Column("price_per_unit", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(50), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("image", sa.String(1024), nullable=False),
        sa.Column("owner_id", sa.String(128), nullable=True),
        sa.Column("owner_email", sa.String(255), nullable=False),
        sa.Column("owner_name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("quantity >= 0", name="ck_crops_quantity_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crops_owner_email", "crops", ["owner_email"], unique=False)
    op.create_index("ix_crops_created_at", "crops", ["created_at"], unique=False)

    op.create_table(
        "interests",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("crop_id", sa.String(32), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("quantity >= 1", name="ck_interests_quantity_positive"),
        sa.ForeignKeyConstraint(["crop_id"], ["crops.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("crop_id", "user_email", name="uq_interests_crop_buyer"),
    )
    op.create_index("ix_interests_crop_id", "interests", ["crop_id"], unique=False)
    op.create_index("ix_interests_user_email", "interests", ["user_email"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_interests_user_email", "interests")
    op.drop_index("ix_interests_crop_id", "interests")
    op.drop_table("interests")
    op.drop_index("ix_crops_created_at", "crops")
    op.drop_index("ix_crops_owner_email", "crops")
    op.drop_table("crops")
