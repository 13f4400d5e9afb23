"""create discount table

Discount catalog read by the evaluation engine and written by the admin API.

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


revision: str = "0001_create_discount"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "discount",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=64), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("discount_type", sa.String(length=16), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("max_discount_amount", sa.Float(), nullable=True),
        sa.Column("target_type", sa.String(length=16), nullable=False, server_default="all"),
        sa.Column("product_ids", sa.JSON(), nullable=True),
        sa.Column("category_names", sa.JSON(), nullable=True),
        sa.Column("customer_ids", sa.JSON(), nullable=True),
        sa.Column("min_order_amount", sa.Float(), nullable=True),
        sa.Column("is_first_purchase_only", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_automatic", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("usage_limit", sa.Integer(), nullable=True),
        sa.Column("usage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("priority", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_discount_code", "discount", ["code"], unique=True)
    op.create_index("ix_discount_is_automatic", "discount", ["is_automatic"])


def downgrade() -> None:
    op.drop_index("ix_discount_is_automatic", table_name="discount")
    op.drop_index("ix_discount_code", table_name="discount")
    op.drop_table("discount")
