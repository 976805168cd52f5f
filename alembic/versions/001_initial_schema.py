"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2024-01-01 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Dealer accounts, keyed by the identity provider's user id
    op.create_table(
        "dealers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(50), nullable=False, server_default="dealer"),
        sa.Column("clerk_user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("metadata", JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    # Per-store AutoTrader configuration
    op.create_table(
        "store_config",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("clerk_user_id", sa.String(255), nullable=True),
        sa.Column("store_name", sa.String(255), nullable=False),
        sa.Column("store_type", sa.String(100), nullable=True),
        sa.Column("advertisement_id", sa.String(255), nullable=True),
        sa.Column("additional_advertisement_ids", sa.Text(), nullable=True),
        sa.Column("primary_advertisement_id", sa.String(255), nullable=True),
        sa.Column("advertisement_ids", sa.Text(), nullable=True),
        sa.Column("autotrader_key", sa.String(500), nullable=True),
        sa.Column("autotrader_secret", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_store_config_email", "store_config", ["email"])

    # Staff who act on behalf of a store owner
    op.create_table(
        "team_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "store_owner_id",
            UUID(as_uuid=True),
            sa.ForeignKey("dealers.id"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="employee"),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("clerk_user_id", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_team_members_store_owner_id", "team_members", ["store_owner_id"])
    op.create_index("ix_team_members_clerk_user_id", "team_members", ["clerk_user_id"])

    # Dealer photo library: default/fallback/other images
    op.create_table(
        "stock_images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "dealer_id",
            UUID(as_uuid=True),
            sa.ForeignKey("dealers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("public_url", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("image_type", sa.String(50), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_stock_images_dealer_sort", "stock_images", ["dealer_id", "sort_order"])


def downgrade() -> None:
    op.drop_index("ix_stock_images_dealer_sort", table_name="stock_images")
    op.drop_table("stock_images")
    op.drop_index("ix_team_members_clerk_user_id", table_name="team_members")
    op.drop_index("ix_team_members_store_owner_id", table_name="team_members")
    op.drop_table("team_members")
    op.drop_index("ix_store_config_email", table_name="store_config")
    op.drop_table("store_config")
    op.drop_table("dealers")
