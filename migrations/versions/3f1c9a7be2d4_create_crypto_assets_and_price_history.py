"""create crypto_assets and crypto_price_history

Revision ID: 3f1c9a7be2d4
Revises:
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "3f1c9a7be2d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "crypto_assets",
        sa.Column("asset_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.Column("external_id", sa.Text(), nullable=False),
        sa.Column("icon_url", sa.Text(), nullable=True),
        sa.UniqueConstraint("external_id", name="uq_crypto_assets_external_id"),
    )

    op.create_table(
        "crypto_price_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("asset_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("price", sa.NUMERIC(38, 18), nullable=False),
        sa.Column("recorded_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["asset_id"],
            ["crypto_assets.asset_id"],
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("price > 0", name="ck_crypto_price_history_positive"),
    )

    op.create_index(
        "ix_crypto_price_history_asset_recorded",
        "crypto_price_history",
        ["asset_id", "recorded_at"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_crypto_price_history_asset_recorded",
        table_name="crypto_price_history",
    )
    op.drop_table("crypto_price_history")
    op.drop_table("crypto_assets")
