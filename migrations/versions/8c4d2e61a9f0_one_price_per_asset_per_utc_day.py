"""one price per asset per UTC day

Revision ID: 8c4d2e61a9f0
Revises: 3f1c9a7be2d4
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "8c4d2e61a9f0"
down_revision: Union[str, Sequence[str], None] = "3f1c9a7be2d4"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "crypto_price_history",
        sa.Column("recorded_on", sa.Date(), nullable=True),
    )

    op.execute(
        "UPDATE crypto_price_history "
        "SET recorded_on = (recorded_at AT TIME ZONE 'UTC')::date"
    )

    # keep the earliest record of each asset-day
    op.execute(
        """
        DELETE FROM crypto_price_history h
        USING crypto_price_history k
        WHERE h.asset_id = k.asset_id
          AND h.recorded_on = k.recorded_on
          AND (h.recorded_at, h.id) > (k.recorded_at, k.id)
        """
    )

    op.alter_column("crypto_price_history", "recorded_on", nullable=False)

    op.create_unique_constraint(
        "uq_crypto_price_history_asset_day",
        "crypto_price_history",
        ["asset_id", "recorded_on"],
    )


def downgrade() -> None:
    op.drop_constraint(
        "uq_crypto_price_history_asset_day",
        "crypto_price_history",
        type_="unique",
    )
    op.drop_column("crypto_price_history", "recorded_on")
