import uuid
from datetime import timezone
from sqlalchemy import (
    Table,
    Column,
    Text,
    Date,
    TIMESTAMP,
    NUMERIC,
    MetaData,
    ForeignKey,
    Index,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID

metadata = MetaData()


def _utc_day(context):
    recorded_at = context.get_current_parameters()["recorded_at"]
    if recorded_at.tzinfo is None:
        return recorded_at.date()
    return recorded_at.astimezone(timezone.utc).date()


# ---------- ASSETS ----------

crypto_assets = Table(
    "crypto_assets",
    metadata,
    Column("asset_id", UUID(as_uuid=True), primary_key=True, default=uuid.uuid4),
    Column("name", Text, nullable=False),
    Column("symbol", Text, nullable=False),
    Column("external_id", Text, nullable=False),  # coingecko id, e.g. "bitcoin"
    Column("icon_url", Text),
    UniqueConstraint("external_id", name="uq_crypto_assets_external_id"),
)

# ---------- PRICE HISTORY (append-only) ----------

crypto_price_history = Table(
    "crypto_price_history",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, default=uuid.uuid4),
    Column(
        "asset_id",
        UUID(as_uuid=True),
        ForeignKey("crypto_assets.asset_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("price", NUMERIC(38, 18), nullable=False),
    Column("recorded_at", TIMESTAMP(timezone=True), nullable=False),
    # UTC calendar day of recorded_at
    Column("recorded_on", Date, nullable=False, default=_utc_day),
    Index("ix_crypto_price_history_asset_recorded", "asset_id", "recorded_at"),
    CheckConstraint("price > 0", name="ck_crypto_price_history_positive"),
    UniqueConstraint(
        "asset_id",
        "recorded_on",
        name="uq_crypto_price_history_asset_day",
    ),
)
